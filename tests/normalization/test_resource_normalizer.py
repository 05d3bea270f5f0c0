import pytest

from drift_service.normalization import ResourceNormalizer


def test_normalizer_builds_plan_document():
    plan = {
        "format_version": "1.2",
        "terraform_version": "1.13.1",
        "resource_changes": [
            {
                "address": "module.network.aws_subnet.private[0]",
                "module_address": "module.network",
                "mode": "managed",
                "type": "aws_subnet",
                "name": "private",
                "provider_name": "registry.terraform.io/hashicorp/aws",
                "change": {"actions": ["delete", "create"]},
                "action_reason": "replace_because_cannot_update",
            }
        ],
    }

    document = ResourceNormalizer().normalize(plan)

    assert document.format_version == "1.2"
    assert document.terraform_version == "1.13.1"
    change = document.resource_changes[0]
    assert change.address == "module.network.aws_subnet.private[0]"
    assert change.module_address == "module.network"
    assert change.type == "aws_subnet"
    assert change.name == "private"
    assert change.provider_name == "registry.terraform.io/hashicorp/aws"
    assert change.actions == ["delete", "create"]
    assert change.action_reason == "replace_because_cannot_update"
    assert not change.is_module_root


def test_normalizer_defaults_missing_fields():
    document = ResourceNormalizer().normalize(
        {"format_version": "1.0", "resource_changes": [{"address": "aws_s3_bucket.logs"}]}
    )

    assert document.terraform_version == ""
    assert len(document.resource_changes) == 1
    change = document.resource_changes[0]
    assert change.mode == "managed"
    assert change.actions == []
    assert change.module_address == ""
    assert change.is_module_root


def test_normalizer_handles_missing_resource_changes():
    document = ResourceNormalizer().normalize({"format_version": "1.0", "resource_changes": None})

    assert document.resource_changes == []


@pytest.mark.parametrize(
    "resource_changes",
    [
        5,
        ["not-a-change"],
        [{"address": "aws_s3_bucket.logs", "change": ["delete"]}],
    ],
)
def test_normalizer_rejects_malformed_resource_changes(resource_changes):
    with pytest.raises(ValueError):
        ResourceNormalizer().normalize({"format_version": "1.0", "resource_changes": resource_changes})
