"""Resource types whose updates are escalated to high severity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

DEFAULT_CRITICAL_RESOURCES: Tuple[str, ...] = (
    # Databases: data loss or service disruption
    "aws_db_instance",
    "aws_db_cluster",
    "aws_rds_cluster",
    "aws_rds_cluster_instance",
    "aws_rds_global_cluster",
    "aws_db_subnet_group",
    "aws_db_parameter_group",
    "aws_rds_cluster_parameter_group",
    "aws_dynamodb_table",
    "aws_dynamodb_global_table",
    "aws_elasticache_cluster",
    "aws_elasticache_replication_group",
    "aws_redshift_cluster",
    "aws_neptune_cluster",
    "aws_neptune_cluster_instance",
    "aws_docdb_cluster",
    "aws_docdb_cluster_instance",
    # Storage
    "aws_s3_bucket",
    "aws_s3_bucket_policy",
    "aws_s3_bucket_public_access_block",
    "aws_efs_file_system",
    "aws_efs_access_point",
    "aws_backup_vault",
    "aws_backup_plan",
    # Network
    "aws_vpc",
    "aws_subnet",
    "aws_route_table",
    "aws_route_table_association",
    "aws_internet_gateway",
    "aws_nat_gateway",
    "aws_vpc_peering_connection",
    "aws_vpn_gateway",
    "aws_vpn_connection",
    "aws_customer_gateway",
    "aws_transit_gateway",
    "aws_transit_gateway_route_table",
    "aws_vpc_endpoint",
    "aws_vpc_endpoint_service",
    # Security and identity
    "aws_security_group",
    "aws_security_group_rule",
    "aws_network_acl",
    "aws_network_acl_rule",
    "aws_iam_role",
    "aws_iam_role_policy",
    "aws_iam_role_policy_attachment",
    "aws_iam_policy",
    "aws_iam_user",
    "aws_iam_user_policy",
    "aws_iam_user_policy_attachment",
    "aws_iam_group",
    "aws_iam_group_policy",
    "aws_iam_group_policy_attachment",
    "aws_kms_key",
    "aws_kms_alias",
    "aws_secretsmanager_secret",
    "aws_secretsmanager_secret_version",
    # WAF and Shield
    "aws_waf_web_acl",
    "aws_waf_rule",
    "aws_waf_rule_group",
    "aws_wafv2_web_acl",
    "aws_wafv2_rule_group",
    "aws_wafv2_ip_set",
    "aws_wafv2_regex_pattern_set",
    "aws_waf_rate_based_rule",
    "aws_shield_protection",
    "aws_shield_protection_group",
)


def merge_critical_resources(
    defaults: Iterable[str], user_defined: Iterable[str] | None = None
) -> Tuple[str, ...]:
    """Merge defaults and user-defined types, defaults first, without duplicates."""

    merged: list[str] = []
    seen: set[str] = set()
    for resource_type in [*defaults, *(user_defined or ())]:
        if not resource_type or resource_type in seen:
            continue
        merged.append(resource_type)
        seen.add(resource_type)
    return tuple(merged)


@dataclass(slots=True, frozen=True)
class CriticalResourceRegistry:
    """Immutable set of critical resource types used by the plan analyzer."""

    resource_types: Tuple[str, ...] = DEFAULT_CRITICAL_RESOURCES

    @classmethod
    def with_defaults(cls, user_defined: Sequence[str] | None = None) -> "CriticalResourceRegistry":
        return cls(merge_critical_resources(DEFAULT_CRITICAL_RESOURCES, user_defined))

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self.resource_types

    def __iter__(self) -> Iterator[str]:
        return iter(self.resource_types)

    def __len__(self) -> int:
        return len(self.resource_types)


__all__ = [
    "CriticalResourceRegistry",
    "DEFAULT_CRITICAL_RESOURCES",
    "merge_critical_resources",
]
