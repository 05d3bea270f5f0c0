from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from drift_service.adapters import ExtractionError, PlanLoaderError
from drift_service.config import DriftSettings
from drift_service.models import OverallStatus, PlanDocument, ResourceChange, VersionRecord
from drift_service.service import DriftService

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class DummyExtractor:
    def __init__(self, records: list[VersionRecord]) -> None:
        self.records = records
        self.roots: list[Path] = []

    def __call__(self, root: Path) -> "DummyExtractor":
        self.roots.append(root)
        return self

    def scan(self) -> list[VersionRecord]:
        return self.records


class FailingExtractor:
    def __init__(self, root: Path) -> None:
        self.root = root

    def scan(self) -> list[VersionRecord]:
        raise ExtractionError(f"Scan path does not exist: {self.root}")


class DummyPlanLoader:
    def __init__(self, path: Path, **kwargs: Any) -> None:
        self.path = path

    def load_plan(self) -> PlanDocument:
        return PlanDocument(
            format_version="1.2",
            terraform_version="1.13.1",
            resource_changes=[
                ResourceChange(
                    address="aws_s3_bucket.example",
                    type="aws_s3_bucket",
                    name="example",
                    actions=["create"],
                )
            ],
        )


class FailingPlanLoader:
    def __init__(self, path: Path, **kwargs: Any) -> None:
        self.path = path

    def load_plan(self) -> PlanDocument:
        raise PlanLoaderError("invalid plan file format")


def test_scan_versions_uses_settings_baseline(tmp_path):
    extractor = DummyExtractor([VersionRecord(file_path="versions.tf", terraform_version="~> 1.12")])
    service = DriftService(
        DriftSettings(terraform_version="~> 1.12"), extractor_factory=extractor
    )

    report = service.scan_versions(tmp_path)

    assert extractor.roots == [tmp_path]
    assert report.scan_root == str(tmp_path.resolve())
    assert report.summary.files_in_sync == 1
    assert report.exit_code() == 0


def test_analyze_plan_uses_configured_critical_resources(tmp_path):
    service = DriftService(DriftSettings(critical_resources=["aws_lambda_function"]))

    analysis = service.analyze_plan(FIXTURES / "plan-mixed.json")

    severities = {resource.address: resource.severity.value for resource in analysis.resource_changes}
    assert severities["aws_lambda_function.worker"] == "high"
    assert analysis.exit_code() == 2


def test_run_all_combines_both_analyses(tmp_path):
    extractor = DummyExtractor([VersionRecord(file_path="versions.tf", terraform_version="~> 1.12")])
    service = DriftService(extractor_factory=extractor, plan_loader_factory=DummyPlanLoader)

    combined = service.run_all(tmp_path, plan_path=tmp_path / "plan.json")

    assert combined.version_drift is not None
    assert combined.version_drift.minor_drift == 1
    assert combined.plan_analysis is not None
    assert combined.plan_analysis.additions == 1
    assert combined.overall_status is OverallStatus.WARNING
    assert combined.has_issues
    assert combined.exit_code() == 1


def test_run_all_without_plan_file_skips_plan(tmp_path):
    extractor = DummyExtractor([])
    service = DriftService(extractor_factory=extractor)

    combined = service.run_all(tmp_path)

    assert combined.plan_analysis is None
    assert combined.version_drift is not None
    assert combined.overall_status is OverallStatus.CLEAN
    assert combined.exit_code() == 0


def test_run_all_records_failures_instead_of_raising(tmp_path):
    service = DriftService(
        extractor_factory=FailingExtractor, plan_loader_factory=FailingPlanLoader
    )

    combined = service.run_all(tmp_path / "missing", plan_path=tmp_path / "plan.json")

    assert len(combined.failures) == 2
    assert combined.failures[0].startswith("version_drift:")
    assert combined.failures[1].startswith("plan_analysis:")
    assert combined.overall_status is OverallStatus.CRITICAL
    assert combined.exit_code() == 2


def test_run_all_rejects_skipping_everything(tmp_path):
    service = DriftService()

    with pytest.raises(ValueError):
        service.run_all(tmp_path, skip_versions=True, skip_plan=True)


def test_scan_versions_propagates_traversal_errors(tmp_path):
    service = DriftService(extractor_factory=FailingExtractor)

    with pytest.raises(ExtractionError):
        service.scan_versions(tmp_path / "missing")
