"""Compare extracted version records against the expected baseline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, Sequence

from ..models import (
    DriftRecord,
    DriftReport,
    DriftSummary,
    FileError,
    ProviderDrift,
    VersionRecord,
)
from .constraints import compare_constraints

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class VersionBaseline:
    """Expected constraints; providers missing from the mapping are not managed."""

    terraform_version: str = ""
    provider_versions: Mapping[str, str] = field(default_factory=dict)


class DriftAnalyzer:
    """Build a :class:`DriftReport` from extractor output."""

    def __init__(
        self,
        baseline: VersionBaseline,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.baseline = baseline
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def analyze(self, scan_root: str, records: Sequence[VersionRecord]) -> DriftReport:
        summary = DriftSummary(total_files=len(records))
        report = DriftReport(
            scanned_at=self._clock(),
            scan_root=scan_root,
            total_files=len(records),
            summary=summary,
        )

        for record in records:
            if record.failed:
                summary.files_with_errors += 1
                report.errors.append(FileError(record.file_path, record.parse_error or ""))
                continue

            drift = self.classify(record)
            report.records.append(drift)

            if not drift.has_drift:
                summary.files_in_sync += 1
            else:
                report.files_with_drift += 1
                if drift.has_major_drift:
                    summary.files_with_major_drift += 1
                else:
                    summary.files_with_minor_drift += 1

            self._count_versions(summary, record)

        logger.debug(
            "Analyzed %d files: %d in sync, %d drifted, %d errors",
            report.total_files,
            summary.files_in_sync,
            report.files_with_drift,
            summary.files_with_errors,
        )
        return report

    def classify(self, record: VersionRecord) -> DriftRecord:
        """Classify the terraform and provider constraints of one parsed record."""

        expected = self.baseline.terraform_version
        drift = DriftRecord(
            file_path=record.file_path,
            terraform_expected=expected,
            terraform_actual=record.terraform_version,
            terraform_status=compare_constraints(expected, record.terraform_version),
        )

        for name in sorted(record.providers):
            constraint = record.providers[name]
            provider_expected = self.baseline.provider_versions.get(name, "")
            drift.providers.append(
                ProviderDrift(
                    name=name,
                    source=constraint.source,
                    expected=provider_expected,
                    actual=constraint.version,
                    status=compare_constraints(
                        provider_expected, constraint.version, managed=False
                    ),
                )
            )
        return drift

    @staticmethod
    def _count_versions(summary: DriftSummary, record: VersionRecord) -> None:
        if record.terraform_version:
            versions = summary.terraform_versions
            versions[record.terraform_version] = versions.get(record.terraform_version, 0) + 1

        for name, constraint in record.providers.items():
            if not constraint.version:
                continue
            versions = summary.provider_versions.setdefault(name, {})
            versions[constraint.version] = versions.get(constraint.version, 0) + 1


__all__ = ["DriftAnalyzer", "VersionBaseline"]
