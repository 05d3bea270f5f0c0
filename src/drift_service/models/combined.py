"""Result of a combined version drift and plan analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .drift import DriftReport
from .plan import PlanAnalysis


class OverallStatus(str, Enum):
    """Worst outcome across the analyses of a combined run."""

    CLEAN = "clean"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(slots=True)
class VersionDriftSummary:
    """Condensed drift counts carried by a combined run."""

    total_files: int = 0
    files_with_drift: int = 0
    minor_drift: int = 0
    major_drift: int = 0
    files_with_errors: int = 0

    @property
    def has_drift(self) -> bool:
        return self.files_with_drift > 0

    @classmethod
    def from_report(cls, report: DriftReport) -> "VersionDriftSummary":
        return cls(
            total_files=report.total_files,
            files_with_drift=report.files_with_drift,
            minor_drift=report.summary.files_with_minor_drift,
            major_drift=report.summary.files_with_major_drift,
            files_with_errors=report.summary.files_with_errors,
        )

    def exit_code(self) -> int:
        if self.files_with_errors > 0:
            return 2
        if self.has_drift:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "files_with_drift": self.files_with_drift,
            "minor_drift": self.minor_drift,
            "major_drift": self.major_drift,
            "files_with_errors": self.files_with_errors,
            "has_drift": self.has_drift,
        }


@dataclass(slots=True)
class CombinedAnalysis:
    """Version drift and plan analysis results plus the analyses that failed to run."""

    version_drift: Optional[VersionDriftSummary] = None
    plan_analysis: Optional[PlanAnalysis] = None
    failures: List[str] = field(default_factory=list)

    @property
    def overall_status(self) -> OverallStatus:
        if self.failures:
            return OverallStatus.CRITICAL

        status = OverallStatus.CLEAN
        drift = self.version_drift
        if drift is not None and (drift.has_drift or drift.files_with_errors):
            if drift.major_drift > 0:
                return OverallStatus.CRITICAL
            status = OverallStatus.WARNING

        plan = self.plan_analysis
        if plan is not None and plan.has_changes:
            if plan.deletions > 0 or plan.replacements > 0:
                return OverallStatus.CRITICAL
            status = OverallStatus.WARNING

        return status

    @property
    def has_issues(self) -> bool:
        return self.overall_status is not OverallStatus.CLEAN

    def exit_code(self) -> int:
        """Return the highest exit code of the analyses; a failed analysis counts as 2."""

        codes = [0]
        if self.failures:
            codes.append(2)
        if self.version_drift is not None:
            codes.append(self.version_drift.exit_code())
        if self.plan_analysis is not None:
            codes.append(self.plan_analysis.exit_code())
        return max(codes)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.version_drift is not None:
            payload["version_drift"] = self.version_drift.to_dict()
        if self.plan_analysis is not None:
            payload["plan_analysis"] = self.plan_analysis.to_dict()
        payload["overall_status"] = self.overall_status.value
        payload["has_issues"] = self.has_issues
        if self.failures:
            payload["failures"] = list(self.failures)
        return payload


__all__ = ["CombinedAnalysis", "OverallStatus", "VersionDriftSummary"]
