"""Drift report models shared by the analyzer and the reporting layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping


class DriftStatus(str, Enum):
    """Classification of an (expected, actual) constraint pair."""

    IN_SYNC = "in-sync"
    MINOR_DRIFT = "minor-drift"
    MAJOR_DRIFT = "major-drift"
    MISSING = "missing"
    NOT_MANAGED = "not-managed"


_NON_DRIFT_STATUSES = frozenset({DriftStatus.IN_SYNC, DriftStatus.NOT_MANAGED})


@dataclass(slots=True)
class ProviderDrift:
    """Drift details for one provider declared by a file."""

    name: str
    source: str
    expected: str
    actual: str
    status: DriftStatus

    @property
    def is_drift(self) -> bool:
        return self.status not in _NON_DRIFT_STATUSES


@dataclass(slots=True)
class DriftRecord:
    """Drift classification for a single scanned file."""

    file_path: str
    terraform_expected: str
    terraform_actual: str
    terraform_status: DriftStatus
    providers: List[ProviderDrift] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        if self.terraform_status is not DriftStatus.IN_SYNC:
            return True
        return any(provider.is_drift for provider in self.providers)

    @property
    def has_major_drift(self) -> bool:
        """Return ``True`` when any constraint in the file drifted by a major version."""

        if self.terraform_status is DriftStatus.MAJOR_DRIFT:
            return True
        return any(provider.status is DriftStatus.MAJOR_DRIFT for provider in self.providers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "terraform_expected": self.terraform_expected,
            "terraform_actual": self.terraform_actual,
            "terraform_status": self.terraform_status.value,
            "providers": [
                {
                    "name": provider.name,
                    "source": provider.source,
                    "expected": provider.expected,
                    "actual": provider.actual,
                    "status": provider.status.value,
                }
                for provider in self.providers
            ],
            "has_drift": self.has_drift,
        }


@dataclass(slots=True)
class FileError:
    """A scanned file that could not be parsed."""

    file_path: str
    message: str


@dataclass(slots=True)
class DriftSummary:
    """Aggregated per-status counts and version distributions."""

    total_files: int = 0
    files_in_sync: int = 0
    files_with_minor_drift: int = 0
    files_with_major_drift: int = 0
    files_with_errors: int = 0
    terraform_versions: Dict[str, int] = field(default_factory=dict)
    provider_versions: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "files_in_sync": self.files_in_sync,
            "files_with_minor_drift": self.files_with_minor_drift,
            "files_with_major_drift": self.files_with_major_drift,
            "files_with_errors": self.files_with_errors,
            "terraform_versions": dict(self.terraform_versions),
            "provider_versions": {
                name: dict(versions) for name, versions in self.provider_versions.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DriftSummary":
        """Rebuild a summary from its :meth:`to_dict` payload."""

        provider_versions = data.get("provider_versions") or {}
        return cls(
            total_files=int(data.get("total_files", 0)),
            files_in_sync=int(data.get("files_in_sync", 0)),
            files_with_minor_drift=int(data.get("files_with_minor_drift", 0)),
            files_with_major_drift=int(data.get("files_with_major_drift", 0)),
            files_with_errors=int(data.get("files_with_errors", 0)),
            terraform_versions={
                str(version): int(count)
                for version, count in (data.get("terraform_versions") or {}).items()
            },
            provider_versions={
                str(name): {str(version): int(count) for version, count in versions.items()}
                for name, versions in provider_versions.items()
            },
        )


@dataclass(slots=True)
class DriftReport:
    """Complete result of a version drift scan."""

    scanned_at: datetime
    scan_root: str
    total_files: int = 0
    files_with_drift: int = 0
    records: List[DriftRecord] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)
    summary: DriftSummary = field(default_factory=DriftSummary)

    @property
    def expected_terraform_version(self) -> str:
        if not self.records:
            return ""
        return self.records[0].terraform_expected

    def has_critical_drift(self) -> bool:
        return self.summary.files_with_major_drift > 0

    def exit_code(self) -> int:
        """Return the CI exit code: 2 for parse errors, 1 for drift, 0 when clean."""

        if self.summary.files_with_errors > 0:
            return 2
        if self.files_with_drift > 0:
            return 1
        return 0

    def summary_text(self) -> str:
        """Return a one-line human readable summary of the scan."""

        if self.files_with_drift == 0:
            return f"All {self.total_files} files are in sync"

        message = (
            f"{self.files_with_drift} of {self.total_files} files have drift "
            f"(minor: {self.summary.files_with_minor_drift}, "
            f"major: {self.summary.files_with_major_drift})"
        )
        if self.summary.files_with_errors > 0:
            message += f", {self.summary.files_with_errors} files with errors"
        return message

    def to_dict(self) -> dict[str, Any]:
        return {
            "scanned_at": self.scanned_at.isoformat(),
            "scan_root": self.scan_root,
            "total_files": self.total_files,
            "files_with_drift": self.files_with_drift,
            "records": [record.to_dict() for record in self.records],
            "errors": [
                {"file_path": error.file_path, "message": error.message} for error in self.errors
            ],
            "summary": self.summary.to_dict(),
        }
