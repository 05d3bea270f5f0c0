"""Version constraint records extracted from Terraform configuration files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(slots=True, frozen=True)
class ProviderConstraint:
    """Provider requirement declared inside a ``required_providers`` block."""

    source: str = ""
    version: str = ""


@dataclass(slots=True)
class VersionRecord:
    """Version information declared by a single scanned file."""

    file_path: str
    terraform_version: str = ""
    providers: Dict[str, ProviderConstraint] = field(default_factory=dict)
    parse_error: Optional[str] = None

    @property
    def has_versions(self) -> bool:
        """Return ``True`` when the file declares at least one constraint."""

        return bool(self.terraform_version or self.providers)

    @property
    def failed(self) -> bool:
        return self.parse_error is not None

    @classmethod
    def from_error(cls, file_path: str, error: str) -> "VersionRecord":
        """Build an error-only record; partial results are never kept."""

        return cls(file_path=file_path, parse_error=error)
