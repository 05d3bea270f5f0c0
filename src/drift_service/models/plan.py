"""Plan models used by the plan loader, analyzer and formatters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class ChangeAction(str, Enum):
    """Actions Terraform can plan for a resource."""

    NOOP = "no-op"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE = "replace"


class Severity(str, Enum):
    """Risk level assigned to a planned change."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


@dataclass(slots=True)
class ResourceChange:
    """A single entry of the plan's ``resource_changes`` list."""

    address: str
    module_address: str = ""
    mode: str = "managed"
    type: str = ""
    name: str = ""
    provider_name: str = ""
    actions: List[str] = field(default_factory=list)
    action_reason: str = ""

    @property
    def is_module_root(self) -> bool:
        """Return ``True`` when the resource is defined at the root module."""

        return not self.module_address


@dataclass(slots=True)
class PlanDocument:
    """Validated Terraform plan JSON document."""

    format_version: str
    terraform_version: str = ""
    resource_changes: List[ResourceChange] = field(default_factory=list)


@dataclass(slots=True)
class AnalyzedResource:
    """A planned change with its rendered action and severity."""

    address: str
    type: str
    name: str
    provider: str
    actions: List[str]
    action: str
    severity: Severity
    module_address: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "type": self.type,
            "name": self.name,
            "provider": self.provider,
            "actions": list(self.actions),
            "action": self.action,
            "severity": self.severity.value,
            "module_address": self.module_address,
        }


@dataclass(slots=True)
class PlanAnalysis:
    """Aggregated risk analysis for a Terraform plan."""

    terraform_version: str = ""
    total_changes: int = 0
    additions: int = 0
    modifications: int = 0
    deletions: int = 0
    replacements: int = 0
    resource_changes: List[AnalyzedResource] = field(default_factory=list)
    by_type: Dict[str, int] = field(default_factory=dict)
    by_module: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_action: Dict[str, int] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    def exit_code(self) -> int:
        """Return 2 for deletions or replacements, 1 for other changes, 0 otherwise."""

        if self.deletions > 0 or self.replacements > 0:
            return 2
        if self.total_changes > 0:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "terraform_version": self.terraform_version,
            "total_changes": self.total_changes,
            "additions": self.additions,
            "modifications": self.modifications,
            "deletions": self.deletions,
            "replacements": self.replacements,
            "has_changes": self.has_changes,
            "resource_changes": [resource.to_dict() for resource in self.resource_changes],
            "by_type": dict(self.by_type),
            "by_module": dict(self.by_module),
            "by_severity": dict(self.by_severity),
            "by_action": dict(self.by_action),
        }
