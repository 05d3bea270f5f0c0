"""Conversion helpers that turn raw Terraform plan JSON into service models."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import PlanDocument, ResourceChange


class ResourceNormalizer:
    """Normalize Terraform plan JSON into a :class:`PlanDocument`."""

    def normalize(self, plan: Dict[str, Any]) -> PlanDocument:
        """Return the typed document for the supplied plan structure."""

        resource_changes = plan.get("resource_changes") or []
        if not isinstance(resource_changes, list):
            raise ValueError("resource_changes must be a list")
        return PlanDocument(
            format_version=str(plan.get("format_version", "")),
            terraform_version=str(plan.get("terraform_version") or ""),
            resource_changes=[self._normalize_change(change) for change in resource_changes],
        )

    # ------------------------------------------------------------------
    def _normalize_change(self, change: Any) -> ResourceChange:
        if not isinstance(change, dict):
            raise ValueError("resource change entries must be objects")
        detail = change.get("change") or {}
        if not isinstance(detail, dict):
            raise ValueError(f"change of {change.get('address', '<unknown>')} must be an object")

        return ResourceChange(
            address=str(change.get("address", "")),
            module_address=str(change.get("module_address") or ""),
            mode=str(change.get("mode") or "managed"),
            type=str(change.get("type", "")),
            name=str(change.get("name", "")),
            provider_name=str(change.get("provider_name") or ""),
            actions=self._normalize_actions(detail.get("actions")),
            action_reason=str(change.get("action_reason") or ""),
        )

    def _normalize_actions(self, actions: Any) -> List[str]:
        if not isinstance(actions, list):
            return []
        return [str(action) for action in actions]
