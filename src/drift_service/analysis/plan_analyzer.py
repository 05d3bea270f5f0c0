"""Risk scoring for the resource changes of a Terraform plan."""

from __future__ import annotations

import logging
from typing import Dict, Sequence

from ..models import (
    AnalyzedResource,
    ChangeAction,
    PlanAnalysis,
    PlanDocument,
    ResourceChange,
    Severity,
)
from ..rules import CriticalResourceRegistry

logger = logging.getLogger(__name__)

ROOT_MODULE = "root"
UNKNOWN_VERSION = "unknown"


class PlanAnalyzer:
    """Classify plan changes by action and severity and aggregate the counts."""

    def __init__(self, critical_resources: CriticalResourceRegistry | None = None) -> None:
        self.critical_resources = critical_resources or CriticalResourceRegistry()

    def analyze(self, plan: PlanDocument | None) -> PlanAnalysis:
        if plan is None:
            return PlanAnalysis(terraform_version=UNKNOWN_VERSION)

        analysis = PlanAnalysis(terraform_version=plan.terraform_version)
        for change in plan.resource_changes:
            if self._is_skipped(change):
                continue

            resource = AnalyzedResource(
                address=change.address,
                type=change.type,
                name=change.name,
                provider=change.provider_name,
                actions=list(change.actions),
                action=render_actions(change.actions),
                severity=self.determine_severity(change.actions, change.type),
                module_address=change.module_address,
            )
            analysis.resource_changes.append(resource)
            analysis.total_changes += 1
            self._update_counts(analysis, change.actions)

            _increment(analysis.by_type, change.type)
            _increment(analysis.by_module, change.module_address or ROOT_MODULE)
            _increment(analysis.by_severity, resource.severity.value)
            _increment(analysis.by_action, resource.action)

        logger.debug(
            "Plan analysis: %d changes (+%d ~%d -%d ±%d)",
            analysis.total_changes,
            analysis.additions,
            analysis.modifications,
            analysis.deletions,
            analysis.replacements,
        )
        return analysis

    def determine_severity(self, actions: Sequence[str], resource_type: str) -> Severity:
        """Assess the risk of a change; the rules are evaluated in priority order."""

        if ChangeAction.DELETE.value in actions:
            return Severity.CRITICAL
        if ChangeAction.UPDATE.value in actions:
            if resource_type in self.critical_resources:
                return Severity.HIGH
            return Severity.MEDIUM
        return Severity.LOW

    # ------------------------------------------------------------------
    @staticmethod
    def _is_skipped(change: ResourceChange) -> bool:
        # Data sources are lookups, not managed infrastructure.
        if change.mode == "data":
            return True
        return not change.actions or list(change.actions) == [ChangeAction.NOOP.value]

    @staticmethod
    def _update_counts(analysis: PlanAnalysis, actions: Sequence[str]) -> None:
        creates = ChangeAction.CREATE.value in actions
        deletes = ChangeAction.DELETE.value in actions

        if creates and not deletes:
            analysis.additions += 1
        elif creates and deletes:
            analysis.replacements += 1
        elif deletes:
            analysis.deletions += 1
        elif ChangeAction.UPDATE.value in actions:
            analysis.modifications += 1
        # A pure read stays visible in the totals without a category.


def render_actions(actions: Sequence[str]) -> str:
    """Render an action list as a single label, e.g. ``["delete", "create"]`` -> ``replace``."""

    if not actions:
        return ChangeAction.NOOP.value
    if len(actions) == 1:
        return actions[0]
    if ChangeAction.DELETE.value in actions and ChangeAction.CREATE.value in actions:
        return ChangeAction.REPLACE.value
    return "[" + " ".join(actions) + "]"


def _increment(counts: Dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


__all__ = ["PlanAnalyzer", "ROOT_MODULE", "render_actions"]
