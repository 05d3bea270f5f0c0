"""Data models for version drift reports and Terraform plan analysis."""

from .combined import CombinedAnalysis, OverallStatus, VersionDriftSummary
from .drift import DriftRecord, DriftReport, DriftStatus, DriftSummary, FileError, ProviderDrift
from .plan import (
    SEVERITY_RANK,
    AnalyzedResource,
    ChangeAction,
    PlanAnalysis,
    PlanDocument,
    ResourceChange,
    Severity,
)
from .versions import ProviderConstraint, VersionRecord

__all__ = [
    "AnalyzedResource",
    "ChangeAction",
    "CombinedAnalysis",
    "DriftRecord",
    "DriftReport",
    "DriftStatus",
    "DriftSummary",
    "FileError",
    "OverallStatus",
    "PlanAnalysis",
    "PlanDocument",
    "ProviderConstraint",
    "ProviderDrift",
    "ResourceChange",
    "SEVERITY_RANK",
    "Severity",
    "VersionDriftSummary",
    "VersionRecord",
]
