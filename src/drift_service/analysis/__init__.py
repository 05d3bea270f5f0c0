"""Drift and plan analysis engines."""

from .constraints import compare_constraints, extract_major_minor
from .drift_analyzer import DriftAnalyzer, VersionBaseline
from .plan_analyzer import ROOT_MODULE, PlanAnalyzer, render_actions

__all__ = [
    "DriftAnalyzer",
    "PlanAnalyzer",
    "ROOT_MODULE",
    "VersionBaseline",
    "compare_constraints",
    "extract_major_minor",
    "render_actions",
]
