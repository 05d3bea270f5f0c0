"""Orchestration layer used by the CLI to run drift and plan analyses."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from .adapters import ExtractionError, PlanLoader, PlanLoaderError, VersionExtractor
from .analysis import DriftAnalyzer, PlanAnalyzer
from .config import DriftSettings
from .models import CombinedAnalysis, DriftReport, PlanAnalysis, VersionDriftSummary

logger = logging.getLogger(__name__)

ExtractorFactory = Callable[[Path], VersionExtractor]
PlanLoaderFactory = Callable[[Path], PlanLoader]


class DriftService:
    """High level service wiring extraction, analysis and plan ingestion together."""

    def __init__(
        self,
        settings: DriftSettings | None = None,
        *,
        extractor_factory: ExtractorFactory | None = None,
        plan_loader_factory: PlanLoaderFactory | None = None,
        drift_analyzer: DriftAnalyzer | None = None,
        plan_analyzer: PlanAnalyzer | None = None,
    ) -> None:
        self.settings = settings or DriftSettings()
        self._extractor_factory = extractor_factory or VersionExtractor
        self._plan_loader_factory = plan_loader_factory or PlanLoader
        self._drift_analyzer = drift_analyzer or DriftAnalyzer(self.settings.baseline())
        self._plan_analyzer = plan_analyzer or PlanAnalyzer(self.settings.critical_registry())

    # ------------------------------------------------------------------
    def scan_versions(self, root: str | os.PathLike[str]) -> DriftReport:
        """Extract version constraints under ``root`` and compare them to the baseline."""

        scan_root = Path(root).expanduser()
        logger.info("Scanning path: %s", scan_root.resolve())

        records = self._extractor_factory(scan_root).scan()
        if not records:
            logger.warning("No Terraform files with version information found")
        else:
            logger.info("Found %d files with version information", len(records))

        return self._drift_analyzer.analyze(str(scan_root.resolve()), records)

    def analyze_plan(self, plan_path: str | os.PathLike[str]) -> PlanAnalysis:
        """Load a plan JSON document and score its resource changes."""

        path = Path(plan_path).expanduser()
        logger.info("Analyzing plan file: %s", path)

        plan = self._plan_loader_factory(path).load_plan()
        analysis = self._plan_analyzer.analyze(plan)
        if not analysis.has_changes:
            logger.info("No changes detected in plan")
        return analysis

    def run_all(
        self,
        root: str | os.PathLike[str],
        *,
        plan_path: str | os.PathLike[str] | None = None,
        skip_versions: bool = False,
        skip_plan: bool = False,
    ) -> CombinedAnalysis:
        """Run both analyses; a failing analysis is recorded instead of aborting the run."""

        if skip_versions and skip_plan:
            raise ValueError("cannot skip both version and plan analysis")

        if not skip_plan and plan_path is None:
            logger.warning("No plan file provided. Use --plan-file or --skip-plan")
            skip_plan = True

        combined = CombinedAnalysis()

        if not skip_versions:
            logger.info("[1/2] Running version drift analysis...")
            try:
                report = self.scan_versions(root)
            except ExtractionError as exc:
                logger.error("Version analysis failed: %s", exc)
                combined.failures.append(f"version_drift: {exc}")
            else:
                combined.version_drift = VersionDriftSummary.from_report(report)

        if not skip_plan and plan_path is not None:
            logger.info("[2/2] Running plan analysis...")
            try:
                combined.plan_analysis = self.analyze_plan(plan_path)
            except PlanLoaderError as exc:
                logger.error("Plan analysis failed: %s", exc)
                combined.failures.append(f"plan_analysis: {exc}")

        logger.info("Combined analysis complete: %s", combined.overall_status.value)
        return combined


__all__ = ["DriftService", "ExtractionError", "PlanLoaderError"]
