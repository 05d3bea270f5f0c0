"""Command-line interface for version drift and plan risk analysis."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import yaml

from ..adapters import ExtractionError, PlanLoaderError
from ..config import DriftSettings, SettingsError, load_settings
from ..log import configure_logging
from ..reporting import (
    CombinedFormatter,
    DriftReportFormatter,
    OutputFormat,
    PlanFormatter,
    ReportWriteError,
)
from ..service import DriftService

logger = logging.getLogger(__name__)

FORMAT_CHOICES = [fmt.value for fmt in OutputFormat]


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        "-f",
        choices=FORMAT_CHOICES,
        default=OutputFormat.TABLE.value,
        help="Output format for the report.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured table output.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="iac-drift",
        description="Detect Terraform version drift and assess plan risk.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a settings YAML file (defaults to ./.iacdrift.yaml when present).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")

    subparsers = parser.add_subparsers(dest="command")

    versions_parser = subparsers.add_parser(
        "versions", help="Compare declared terraform and provider versions with the baseline."
    )
    versions_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path("."),
        help="Directory tree to scan for Terraform files.",
    )
    _add_output_arguments(versions_parser)

    plan_parser = subparsers.add_parser(
        "plan", help="Classify the resource changes of a Terraform plan by risk."
    )
    plan_parser.add_argument(
        "--plan-file",
        type=Path,
        required=True,
        help="Plan exported with `terraform show -json tfplan > plan.json`.",
    )
    _add_output_arguments(plan_parser)

    all_parser = subparsers.add_parser(
        "all", help="Run version drift and plan analysis together."
    )
    all_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path("."),
        help="Directory tree to scan for Terraform files.",
    )
    all_parser.add_argument(
        "--plan-file",
        type=Path,
        default=None,
        help="Plan JSON to analyse; plan analysis is skipped when omitted.",
    )
    all_parser.add_argument(
        "--skip-plan", action="store_true", help="Skip plan analysis (versions only)."
    )
    all_parser.add_argument(
        "--skip-versions", action="store_true", help="Skip version analysis (plan only)."
    )
    _add_output_arguments(all_parser)

    subparsers.add_parser("config", help="Print the effective settings as YAML.")

    return parser


def create_service(settings: DriftSettings) -> DriftService:
    """Create a drift service wired with the default adapters."""

    return DriftService(settings)


def _handle_versions(args: argparse.Namespace, settings: DriftSettings) -> int:
    service = create_service(settings)
    try:
        report = service.scan_versions(args.path)
    except ExtractionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    formatter = DriftReportFormatter(use_color=not args.no_color)
    formatter.format(report, args.format, sys.stdout)

    if report.has_critical_drift():
        logger.warning("Critical drift detected: major version differences found")
    return report.exit_code()


def _handle_plan(args: argparse.Namespace, settings: DriftSettings) -> int:
    service = create_service(settings)
    try:
        analysis = service.analyze_plan(args.plan_file)
    except PlanLoaderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    formatter = PlanFormatter(use_color=not args.no_color, top_n=settings.top_n_count)
    formatter.format(analysis, args.format, sys.stdout)
    return analysis.exit_code()


def _handle_all(args: argparse.Namespace, settings: DriftSettings) -> int:
    service = create_service(settings)
    try:
        combined = service.run_all(
            args.path,
            plan_path=args.plan_file,
            skip_versions=args.skip_versions,
            skip_plan=args.skip_plan,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    CombinedFormatter(use_color=not args.no_color).format(combined, args.format, sys.stdout)

    exit_code = combined.exit_code()
    if exit_code:
        logger.warning("Issues detected - exiting with code %d", exit_code)
    else:
        logger.info("No issues detected - infrastructure is clean")
    return exit_code


def _handle_config(settings: DriftSettings) -> int:
    yaml.safe_dump(settings.to_dict(), sys.stdout, sort_keys=False, default_flow_style=False)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        settings = load_settings(args.config)
    except SettingsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        if args.command == "versions":
            return _handle_versions(args, settings)
        if args.command == "plan":
            return _handle_plan(args, settings)
        if args.command == "all":
            return _handle_all(args, settings)
        return _handle_config(settings)
    except ReportWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
