"""Render the result of a combined ``all`` run."""

from __future__ import annotations

import csv
import io
import json
from typing import Callable, Dict, List, TextIO, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import CombinedAnalysis, OverallStatus
from .formats import OutputFormat, UnsupportedFormatError, parse_output_format, write_output
from .styles import make_console

SEPARATOR_WIDTH = 70

CSV_HEADER = ("Analysis Type", "Metric", "Value")

_OVERALL_STYLES = {
    OverallStatus.CLEAN: "status.ok",
    OverallStatus.WARNING: "status.warning",
    OverallStatus.CRITICAL: "status.critical",
}


class CombinedFormatter:
    """Format a :class:`CombinedAnalysis` as JSON, CSV or a compact table."""

    def __init__(self, *, use_color: bool = True) -> None:
        self.use_color = use_color
        self._renderers: Dict[OutputFormat, Callable[[CombinedAnalysis], str]] = {
            OutputFormat.TABLE: self.render_table,
            OutputFormat.JSON: self.render_json,
            OutputFormat.CSV: self.render_csv,
        }

    def format(
        self, combined: CombinedAnalysis, output_format: OutputFormat | str, sink: TextIO
    ) -> None:
        write_output(sink, self.render(combined, output_format))

    def render(self, combined: CombinedAnalysis, output_format: OutputFormat | str) -> str:
        fmt = parse_output_format(output_format)
        renderer = self._renderers.get(fmt)
        if renderer is None:
            raise UnsupportedFormatError(f"unsupported format: {fmt.value}")
        return renderer(combined)

    # ------------------------------------------------------------------
    def render_json(self, combined: CombinedAnalysis) -> str:
        return json.dumps(combined.to_dict(), indent=2, ensure_ascii=False) + "\n"

    def render_csv(self, combined: CombinedAnalysis) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        drift = combined.version_drift
        if drift is not None:
            writer.writerows(
                [
                    ("version_drift", "total_files", drift.total_files),
                    ("version_drift", "files_with_drift", drift.files_with_drift),
                    ("version_drift", "minor_drift", drift.minor_drift),
                    ("version_drift", "major_drift", drift.major_drift),
                    ("version_drift", "files_with_errors", drift.files_with_errors),
                ]
            )

        plan = combined.plan_analysis
        if plan is not None:
            writer.writerows(
                [
                    ("plan_analysis", "total_changes", plan.total_changes),
                    ("plan_analysis", "additions", plan.additions),
                    ("plan_analysis", "modifications", plan.modifications),
                    ("plan_analysis", "deletions", plan.deletions),
                    ("plan_analysis", "replacements", plan.replacements),
                ]
            )

        for failure in combined.failures:
            writer.writerow(("failure", "error", failure))
        writer.writerow(("overall", "status", combined.overall_status.value))
        return buffer.getvalue()

    def render_table(self, combined: CombinedAnalysis) -> str:
        buffer = io.StringIO()
        console = make_console(buffer, use_color=self.use_color, width=SEPARATOR_WIDTH + 10)

        console.print("=" * SEPARATOR_WIDTH)
        console.print(
            Text("COMBINED DRIFT ANALYSIS RESULTS", style="title", justify="center"),
            width=SEPARATOR_WIDTH,
        )
        console.print("=" * SEPARATOR_WIDTH)

        drift = combined.version_drift
        if drift is not None:
            if not drift.has_drift:
                status = Text("✔ Clean", style="status.ok")
            elif drift.major_drift > 0:
                status = Text("✘ Drift Detected", style="status.critical")
            else:
                status = Text("✘ Drift Detected", style="status.warning")
            rows = [
                ("Total Files Scanned", str(drift.total_files)),
                ("Files with Drift", str(drift.files_with_drift)),
                ("Minor Drift", str(drift.minor_drift)),
                ("Major Drift", str(drift.major_drift)),
            ]
            if drift.files_with_errors:
                rows.append(("Files with Errors", str(drift.files_with_errors)))
            self._section(console, "Version Drift Analysis", rows, status)

        plan = combined.plan_analysis
        if plan is not None:
            if not plan.has_changes:
                status = Text("✔ No Changes", style="status.ok")
            elif plan.deletions > 0 or plan.replacements > 0:
                status = Text("✘ Changes Detected", style="status.critical")
            else:
                status = Text("✘ Changes Detected", style="status.warning")
            rows = [
                ("Total Changes", str(plan.total_changes)),
                ("Additions", str(plan.additions)),
                ("Modifications", str(plan.modifications)),
                ("Deletions", str(plan.deletions)),
                ("Replacements", str(plan.replacements)),
            ]
            self._section(console, "Plan Analysis", rows, status)

        if combined.failures:
            console.print()
            console.print(Text("─── Failed Analyses ───", style="heading"))
            for failure in combined.failures:
                console.print(Text(f"  {failure}", style="status.critical"), soft_wrap=True)

        overall = combined.overall_status
        console.print()
        console.print("─" * SEPARATOR_WIDTH)
        console.print(
            Text.assemble(
                "  Overall Status:         ",
                (overall.value.upper(), _OVERALL_STYLES[overall]),
            )
        )
        console.print("=" * SEPARATOR_WIDTH)
        console.print()
        return buffer.getvalue()

    # ------------------------------------------------------------------
    @staticmethod
    def _section(console: Console, title: str, rows: List[Tuple[str, str]], status: Text) -> None:
        console.print()
        console.print(Text(f"─── {title} ───", style="heading"))
        table = Table(show_header=False, box=None, pad_edge=True)
        table.add_column("Metric", min_width=22)
        table.add_column("Value")
        for label, value in rows:
            table.add_row(Text(label), Text(value))
        table.add_row(Text("Status"), status)
        console.print(table)


__all__ = ["CombinedFormatter"]
