"""Render plan risk analyses as JSON, CSV or Rich tables."""

from __future__ import annotations

import csv
import io
import json
from typing import Callable, Dict, List, Mapping, Sequence, Tuple, TextIO

from rich.console import Console
from rich.text import Text

from ..analysis import ROOT_MODULE
from ..models import AnalyzedResource, PlanAnalysis
from .formats import OutputFormat, UnsupportedFormatError, parse_output_format, write_output
from .styles import detect_terminal_width, make_console, rounded_table

MIN_PLAN_TABLE_WIDTH = 80
MAX_PLAN_TABLE_WIDTH = 150
PLAN_WIDTH_PERCENT = 95
DEFAULT_TOP_N = 10

CSV_HEADER = ("Address", "Type", "Name", "Provider", "Module", "Action", "Severity")

_ACTION_STYLES = {
    "create": "action.create",
    "delete": "action.delete",
    "replace": "action.replace",
    "update": "action.update",
    "read": "action.read",
}


def sort_by_severity(resources: Sequence[AnalyzedResource]) -> List[AnalyzedResource]:
    """Order resources critical first; equal severities keep their plan order."""

    return sorted(resources, key=lambda resource: resource.severity.rank, reverse=True)


def top_groups(groups: Mapping[str, int], limit: int) -> List[Tuple[str, int]]:
    """Return the ``limit`` largest groups by count; ``limit <= 0`` keeps all of them."""

    ordered = sorted(groups.items(), key=lambda item: item[1], reverse=True)
    if limit > 0:
        return ordered[:limit]
    return ordered


def compact_module_name(module_address: str) -> str:
    """Drop ``module`` keywords from an address and elide deep nesting.

    >>> compact_module_name("module.vpc.module.subnets")
    'vpc.subnets'
    >>> compact_module_name("module.a.module.b.module.c")
    'a...c'
    """

    parts = [part for part in module_address.split(".") if part and part != "module"]
    if not parts:
        return ROOT_MODULE
    if len(parts) > 2:
        return f"{parts[0]}...{parts[-1]}"
    return ".".join(parts)


class PlanFormatter:
    """Format a :class:`PlanAnalysis` for terminals, spreadsheets or tooling."""

    def __init__(
        self,
        *,
        use_color: bool = True,
        top_n: int = DEFAULT_TOP_N,
        terminal_width: int | None = None,
    ) -> None:
        self.use_color = use_color
        self.top_n = top_n if top_n > 0 else DEFAULT_TOP_N
        self.terminal_width = terminal_width or detect_terminal_width()
        self._renderers: Dict[OutputFormat, Callable[[PlanAnalysis], str]] = {
            OutputFormat.TABLE: self.render_table,
            OutputFormat.JSON: self.render_json,
            OutputFormat.CSV: self.render_csv,
        }

    def format(self, analysis: PlanAnalysis, output_format: OutputFormat | str, sink: TextIO) -> None:
        write_output(sink, self.render(analysis, output_format))

    def render(self, analysis: PlanAnalysis, output_format: OutputFormat | str) -> str:
        fmt = parse_output_format(output_format)
        renderer = self._renderers.get(fmt)
        if renderer is None:
            raise UnsupportedFormatError(f"unsupported format: {fmt.value}")
        return renderer(analysis)

    @property
    def table_width(self) -> int:
        """95% of the terminal, clamped to a readable range."""

        width = self.terminal_width * PLAN_WIDTH_PERCENT // 100
        return max(MIN_PLAN_TABLE_WIDTH, min(width, MAX_PLAN_TABLE_WIDTH))

    # ------------------------------------------------------------------
    def render_json(self, analysis: PlanAnalysis) -> str:
        return json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False) + "\n"

    def render_csv(self, analysis: PlanAnalysis) -> str:
        buffer = io.StringIO()
        buffer.write("# Terraform Plan Analysis\n")
        buffer.write(f"# Terraform Version: {analysis.terraform_version}\n")
        buffer.write(f"# Total Changes: {analysis.total_changes}\n")
        buffer.write(
            f"# Additions: {analysis.additions}, Modifications: {analysis.modifications}, "
            f"Deletions: {analysis.deletions}, Replacements: {analysis.replacements}\n"
        )
        buffer.write("#\n")

        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for resource in analysis.resource_changes:
            writer.writerow(
                [
                    resource.address,
                    resource.type,
                    resource.name,
                    resource.provider,
                    resource.module_address,
                    resource.action,
                    resource.severity.value,
                ]
            )
        return buffer.getvalue()

    def render_table(self, analysis: PlanAnalysis) -> str:
        buffer = io.StringIO()
        width = self.table_width
        console = make_console(
            buffer, use_color=self.use_color, width=max(width, self.terminal_width)
        )

        console.print(Text("━━━ Terraform Plan Analysis ━━━", style="title"))
        console.print(Text.assemble(("Terraform Version: ", "muted"), analysis.terraform_version))

        self._write_summary(console, analysis, width)
        if analysis.resource_changes:
            self._write_groupings(console, analysis, width)
            self._write_resources(console, analysis, width)

        console.print()
        return buffer.getvalue()

    # ------------------------------------------------------------------
    @staticmethod
    def _heading(console: Console, title: str) -> None:
        console.print()
        console.print(Text(title, style="heading"))

    def _write_summary(self, console: Console, analysis: PlanAnalysis, width: int) -> None:
        self._heading(console, "Summary")
        table = rounded_table("Metric", "Value", width=width, show_header=False)
        table.columns[0].justify = "right"
        table.columns[0].style = "bold"
        table.columns[1].justify = "center"
        for label, value in (
            ("Total Changes", analysis.total_changes),
            ("Additions", analysis.additions),
            ("Modifications", analysis.modifications),
            ("Deletions", analysis.deletions),
            ("Replacements", analysis.replacements),
        ):
            table.add_row(Text(label), Text(str(value)))
        console.print(table)

    def _write_groupings(self, console: Console, analysis: PlanAnalysis, width: int) -> None:
        if analysis.by_type:
            self._write_group(console, "Changes by Resource Type", analysis.by_type, self.top_n, width)
        # Skipped when every change lives in one module.
        if len(analysis.by_module) > 1:
            self._write_group(console, "Changes by Module", analysis.by_module, self.top_n, width)
        if analysis.by_severity:
            self._write_group(console, "Changes by Severity", analysis.by_severity, 0, width)
        if analysis.by_action:
            self._write_group(console, "Changes by Action", analysis.by_action, 0, width)

    def _write_group(
        self,
        console: Console,
        title: str,
        groups: Mapping[str, int],
        limit: int,
        width: int,
    ) -> None:
        self._heading(console, title)
        table = rounded_table("Name", "Count", width=width)
        table.columns[1].justify = "center"
        for name, count in top_groups(groups, limit):
            table.add_row(Text(name), Text(str(count)))
        console.print(table)

    def _write_resources(self, console: Console, analysis: PlanAnalysis, width: int) -> None:
        self._heading(console, "Resource Changes (detailed)")
        console.print(Text(f"Showing {len(analysis.resource_changes)} resources", style="muted"))

        table = rounded_table("Resource", "Type", "Action", "Severity", width=width)
        table.columns[2].justify = "center"
        table.columns[3].justify = "center"
        for resource in sort_by_severity(analysis.resource_changes):
            name = resource.name
            if resource.module_address:
                name = f"{compact_module_name(resource.module_address)}.{resource.name}"
            table.add_row(
                Text(name),
                Text(resource.type),
                Text(resource.action, style=_ACTION_STYLES.get(resource.action, "")),
                Text(resource.severity.value, style=f"severity.{resource.severity.value}"),
            )
        console.print(table)


__all__ = [
    "CSV_HEADER",
    "PlanFormatter",
    "compact_module_name",
    "sort_by_severity",
    "top_groups",
]
