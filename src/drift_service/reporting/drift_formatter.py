"""Render version drift reports as JSON, CSV or Rich tables."""

from __future__ import annotations

import csv
import io
import json
from typing import Callable, Dict, List, TextIO

from rich.console import Console
from rich.text import Text

from ..models import DriftRecord, DriftReport, DriftStatus
from .formats import OutputFormat, UnsupportedFormatError, parse_output_format, write_output
from .styles import detect_terminal_width, make_console, rounded_table

MIN_DRIFT_TABLE_WIDTH = 113
BASE_FILE_PATH_WIDTH = 40
MAX_EXTRA_PATH_WIDTH = 30
MAX_DISPLAY_PATH_LENGTH = 100

CSV_HEADER = (
    "Section",
    "File Path",
    "Component Type",
    "Component Name",
    "Expected Version",
    "Actual Version",
    "Drift Status",
    "Severity",
    "Count",
)

_STATUS_LABELS = {
    DriftStatus.IN_SYNC: "OK",
    DriftStatus.MINOR_DRIFT: "minor drift",
    DriftStatus.MAJOR_DRIFT: "major drift",
    DriftStatus.MISSING: "missing",
    DriftStatus.NOT_MANAGED: "not managed",
}

_STATUS_STYLES = {
    DriftStatus.MINOR_DRIFT: "status.warning",
    DriftStatus.MAJOR_DRIFT: "status.critical",
    DriftStatus.MISSING: "status.warning",
}


def truncate_path(path: str, max_length: int = MAX_DISPLAY_PATH_LENGTH) -> str:
    """Shorten ``path`` from the left so that it fits in ``max_length`` characters.

    >>> truncate_path("envs/prod/versions.tf", 14)
    '...versions.tf'
    """

    if len(path) <= max_length:
        return path
    return "..." + path[len(path) - max_length + 3 :]


def severity_label(status: DriftStatus) -> str:
    if status is DriftStatus.MAJOR_DRIFT:
        return "major"
    if status is DriftStatus.MINOR_DRIFT:
        return "minor"
    return "none"


class DriftReportFormatter:
    """Format a :class:`DriftReport` for terminals, spreadsheets or tooling."""

    def __init__(self, *, use_color: bool = True, terminal_width: int | None = None) -> None:
        self.use_color = use_color
        self.terminal_width = terminal_width or detect_terminal_width()
        self._renderers: Dict[OutputFormat, Callable[[DriftReport], str]] = {
            OutputFormat.TABLE: self.render_table,
            OutputFormat.JSON: self.render_json,
            OutputFormat.CSV: self.render_csv,
        }

    def format(self, report: DriftReport, output_format: OutputFormat | str, sink: TextIO) -> None:
        write_output(sink, self.render(report, output_format))

    def render(self, report: DriftReport, output_format: OutputFormat | str) -> str:
        fmt = parse_output_format(output_format)
        renderer = self._renderers.get(fmt)
        if renderer is None:
            raise UnsupportedFormatError(f"unsupported format: {fmt.value}")
        return renderer(report)

    # ------------------------------------------------------------------
    def render_json(self, report: DriftReport) -> str:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"

    def render_csv(self, report: DriftReport) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for record in sorted(report.records, key=lambda item: item.file_path):
            writer.writerow(
                [
                    "drift",
                    record.file_path,
                    "terraform",
                    "terraform",
                    record.terraform_expected,
                    record.terraform_actual,
                    record.terraform_status.value,
                    severity_label(record.terraform_status),
                    "",
                ]
            )
            for provider in record.providers:
                writer.writerow(
                    [
                        "drift",
                        record.file_path,
                        "provider",
                        provider.name,
                        provider.expected,
                        provider.actual,
                        provider.status.value,
                        severity_label(provider.status),
                        "",
                    ]
                )

        for error in sorted(report.errors, key=lambda item: item.file_path):
            writer.writerow(
                ["error", error.file_path, "parse_error", error.message, "", "", "error", "", ""]
            )

        for version, count in sorted(report.summary.terraform_versions.items()):
            writer.writerow(
                ["terraform_version", "", "terraform", "terraform", "", version, "", "", count]
            )

        for name in sorted(report.summary.provider_versions):
            for version, count in sorted(report.summary.provider_versions[name].items()):
                writer.writerow(["provider_version", "", "provider", name, "", version, "", "", count])

        return buffer.getvalue()

    def render_table(self, report: DriftReport) -> str:
        buffer = io.StringIO()
        width = self.table_width(report)
        console = make_console(buffer, use_color=self.use_color, width=self.terminal_width)

        console.print(Text("━━━ Terraform Version Drift Report ━━━", style="title"))
        console.print(Text.assemble(("Scanned: ", "muted"), report.scan_root), soft_wrap=True)
        console.print(
            Text.assemble(("Time: ", "muted"), report.scanned_at.strftime("%Y-%m-%d %H:%M:%S"))
        )

        self._write_summary(console, report, width)
        self._write_terraform_versions(console, report, width)
        self._write_provider_versions(console, report, width)
        self._write_drift_details(console, report, width)
        self._write_errors(console, report, width)

        console.print()
        console.print(report.summary_text(), markup=False, highlight=False)
        console.print()
        return buffer.getvalue()

    def table_width(self, report: DriftReport) -> int:
        """Width shared by every table: the drift table minimum, widened for long paths."""

        required = MIN_DRIFT_TABLE_WIDTH
        for record in report.records:
            if record.has_drift and len(record.file_path) > BASE_FILE_PATH_WIDTH:
                extra = (len(record.file_path) - BASE_FILE_PATH_WIDTH) // 2
                required += min(extra, MAX_EXTRA_PATH_WIDTH)
                break
        return min(required, self.terminal_width)

    # ------------------------------------------------------------------
    @staticmethod
    def _heading(console: Console, title: str) -> None:
        console.print()
        console.print(Text(title, style="heading"))

    def _write_summary(self, console: Console, report: DriftReport, width: int) -> None:
        summary = report.summary
        rows = [
            ("Total Files Scanned", report.total_files),
            ("Files in Sync", summary.files_in_sync),
            ("Files with Drift", report.files_with_drift),
        ]
        if summary.files_with_major_drift:
            rows.append(("  ↳ Major Drift", summary.files_with_major_drift))
        if summary.files_with_minor_drift:
            rows.append(("  ↳ Minor Drift", summary.files_with_minor_drift))
        if summary.files_with_errors:
            rows.append(("Files with Errors", summary.files_with_errors))

        self._heading(console, "Quick Summary")
        table = rounded_table("Metric", "Value", width=width, show_header=False)
        table.columns[0].justify = "right"
        table.columns[0].style = "bold"
        table.columns[1].justify = "center"
        for label, value in rows:
            table.add_row(Text(label), Text(str(value)))
        console.print(table)

    def _write_terraform_versions(self, console: Console, report: DriftReport, width: int) -> None:
        versions = report.summary.terraform_versions
        if not versions:
            return

        expected = report.expected_terraform_version
        self._heading(console, "Terraform Versions")
        table = rounded_table("Status", "Version", "Count", width=width)
        for column in table.columns:
            column.justify = "center"
        for version, count in sorted(versions.items()):
            status = Text("OK", style="status.ok") if version == expected else Text(
                "DRIFT", style="status.warning"
            )
            table.add_row(status, Text(version), Text(f"{count} files"))
        console.print(table)

    def _write_provider_versions(self, console: Console, report: DriftReport, width: int) -> None:
        provider_versions = report.summary.provider_versions
        if not provider_versions:
            return

        self._heading(console, "Provider Versions")
        for name in sorted(provider_versions):
            table = rounded_table(name, "Count", width=width)
            for column in table.columns:
                column.justify = "center"
            for version, count in sorted(provider_versions[name].items()):
                table.add_row(Text(version), Text(f"{count} files"))
            console.print(table)

    def _write_drift_details(self, console: Console, report: DriftReport, width: int) -> None:
        drifted = sorted(
            (record for record in report.records if record.has_drift),
            key=lambda record: record.file_path,
        )
        if not drifted:
            return

        rows = _drift_rows(drifted)
        self._heading(console, f"Files with Drift ({len(drifted)} files, {len(rows)} issues)")
        table = rounded_table("File", "Type", "Expected", "Actual", "Status", width=width)
        for row in rows:
            table.add_row(*row)
        console.print(table)

    def _write_errors(self, console: Console, report: DriftReport, width: int) -> None:
        if not report.errors:
            return

        self._heading(console, f"Files with Errors ({len(report.errors)})")
        table = rounded_table("File", "Error", width=width)
        for error in sorted(report.errors, key=lambda item: item.file_path):
            table.add_row(Text(truncate_path(error.file_path)), Text(error.message, style="status.critical"))
        console.print(table)


def _drift_rows(records: List[DriftRecord]) -> List[List[Text]]:
    rows: List[List[Text]] = []
    for record in records:
        path = truncate_path(record.file_path)
        terraform_drifted = record.terraform_status is not DriftStatus.IN_SYNC

        if terraform_drifted:
            rows.append(
                [
                    Text(path),
                    Text("Terraform"),
                    Text(record.terraform_expected),
                    Text(record.terraform_actual),
                    _status_text(record.terraform_status),
                ]
            )

        for provider in record.providers:
            if not provider.is_drift:
                continue
            expected = (
                Text(provider.expected)
                if provider.expected
                else Text("(not configured)", style="muted")
            )
            display_path = Text(f"  ↳ {path}", style="muted") if terraform_drifted else Text(path)
            rows.append(
                [
                    display_path,
                    Text(f"Provider: {provider.name}"),
                    expected,
                    Text(provider.actual),
                    _status_text(provider.status),
                ]
            )
    return rows


def _status_text(status: DriftStatus) -> Text:
    return Text(_STATUS_LABELS.get(status, status.value), style=_STATUS_STYLES.get(status, ""))


__all__ = [
    "CSV_HEADER",
    "DriftReportFormatter",
    "severity_label",
    "truncate_path",
]
