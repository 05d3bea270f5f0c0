"""Tests for rendering drift reports."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from drift_service.analysis import DriftAnalyzer, VersionBaseline
from drift_service.models import ProviderConstraint, VersionRecord
from drift_service.reporting import (
    DriftReportFormatter,
    OutputFormat,
    ReportWriteError,
    UnsupportedFormatError,
    truncate_path,
)
from drift_service.reporting.drift_formatter import CSV_HEADER


def _report():
    baseline = VersionBaseline(terraform_version="~> 1.13", provider_versions={"aws": "~> 6.0"})
    analyzer = DriftAnalyzer(baseline, clock=lambda: datetime(2026, 1, 15, tzinfo=timezone.utc))
    records = [
        VersionRecord(
            file_path="envs/prod/versions.tf",
            terraform_version="~> 1.13",
            providers={"aws": ProviderConstraint("hashicorp/aws", "~> 5.0")},
        ),
        VersionRecord(
            file_path="envs/dev/versions.tf",
            terraform_version="~> 1.12",
            providers={
                "aws": ProviderConstraint("hashicorp/aws", "~> 6.0"),
                "random": ProviderConstraint("hashicorp/random", "~> 3.6"),
            },
        ),
        VersionRecord.from_error("envs/broken/versions.tf", "HCL parsing failed: boom"),
        VersionRecord(file_path="envs/ok/versions.tf", terraform_version="~> 1.13"),
    ]
    return analyzer.analyze("/infra", records)


def _formatter() -> DriftReportFormatter:
    return DriftReportFormatter(use_color=False, terminal_width=160)


def test_json_output_is_field_ordered_report():
    sink = io.StringIO()

    _formatter().format(_report(), OutputFormat.JSON, sink)

    payload = json.loads(sink.getvalue())
    assert list(payload) == [
        "scanned_at",
        "scan_root",
        "total_files",
        "files_with_drift",
        "records",
        "errors",
        "summary",
    ]
    assert payload["summary"]["files_with_errors"] == 1
    assert payload["errors"][0]["file_path"] == "envs/broken/versions.tf"
    assert "~> 1.13" in sink.getvalue()


def test_csv_rows_are_grouped_and_sorted():
    output = _formatter().render(_report(), "csv")

    rows = list(csv.reader(io.StringIO(output)))
    assert rows[0] == list(CSV_HEADER)

    sections = [row[0] for row in rows[1:]]
    assert sections == [
        "drift",
        "drift",
        "drift",
        "drift",
        "drift",
        "drift",
        "error",
        "terraform_version",
        "terraform_version",
        "provider_version",
        "provider_version",
        "provider_version",
    ]

    drift_paths = [row[1] for row in rows[1:] if row[0] == "drift"]
    assert drift_paths == sorted(drift_paths)
    assert rows[1][:4] == ["drift", "envs/dev/versions.tf", "terraform", "terraform"]
    assert rows[1][6:8] == ["minor-drift", "minor"]

    histogram = [row for row in rows if row[0] == "terraform_version"]
    assert [(row[5], row[8]) for row in histogram] == [("~> 1.12", "1"), ("~> 1.13", "2")]

    providers = [(row[3], row[5], row[8]) for row in rows if row[0] == "provider_version"]
    assert providers == [("aws", "~> 5.0", "1"), ("aws", "~> 6.0", "1"), ("random", "~> 3.6", "1")]


def test_table_output_lists_drift_and_errors():
    output = _formatter().render(_report(), OutputFormat.TABLE)

    assert "Terraform Version Drift Report" in output
    assert "Quick Summary" in output
    assert "Provider: aws" in output
    assert "major drift" in output
    assert "envs/broken/versions.tf" in output
    assert "2 of 4 files have drift (minor: 1, major: 1), 1 files with errors" in output
    assert "╭" in output
    assert "\x1b[" not in output


def test_table_output_for_empty_report():
    analyzer = DriftAnalyzer(VersionBaseline("~> 1.13"))

    output = _formatter().render(analyzer.analyze("/infra", []), OutputFormat.TABLE)

    assert "All 0 files are in sync" in output
    assert "Files with Drift (" not in output


def test_coloured_table_emits_ansi_codes():
    output = DriftReportFormatter(use_color=True, terminal_width=160).render(_report(), "table")

    assert "\x1b[" in output


def test_unsupported_format_is_rejected():
    with pytest.raises(UnsupportedFormatError):
        _formatter().render(_report(), "yaml")


def test_write_failure_is_reported():
    class BrokenSink(io.StringIO):
        def write(self, _text):
            raise OSError("disk full")

    with pytest.raises(ReportWriteError):
        _formatter().format(_report(), "json", BrokenSink())


def test_truncate_path_keeps_suffix():
    path = "a" * 50 + "/" + "b" * 60 + "/versions.tf"

    truncated = truncate_path(path)

    assert len(truncated) == 100
    assert truncated.startswith("...")
    assert truncated.endswith("/versions.tf")
    assert truncate_path("short/versions.tf") == "short/versions.tf"
