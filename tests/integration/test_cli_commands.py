"""Integration tests for the ``iac-drift`` command line."""

from __future__ import annotations

import csv
import io
import json
import logging
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Sequence

import pytest
import yaml

from drift_service.cli import app
from drift_service.log import LOGGER_NAME

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"
TERRAFORM_TREE = FIXTURES / "terraform"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def invoke_cli(args: Sequence[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        exit_code = app.main(list(args))
    return exit_code, stdout.getvalue(), stderr.getvalue()


def test_versions_json_reports_drift():
    exit_code, output, _ = invoke_cli(
        ["versions", str(TERRAFORM_TREE), "--format", "json", "--no-color"]
    )

    payload = json.loads(output)
    assert exit_code == 1
    assert payload["total_files"] == 2
    assert payload["files_with_drift"] == 1
    assert payload["summary"]["files_with_major_drift"] == 1
    assert [record["file_path"] for record in payload["records"]] == [
        "envs/dev/providers.tf",
        "envs/prod/versions.tf",
    ]


def test_versions_with_config_matching_tree_is_clean(tmp_path):
    (tmp_path / "versions.tf").write_text(
        'terraform {\n  required_version = "~> 1.5"\n}\n', encoding="utf-8"
    )
    config = tmp_path / "drift.yaml"
    config.write_text('terraform_version: "~> 1.5"\n', encoding="utf-8")

    exit_code, output, _ = invoke_cli(
        ["--config", str(config), "versions", str(tmp_path), "--no-color"]
    )

    assert exit_code == 0
    assert "All 1 files are in sync" in output


def test_versions_csv_output():
    exit_code, output, _ = invoke_cli(["versions", str(TERRAFORM_TREE), "-f", "csv"])

    rows = list(csv.reader(io.StringIO(output)))
    assert exit_code == 1
    assert rows[0][0] == "Section"
    assert {row[0] for row in rows[1:]} == {"drift", "terraform_version", "provider_version"}


def test_versions_missing_path_returns_error(tmp_path):
    exit_code, output, errors = invoke_cli(["versions", str(tmp_path / "missing")])

    assert exit_code == 2
    assert output == ""
    assert "Error:" in errors


def test_versions_parse_error_exit_code(tmp_path):
    (tmp_path / "versions.tf").write_text("terraform {\n", encoding="utf-8")

    exit_code, output, _ = invoke_cli(["versions", str(tmp_path), "--format", "json"])

    assert exit_code == 2
    assert json.loads(output)["summary"]["files_with_errors"] == 1


def test_plan_table_output():
    exit_code, output, _ = invoke_cli(
        ["plan", "--plan-file", str(FIXTURES / "plan-mixed.json"), "--no-color"]
    )

    assert exit_code == 2
    assert "Terraform Plan Analysis" in output
    assert "Replacements" in output


def test_plan_without_changes_exits_zero():
    exit_code, output, _ = invoke_cli(
        ["plan", "--plan-file", str(FIXTURES / "plan-no-changes.json"), "--format", "json"]
    )

    assert exit_code == 0
    assert json.loads(output)["has_changes"] is False


def test_plan_rejects_document_without_format_version():
    exit_code, output, errors = invoke_cli(
        ["plan", "--plan-file", str(FIXTURES / "plan-missing-format-version.json")]
    )

    assert exit_code == 2
    assert output == ""
    assert "missing format_version" in errors


def test_all_combines_versions_and_plan():
    exit_code, output, _ = invoke_cli(
        [
            "all",
            str(TERRAFORM_TREE),
            "--plan-file",
            str(FIXTURES / "plan-mixed.json"),
            "--format",
            "json",
        ]
    )

    payload = json.loads(output)
    assert exit_code == 2
    assert payload["overall_status"] == "critical"
    assert payload["version_drift"]["major_drift"] == 1
    assert payload["plan_analysis"]["total_changes"] == 5


def test_all_skip_versions_with_plan_only():
    exit_code, output, _ = invoke_cli(
        [
            "all",
            "--plan-file",
            str(FIXTURES / "plan-no-changes.json"),
            "--skip-versions",
            "--format",
            "csv",
        ]
    )

    assert exit_code == 0
    assert "version_drift" not in output
    assert output.strip().splitlines()[-1] == "overall,status,clean"


def test_all_rejects_skipping_both_analyses():
    exit_code, _, errors = invoke_cli(["all", "--skip-plan", "--skip-versions"])

    assert exit_code == 2
    assert "cannot skip both" in errors


def test_config_command_prints_effective_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    exit_code, output, _ = invoke_cli(["config"])

    settings = yaml.safe_load(output)
    assert exit_code == 0
    assert settings["terraform_version"] == "~> 1.13"
    assert settings["providers"]["aws"]["version"] == "~> 6.0"


def test_invalid_config_returns_error(tmp_path):
    config = tmp_path / "drift.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")

    exit_code, _, errors = invoke_cli(["--config", str(config), "config"])

    assert exit_code == 2
    assert "must be a mapping" in errors


def test_no_command_prints_help():
    exit_code, output, _ = invoke_cli([])

    assert exit_code == 0
    assert "usage: iac-drift" in output


def test_plan_with_malformed_changes_returns_error(tmp_path):
    plan_file = tmp_path / "plan.json"
    plan_file.write_text(
        '{"format_version": "1.2", "resource_changes": [{"change": ["delete"]}]}',
        encoding="utf-8",
    )

    exit_code, output, errors = invoke_cli(["plan", "--plan-file", str(plan_file)])

    assert exit_code == 2
    assert output == ""
    assert "invalid plan file format" in errors
