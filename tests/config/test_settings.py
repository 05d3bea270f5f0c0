"""Tests for resolving and parsing the drift settings file."""

from __future__ import annotations

from pathlib import Path

import pytest

from drift_service.config import (
    DEFAULT_CONFIG_FILENAME,
    DriftSettings,
    SettingsError,
    load_settings,
)


def _write_config(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_when_no_config_present(tmp_path):
    settings = load_settings(search_dir=tmp_path)

    assert settings.terraform_version == "~> 1.13"
    assert settings.providers["aws"].version == "~> 6.0"
    assert settings.top_n_count == 10
    assert settings.source is None


def test_config_in_search_dir_is_discovered(tmp_path):
    _write_config(tmp_path / DEFAULT_CONFIG_FILENAME, 'terraform_version: "~> 1.14"\n')

    settings = load_settings(search_dir=tmp_path)

    assert settings.terraform_version == "~> 1.14"
    assert settings.source == tmp_path / DEFAULT_CONFIG_FILENAME


def test_config_in_working_directory_is_discovered(monkeypatch, tmp_path):
    _write_config(tmp_path / DEFAULT_CONFIG_FILENAME, "top_n_count: 3\n")
    monkeypatch.chdir(tmp_path)

    assert load_settings().top_n_count == 3


def test_explicit_config_is_loaded(tmp_path):
    config = _write_config(
        tmp_path / "drift.yaml",
        """
terraform_version: "~> 1.12"
providers:
  aws:
    version: "~> 5.0"
    account_mapping:
      dev: "111111111111"
      prod: 222222222222
    regions: [eu-central-1]
  random:
    version: "~> 3.6"
critical_resources:
  - aws_lambda_function
top_n_count: 5
""",
    )

    settings = load_settings(config)

    assert settings.terraform_version == "~> 1.12"
    assert settings.providers["aws"].version == "~> 5.0"
    assert settings.providers["aws"].regions == ["eu-central-1"]
    assert settings.account_id("dev") == "111111111111"
    assert settings.account_id("prod") == "222222222222"
    assert settings.account_id("staging") == "000000000000"
    assert settings.top_n_count == 5
    assert "aws_lambda_function" in settings.critical_registry()

    baseline = settings.baseline()
    assert baseline.terraform_version == "~> 1.12"
    assert dict(baseline.provider_versions) == {"aws": "~> 5.0", "random": "~> 3.6"}


def test_missing_explicit_config_raises(tmp_path):
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path):
    config = _write_config(tmp_path / "drift.yaml", "providers: [unclosed\n")

    with pytest.raises(SettingsError):
        load_settings(config)


def test_non_mapping_document_raises(tmp_path):
    config = _write_config(tmp_path / "drift.yaml", "- just\n- a list\n")

    with pytest.raises(SettingsError):
        load_settings(config)


def test_wrongly_typed_field_raises(tmp_path):
    config = _write_config(tmp_path / "drift.yaml", "critical_resources: aws_db_instance\n")

    with pytest.raises(SettingsError):
        load_settings(config)


@pytest.mark.parametrize("value", ["0", "-3", "many"])
def test_invalid_top_n_falls_back_to_default(tmp_path, value):
    config = _write_config(tmp_path / "drift.yaml", f"top_n_count: {value}\n")

    assert load_settings(config).top_n_count == 10


def test_provider_without_version_is_not_managed(tmp_path):
    config = _write_config(
        tmp_path / "drift.yaml",
        "providers:\n  random:\n    account_mapping: {}\n",
    )

    settings = load_settings(config)

    assert "random" not in settings.baseline().provider_versions
    assert settings.baseline().provider_versions["aws"] == "~> 6.0"


def test_to_dict_reflects_effective_settings():
    payload = DriftSettings().to_dict()

    assert payload["terraform_version"] == "~> 1.13"
    assert payload["providers"]["aws"]["version"] == "~> 6.0"
    assert payload["top_n_count"] == 10
