"""Load the expected version baseline and analyzer settings from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ..analysis import VersionBaseline
from ..rules import CriticalResourceRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".iacdrift.yaml"
DEFAULT_TERRAFORM_VERSION = "~> 1.13"
DEFAULT_AWS_PROVIDER_VERSION = "~> 6.0"
DEFAULT_TOP_N_COUNT = 10
PLACEHOLDER_ACCOUNT_ID = "000000000000"


class SettingsError(RuntimeError):
    """Raised when a settings file cannot be loaded or parsed."""


@dataclass(slots=True)
class ProviderSettings:
    """Baseline for one provider plus its environment account mapping."""

    version: str = ""
    account_mapping: Dict[str, str] = field(default_factory=dict)
    regions: List[str] = field(default_factory=list)


@dataclass(slots=True)
class DriftSettings:
    """Effective configuration for drift scans and plan analysis."""

    terraform_version: str = DEFAULT_TERRAFORM_VERSION
    providers: Dict[str, ProviderSettings] = field(
        default_factory=lambda: {"aws": ProviderSettings(version=DEFAULT_AWS_PROVIDER_VERSION)}
    )
    critical_resources: List[str] = field(default_factory=list)
    top_n_count: int = DEFAULT_TOP_N_COUNT
    source: Path | None = None

    def baseline(self) -> VersionBaseline:
        """Return the expected constraints; providers without a version are not managed."""

        return VersionBaseline(
            terraform_version=self.terraform_version,
            provider_versions={
                name: provider.version
                for name, provider in self.providers.items()
                if provider.version
            },
        )

    def critical_registry(self) -> CriticalResourceRegistry:
        return CriticalResourceRegistry.with_defaults(self.critical_resources)

    def account_id(self, environment: str, provider: str = "aws") -> str:
        settings = self.providers.get(provider)
        if settings is None:
            return PLACEHOLDER_ACCOUNT_ID
        return settings.account_mapping.get(environment, PLACEHOLDER_ACCOUNT_ID)

    def to_dict(self) -> dict[str, Any]:
        return {
            "terraform_version": self.terraform_version,
            "providers": {
                name: {
                    "version": provider.version,
                    "account_mapping": dict(provider.account_mapping),
                    "regions": list(provider.regions),
                }
                for name, provider in self.providers.items()
            },
            "critical_resources": list(self.critical_resources),
            "top_n_count": self.top_n_count,
        }


def load_settings(
    config_path: Path | str | None = None,
    *,
    search_dir: Path | str | None = None,
) -> DriftSettings:
    """Resolve and load settings.

    An explicit ``config_path`` must exist. Without one, ``.iacdrift.yaml`` in
    ``search_dir`` (default: the working directory) is used when present, and
    built-in defaults otherwise.
    """

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise SettingsError(f"Configuration file not found: {path}")
    else:
        path = Path(search_dir or Path.cwd()) / DEFAULT_CONFIG_FILENAME
        if not path.exists():
            logger.debug("No %s found, using default settings", DEFAULT_CONFIG_FILENAME)
            return DriftSettings()

    logger.debug("Using configuration file %s", path)
    settings = settings_from_mapping(_load_document(path))
    settings.source = path
    return settings


def settings_from_mapping(data: Mapping[str, Any]) -> DriftSettings:
    """Build settings from a parsed document, applying defaults for unset values."""

    settings = DriftSettings()

    terraform_version = data.get("terraform_version")
    if terraform_version:
        settings.terraform_version = _expect_str(terraform_version, "terraform_version")

    providers = data.get("providers")
    if providers is not None:
        if not isinstance(providers, Mapping):
            raise SettingsError("'providers' must be a mapping of provider name to settings")
        for name, raw in providers.items():
            settings.providers[str(name)] = _provider_settings(str(name), raw or {})

    aws = settings.providers.setdefault("aws", ProviderSettings())
    if not aws.version:
        aws.version = DEFAULT_AWS_PROVIDER_VERSION

    critical = data.get("critical_resources")
    if critical is not None:
        if not isinstance(critical, list):
            raise SettingsError("'critical_resources' must be a list of resource types")
        settings.critical_resources = [str(item) for item in critical if item]

    top_n = data.get("top_n_count")
    if isinstance(top_n, int) and not isinstance(top_n, bool) and top_n > 0:
        settings.top_n_count = top_n

    return settings


# ------------------------------------------------------------------
def _provider_settings(name: str, raw: Any) -> ProviderSettings:
    if not isinstance(raw, Mapping):
        raise SettingsError(f"Provider '{name}' settings must be a mapping")

    mapping = raw.get("account_mapping") or {}
    if not isinstance(mapping, Mapping):
        raise SettingsError(f"'providers.{name}.account_mapping' must be a mapping")

    regions = raw.get("regions") or []
    if not isinstance(regions, list):
        raise SettingsError(f"'providers.{name}.regions' must be a list")

    version = raw.get("version") or ""
    return ProviderSettings(
        version=_expect_str(version, f"providers.{name}.version"),
        account_mapping={str(env): str(account) for env, account in mapping.items()},
        regions=[str(region) for region in regions],
    )


def _expect_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise SettingsError(f"'{key}' must be a string")
    return value


def _load_document(path: Path) -> Mapping[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Failed to read configuration file {path}") from exc

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in configuration file {path}") from exc

    if not isinstance(data, Mapping):
        raise SettingsError(f"Configuration file must be a mapping: {path}")

    return data


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "DriftSettings",
    "ProviderSettings",
    "SettingsError",
    "load_settings",
    "settings_from_mapping",
]
