"""Configuration loading for drift baselines."""

from .settings import (
    DEFAULT_CONFIG_FILENAME,
    DriftSettings,
    ProviderSettings,
    SettingsError,
    load_settings,
    settings_from_mapping,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "DriftSettings",
    "ProviderSettings",
    "SettingsError",
    "load_settings",
    "settings_from_mapping",
]
