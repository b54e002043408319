"""Configuration loading for setup-inspequte."""

from .settings import (
    ConfigError,
    SetupSettings,
    load_settings,
    load_yaml_config,
)

__all__ = [
    "ConfigError",
    "SetupSettings",
    "load_settings",
    "load_yaml_config",
]
