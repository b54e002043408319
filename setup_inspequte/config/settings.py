"""YAML and environment configuration for setup-inspequte.

Settings are resolved with the precedence environment > YAML file > defaults.
The environment variables are the ones GitHub runners already export
(RUNNER_TOOL_CACHE, RUNNER_TEMP, GITHUB_API_URL, GITHUB_TOKEN).

Example setup-inspequte.yaml:

    api_url: https://github.example.com/api/v3
    tool_cache_dir: ~/.cache/tools
    timeout: 60
"""

import logging
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from setup_inspequte.core.exceptions import SetupError
from setup_inspequte.release.constants import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "setup-inspequte.yaml"


class ConfigError(SetupError):
    """Configuration parsing or validation error."""

    pass


def _default_tool_cache_dir() -> Path:
    return Path.home() / ".setup-inspequte" / "tool-cache"


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "setup-inspequte"


@dataclass
class SetupSettings:
    """Resolved runtime settings."""

    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None
    tool_cache_dir: Path = None  # type: ignore[assignment]
    temp_dir: Path = None  # type: ignore[assignment]
    timeout: int = 30
    download_retries: int = 3

    def __post_init__(self):
        if self.tool_cache_dir is None:
            self.tool_cache_dir = _default_tool_cache_dir()
        if self.temp_dir is None:
            self.temp_dir = _default_temp_dir()
        self.tool_cache_dir = Path(self.tool_cache_dir).expanduser()
        self.temp_dir = Path(self.temp_dir).expanduser()


# setting name -> environment variable
_ENV_OVERRIDES = {
    "api_url": "GITHUB_API_URL",
    "token": "GITHUB_TOKEN",
    "tool_cache_dir": "RUNNER_TOOL_CACHE",
    "temp_dir": "RUNNER_TEMP",
    "timeout": "SETUP_INSPEQUTE_TIMEOUT",
}

_INT_SETTINGS = ("timeout", "download_retries")


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or is not a YAML mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")
    return config


def _coerce(name: str, value: Any) -> Any:
    if name in _INT_SETTINGS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(
                f"Setting '{name}' must be an integer, got {value!r}"
            ) from None
    return value


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SetupSettings:
    """
    Resolve settings from an optional YAML file and the environment.

    Args:
        config_file: Explicit YAML file (required to exist if given). When
            None, ./setup-inspequte.yaml is read if present.
        environ: Environment mapping (os.environ by default)

    Returns:
        SetupSettings

    Raises:
        ConfigError: If the file or a value is invalid
    """
    if environ is None:
        environ = os.environ

    if config_file is not None:
        values = load_yaml_config(Path(config_file), required=True)
    else:
        values = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    known = {f.name for f in fields(SetupSettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    settings: Dict[str, Any] = {k: v for k, v in values.items() if k in known}

    for name, env_var in _ENV_OVERRIDES.items():
        env_value = environ.get(env_var)
        if env_value:
            settings[name] = env_value

    settings = {name: _coerce(name, value) for name, value in settings.items()}
    return SetupSettings(**settings)
