"""
Configuration loading and validation for jwt-decode.

The config file is optional. Lookup order: explicit ``--config`` path,
then ``$JWT_DECODE_CONFIG``, then ``config/config.yaml`` under the project
root. When none is found the built-in defaults apply.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path

import yaml

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
    "ConfigError",
    "Settings",
    "load_config",
    "parse_settings",
    "resolve_config_path",
]

logger = logging.getLogger(__name__)

# Project root directory (two levels up from the package)
PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)

DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "config.yaml")

CONFIG_ENV_VAR = "JWT_DECODE_CONFIG"

_COLOR_MODES = ("auto", "always", "never")
_TIMEZONES = ("local", "utc")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class Settings:
    """Display settings. CLI flags override these."""

    color: str = "auto"        # auto | always | never
    raw: bool = False
    timezone: str = "local"    # local | utc
    check_expiry: bool = False

    @property
    def tzinfo(self) -> tzinfo | None:
        """Zone for rendered timestamps; None means the machine's local zone."""
        return timezone.utc if self.timezone == "utc" else None


def resolve_config_path(cli_path: str | None = None) -> str | None:
    """Pick the config file to read, or None to use the defaults.

    A path named by the user (flag or environment) is returned as is and
    must exist. The default location is only used if present.
    """
    if cli_path:
        return cli_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    if os.path.isfile(DEFAULT_CONFIG_PATH):
        return DEFAULT_CONFIG_PATH
    return None


def load_config(config_path: str) -> dict:
    """Load the YAML configuration file and return it as a dict.

    An empty file yields an empty dict.

    Raises:
        ConfigError: If the file is missing, not valid YAML, or its top
            level is not a mapping.
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(
            f"Config file not found: {config_path}\n"
            "Copy config/config.yaml.example to config/config.yaml and adjust it."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse config file {config_path}: {exc}") from exc

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at the top level")

    logger.debug("Config loaded from %s", config_path)
    return cfg


def _section(cfg: dict, name: str) -> dict:
    value = cfg.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return value


def _choice(section: dict, key: str, label: str, choices: tuple[str, ...], default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or value.lower() not in choices:
        raise ConfigError(f"{label} must be one of {', '.join(choices)} (got {value!r})")
    return value.lower()


def _flag(section: dict, key: str, label: str) -> bool:
    value = section.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{label} must be true or false (got {value!r})")
    return value


def parse_settings(cfg: dict) -> Settings:
    """Extract and validate display settings from a config dict.

    Raises:
        ConfigError: On unknown choice values or wrongly typed keys.
    """
    output = _section(cfg, "output")
    expiry = _section(cfg, "expiry")

    return Settings(
        color=_choice(output, "color", "output.color", _COLOR_MODES, "auto"),
        raw=_flag(output, "raw", "output.raw"),
        timezone=_choice(output, "timezone", "output.timezone", _TIMEZONES, "local"),
        check_expiry=_flag(expiry, "check", "expiry.check"),
    )
