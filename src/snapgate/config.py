"""Runtime configuration for snapgate tunables.

Values live on ``Constants``. They are layered in increasing precedence:
YAML config file, SNAPGATE_* environment variables, then CLI flags.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, coercion)
CONFIG_KEYS: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "socket": ("SNAPD_SOCKET", str),
    "snap_binary": ("SNAP_BINARY", str),
    "channel": ("DEFAULT_CHANNEL", str),
    "request_timeout": ("REQUEST_TIMEOUT", float),
    "cli_timeout": ("CLI_TIMEOUT", float),
    "poll_interval": ("CHANGE_POLL_INTERVAL_SEC", float),
    "max_attempts": ("CHANGE_MAX_ATTEMPTS", int),
    "log_format": ("LOG_FORMAT", str),
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


def apply_settings(settings: Dict[str, Any], origin: str) -> None:
    """Apply known keys to Constants; unknown keys are logged and ignored."""
    for key, value in settings.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown %s setting: %s", origin, key)
            continue
        attr, coerce = CONFIG_KEYS[key]
        try:
            setattr(Constants, attr, coerce(value))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {origin} setting '{key}': {value!r}") from exc


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML config file and apply it to Constants.

    The file may hold the settings at top level or under a ``snapgate`` key.

    Returns:
        The settings mapping that was applied.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    settings = data.get("snapgate", data)
    if not isinstance(settings, dict):
        raise ConfigError(f"Config {path}: 'snapgate' must be a mapping")
    apply_settings(settings, "config")
    logger.debug("Loaded config from %s", path)
    return settings


def apply_env_overrides(environ: Optional[Dict[str, str]] = None) -> None:
    """Apply SNAPGATE_<KEY> environment variables, e.g. SNAPGATE_SOCKET."""
    environ = os.environ if environ is None else environ
    settings = {}
    for key in CONFIG_KEYS:
        value = environ.get(f"{Constants.ENV_PREFIX}{key.upper()}")
        if value is not None and value.strip():
            settings[key] = value.strip()
    apply_settings(settings, "environment")


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with the highest precedence."""
    settings = {}
    if getattr(args, "SOCKET", None):
        settings["socket"] = args.SOCKET
    if getattr(args, "POLL_INTERVAL", None) is not None:
        settings["poll_interval"] = args.POLL_INTERVAL
    if getattr(args, "MAX_ATTEMPTS", None) is not None:
        settings["max_attempts"] = args.MAX_ATTEMPTS
    if getattr(args, "SNAP_BINARY", None):
        settings["snap_binary"] = args.SNAP_BINARY
    apply_settings(settings, "CLI")
