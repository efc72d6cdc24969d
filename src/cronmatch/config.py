"""Process-wide settings for cronmatch.

Settings are merged from three sources, lowest priority first:

    defaults
       |
       +---> YAML file (path argument or CRONMATCH_CONFIG)
       |
       +---> environment variables (CRONMATCH_*)
       |
       v
    CronSettings (frozen)

Usage:
    >>> from cronmatch.config import configure, get_settings
    >>>
    >>> get_settings().match_seconds
    False
    >>> configure(default_timezone="Europe/Berlin")
    >>>
    >>> # Environment overrides
    >>> # CRONMATCH_DEFAULT_TIMEZONE=UTC
    >>> # CRONMATCH_MAX_SCAN_TICKS=1000000
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from cronmatch.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRONMATCH_"
CONFIG_PATH_ENV = "CRONMATCH_CONFIG"


@dataclass(frozen=True)
class CronSettings:
    """Defaults applied when callers omit optional arguments.

    Attributes:
        default_timezone: IANA zone name used when no timezone is passed;
            None means the system local zone.
        match_seconds: Whether ``CronPattern.match`` checks the second field
            by default.
        max_scan_ticks: Upper bound on ticks tested by one enumeration call;
            None means unbounded.
        search_horizon_days: How far ``CronPattern.next`` looks ahead.
    """

    default_timezone: str | None = None
    match_seconds: bool = False
    max_scan_ticks: int | None = None
    search_horizon_days: int = 366 * 4

    def __post_init__(self) -> None:
        if self.max_scan_ticks is not None and self.max_scan_ticks <= 0:
            raise ConfigError(f"max_scan_ticks must be positive: {self.max_scan_ticks}")
        if self.search_horizon_days <= 0:
            raise ConfigError(
                f"search_horizon_days must be positive: {self.search_horizon_days}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CronSettings":
        """Build settings from a mapping, coercing string values."""
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

        values = {key: _coerce(key, value) for key, value in data.items()}
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================================
# Sources
# =============================================================================


def _parse_value(value: str) -> Any:
    """Parse string value to appropriate type."""
    lowered = value.strip().lower()

    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    if lowered in ("null", "none", ""):
        return None

    try:
        return int(lowered)
    except ValueError:
        return value.strip()


_INT_SETTINGS = ("max_scan_ticks", "search_horizon_days")


def _coerce(key: str, value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        if key in _INT_SETTINGS and stripped.isdigit():
            value = int(stripped)
        else:
            value = _parse_value(value)

    if key == "default_timezone":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"default_timezone must be a zone name, got {value!r}")
        return value

    if key == "match_seconds":
        if not isinstance(value, bool):
            raise ConfigError(f"match_seconds must be a boolean, got {value!r}")
        return value

    # Remaining settings are integers; bool is an int subclass so exclude it
    if key == "max_scan_ticks" and value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def load_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect ``CRONMATCH_*`` variables as raw settings values.

    Variables that do not name a setting are skipped.
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(CronSettings)}
    result: dict[str, Any] = {}

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_PATH_ENV:
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in known:
            logger.debug("Ignoring unknown environment variable %s", key)
            continue
        result[name] = value

    return result


def load_file(path: str | Path) -> dict[str, Any]:
    """Load settings from a YAML file.

    The file may hold the settings at top level or under a ``cronmatch`` key.

    Raises:
        ConfigError: If the file is missing or not a YAML mapping.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    section = data.get("cronmatch", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'cronmatch' section in {path} must be a mapping")
    return section


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CronSettings:
    """Load settings from defaults, an optional YAML file and the environment.

    Args:
        path: YAML file; falls back to ``CRONMATCH_CONFIG`` when None.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Merged settings.
    """
    environ = os.environ if environ is None else environ
    merged: dict[str, Any] = {}

    file_path = path if path is not None else environ.get(CONFIG_PATH_ENV)
    if file_path:
        merged.update(load_file(file_path))
        logger.debug("Loaded cronmatch settings from %s", file_path)

    merged.update(load_env(environ))
    return CronSettings.from_dict(merged)


# =============================================================================
# Global Settings
# =============================================================================


_settings: CronSettings | None = None
_settings_lock = threading.Lock()


def get_settings() -> CronSettings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = load_settings()
    return _settings


def configure(settings: CronSettings | None = None, **overrides: Any) -> CronSettings:
    """Replace the process-wide settings.

    Args:
        settings: Complete settings object; current settings when None.
        **overrides: Individual fields to change.

    Returns:
        The new settings.
    """
    global _settings
    base = settings if settings is not None else get_settings()
    if overrides:
        base = CronSettings.from_dict({**base.to_dict(), **overrides})
    with _settings_lock:
        _settings = base
    return base


def reset_settings() -> None:
    """Forget the process-wide settings so the next access reloads them."""
    global _settings
    with _settings_lock:
        _settings = None
