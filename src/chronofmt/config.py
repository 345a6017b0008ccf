"""Configuration for chronofmt.

Defaults used by the convenience functions (``chronofmt.format`` and
friends) when a call does not pass them explicitly. The formatting core
never reads configuration; it takes every setting as an argument.

Sources, lowest priority first:

    FormatConfig defaults
         |
         +---> FileConfigSource (YAML file)
         +---> EnvConfigSource (CHRONOFMT_* variables)
         |
         v
    FormatConfig

Usage:
    >>> from chronofmt.config import get_config, load_config
    >>>
    >>> config = load_config(config_path="chronofmt.yaml")
    >>> config.default_locale
    'en'

Environment variables:
    CHRONOFMT_DEFAULT_LOCALE=fr
    CHRONOFMT_HOUR_CYCLE=h23
    CHRONOFMT_PATTERN_CACHE_SIZE=1024
    CHRONOFMT_DATA_PATHS=["/srv/locales"]
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from chronofmt.compiler import get_pattern_cache
from chronofmt.exceptions import FormatError
from chronofmt.locale_data import get_registry
from chronofmt.protocols import HourCycle

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ConfigError(FormatError):
    """Base exception for configuration errors."""

    pass


class ConfigSourceError(ConfigError):
    """Raised when a configuration source cannot be loaded."""

    pass


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class FormatConfig:
    """Defaults for the convenience formatting functions.

    Attributes:
        default_locale: Locale used when a call passes none
        default_calendar: Calendar kind used when a call passes none
        default_number_system: Number system override, None for the locale's
        hour_cycle: Hour cycle override, None for the locale's preference
        pattern_cache_size: Maximum number of compiled patterns kept
        locale_cache_size: Maximum number of loaded locale tables kept
        data_paths: Extra directories searched for locale YAML files
    """

    default_locale: str = "en"
    default_calendar: str = "gregorian"
    default_number_system: str | None = None
    hour_cycle: HourCycle | None = None
    pattern_cache_size: int = 512
    locale_cache_size: int = 32
    data_paths: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.hour_cycle, str):
            try:
                self.hour_cycle = HourCycle(self.hour_cycle.lower())
            except ValueError:
                raise ConfigError(
                    f"Invalid hour_cycle {self.hour_cycle!r}. "
                    f"Valid values are {[h.value for h in HourCycle]}"
                ) from None
        if isinstance(self.data_paths, str):
            self.data_paths = [p for p in self.data_paths.split(os.pathsep) if p]
        for name in ("pattern_cache_size", "locale_cache_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FormatConfig":
        """Build a config, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", sorted(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_locale": self.default_locale,
            "default_calendar": self.default_calendar,
            "default_number_system": self.default_number_system,
            "hour_cycle": self.hour_cycle.value if self.hour_cycle else None,
            "pattern_cache_size": self.pattern_cache_size,
            "locale_cache_size": self.locale_cache_size,
            "data_paths": list(self.data_paths),
        }

    def apply(self) -> None:
        """Push cache sizes and data paths to the shared caches."""
        get_pattern_cache().resize(self.pattern_cache_size)
        registry = get_registry()
        registry.resize(self.locale_cache_size)
        registry.set_data_paths(self.data_paths)


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """Abstract base class for configuration sources.

    Sources are merged in priority order; higher priorities override.
    """

    def __init__(self, priority: int = 0) -> None:
        self._priority = priority

    @property
    def priority(self) -> int:
        return self._priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration values from the source."""
        pass


class EnvConfigSource(ConfigSource):
    """Environment variable configuration source.

    Example:
        CHRONOFMT_DEFAULT_LOCALE=de
        CHRONOFMT_LOCALE_CACHE_SIZE=64

        Will produce:
        {"default_locale": "de", "locale_cache_size": 64}
    """

    def __init__(self, prefix: str = "CHRONOFMT", priority: int = 100) -> None:
        super().__init__(priority)
        self._prefix = prefix

    def load(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        prefix = f"{self._prefix}_"

        for key, value in os.environ.items():
            if key.startswith(prefix):
                result[key[len(prefix):].lower()] = self._parse_value(value)

        return result

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("null", "none", ""):
            return None

        try:
            return int(value)
        except ValueError:
            pass

        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value


class FileConfigSource(ConfigSource):
    """YAML file configuration source.

    The file holds the FormatConfig fields at top level, or under a
    ``chronofmt`` key.
    """

    def __init__(self, path: str | Path, *, required: bool = False, priority: int = 50) -> None:
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            if self._required:
                raise ConfigSourceError(f"Configuration file not found: {self._path}")
            return {}

        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigSourceError(f"Failed to load config {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigSourceError(f"Configuration file {self._path} must hold a mapping")
        return data.get("chronofmt", data)


# =============================================================================
# Global Configuration
# =============================================================================

_global_config: FormatConfig | None = None
_lock = threading.Lock()


def load_config(
    *,
    config_path: str | Path | None = None,
    env_prefix: str = "CHRONOFMT",
    sources: list[ConfigSource] | None = None,
) -> FormatConfig:
    """Load configuration from a YAML file and the environment.

    The result becomes the global configuration and is applied to the
    shared caches.

    Args:
        config_path: Optional YAML file
        env_prefix: Environment variable prefix
        sources: Additional sources merged by priority

    Returns:
        The loaded FormatConfig.
    """
    global _global_config

    all_sources: list[ConfigSource] = list(sources or [])
    if config_path:
        all_sources.append(FileConfigSource(config_path, required=True))
    all_sources.append(EnvConfigSource(prefix=env_prefix))

    merged: dict[str, Any] = {}
    for source in sorted(all_sources, key=lambda s: s.priority):
        merged.update(source.load())

    config = FormatConfig.from_dict(merged)
    with _lock:
        _global_config = config
        config.apply()

    logger.debug("Loaded configuration: %s", config.to_dict())
    return config


def get_config() -> FormatConfig:
    """Get the global configuration, loading it from the environment on first use."""
    with _lock:
        config = _global_config
    if config is None:
        config = load_config()
    return config


def set_config(config: FormatConfig) -> None:
    """Replace the global configuration."""
    global _global_config

    with _lock:
        _global_config = config
        config.apply()


def reset_config() -> None:
    """Restore defaults; the next ``get_config`` reloads from the environment."""
    global _global_config

    with _lock:
        _global_config = None
        FormatConfig().apply()
