from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .logger import log

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigError(Exception):
    """Configuration validation error."""

    pass


@dataclass
class PathsConfig:
    """The two input files handed to the comparison screen."""

    first_path: str | None = None
    second_path: str | None = None

    @classmethod
    def from_args(cls, args) -> PathsConfig:
        """Create PathsConfig from command line arguments."""
        return cls(first_path=args.first, second_path=args.second)

    @classmethod
    def from_env(cls) -> PathsConfig:
        """Create PathsConfig from environment variables."""
        return cls(
            first_path=os.environ.get('DELTA_TEXT_FIRST'),
            second_path=os.environ.get('DELTA_TEXT_SECOND'),
        )

    def merge_with_env(self) -> PathsConfig:
        """Merge with environment variables, keeping existing values if they exist."""
        return PathsConfig(
            first_path=self.first_path or os.environ.get('DELTA_TEXT_FIRST'),
            second_path=self.second_path or os.environ.get('DELTA_TEXT_SECOND'),
        )


@dataclass(frozen=True)
class _IntSetting:
    env: str
    default: int
    low: int
    high: int


class Config:
    """Delta Text settings read from ``DELTA_TEXT_*`` environment variables.

    Malformed values fall back to the default with a warning; well-formed
    values outside their bounds raise ConfigError.
    """

    _INT_SETTINGS: Final[dict[str, _IntSetting]] = {
        "debounce_ms": _IntSetting("DELTA_TEXT_DEBOUNCE_MS", 300, 0, 5000),
        "max_file_bytes": _IntSetting("DELTA_TEXT_MAX_FILE_BYTES", 5 * 1024 * 1024, 1024, 512 * 1024 * 1024),
        "max_render_segments": _IntSetting("DELTA_TEXT_MAX_RENDER_SEGMENTS", 20000, 100, 1_000_000),
        "cleanup_max_passes": _IntSetting("DELTA_TEXT_CLEANUP_MAX_PASSES", 32, 1, 1000),
    }
    _USE_WORKER_ENV: Final[str] = "DELTA_TEXT_USE_WORKER"

    debounce_ms: int
    max_file_bytes: int
    max_render_segments: int
    cleanup_max_passes: int
    use_worker: bool

    def __init__(self):
        for name, setting in self._INT_SETTINGS.items():
            setattr(self, name, self._read_int(setting.env, setting.default))
        self.use_worker = self._read_bool(self._USE_WORKER_ENV, False)
        self._validate_all()

    @staticmethod
    def _read_int(key: str, default: int) -> int:
        raw = os.environ.get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            log.warning(f"[CONFIG] {key}='{raw}' is not an integer, using default {default}")
            return default

    @staticmethod
    def _read_bool(key: str, default: bool) -> bool:
        raw = os.environ.get(key)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        log.warning(f"[CONFIG] {key}='{raw}' is not a boolean, using default {default}")
        return default

    def _validate_all(self) -> None:
        """Check every setting against its type and bounds."""
        for name, setting in self._INT_SETTINGS.items():
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{name} must be an integer, got {type(value).__name__}")
            if not setting.low <= value <= setting.high:
                raise ConfigError(f"{name} must be between {setting.low} and {setting.high}, got {value}")
        if not isinstance(self.use_worker, bool):
            raise ConfigError(f"use_worker must be a boolean, got {type(self.use_worker).__name__}")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def __repr__(self) -> str:
        fields = [f"{name}={getattr(self, name)}" for name in self._INT_SETTINGS]
        fields.append(f"use_worker={self.use_worker}")
        return f"Config({', '.join(fields)})"


# Global configuration instance
config = Config()
