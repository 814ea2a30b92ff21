from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from contact_dedupe.grouping import DEFAULT_THRESHOLD, SEED_STRATEGY, STRATEGIES

ENV_PREFIX = "CONTACT_DEDUPE_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    """Raised when a setting is missing or malformed."""


@dataclass(frozen=True)
class DetectorSettings:
    threshold: float = DEFAULT_THRESHOLD
    strategy: str = SEED_STRATEGY
    fold_accents: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigError(f"threshold must be between 0 and 1, got {self.threshold}")
        if self.strategy not in STRATEGIES:
            raise ConfigError(f"strategy must be one of {STRATEGIES}, got {self.strategy!r}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        env_file: Path | None = None,
    ) -> "DetectorSettings":
        """Read ``CONTACT_DEDUPE_*`` variables, loading ``.env`` first.

        An explicit ``environ`` mapping skips the process environment and the
        ``.env`` file entirely.
        """
        if environ is None:
            load_dotenv(dotenv_path=env_file or Path.cwd() / ".env")
            environ = os.environ

        defaults = cls()
        return cls(
            threshold=_parse_float(environ, "THRESHOLD", defaults.threshold),
            strategy=environ.get(ENV_PREFIX + "STRATEGY", defaults.strategy).strip().lower(),
            fold_accents=_parse_bool(environ, "FOLD_ACCENTS", defaults.fold_accents),
            log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).strip().upper(),
        )


def _parse_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(ENV_PREFIX + key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX + key} must be a number, got {raw!r}") from exc


def _parse_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(ENV_PREFIX + key)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{ENV_PREFIX + key} must be a boolean, got {raw!r}")
