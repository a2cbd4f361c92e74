"""Logging setup for processes embedding the intake engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int = logging.INFO
    format: str = DEFAULT_LOG_FORMAT


def get_logging_config() -> LoggingConfig:
    raw = os.getenv("INTAKE_LOG_LEVEL")
    if raw is None or not raw.strip():
        return LoggingConfig()
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level for INTAKE_LOG_LEVEL: {raw!r}")
    return LoggingConfig(level=level)


def configure_logging(config: LoggingConfig | None = None, *, force: bool = False) -> None:
    """Initialise the root logger from ``config`` (default: the environment).

    Merge decisions are logged at INFO, so the default level shows which proposed
    records were folded into existing ones. Pass ``force=True`` to reconfigure.
    """

    config = config or get_logging_config()
    logging.basicConfig(
        level=config.level,
        format=config.format,
        datefmt="%H:%M:%S",
        force=force,
    )
