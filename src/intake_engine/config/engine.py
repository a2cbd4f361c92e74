"""Batch engine defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_positive_int

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True, slots=True)
class EngineConfig:
    validate_fields: bool = True
    history_limit: int = DEFAULT_HISTORY_LIMIT


def get_engine_config() -> EngineConfig:
    return EngineConfig(
        validate_fields=env_flag("INTAKE_VALIDATE_FIELDS", default=True),
        history_limit=env_positive_int("INTAKE_HISTORY_LIMIT", default=DEFAULT_HISTORY_LIMIT),
    )
