"""Application configuration helpers."""

from __future__ import annotations

from .engine import EngineConfig, get_engine_config
from .env import env_flag, env_positive_int
from .errors import ConfigurationError
from .logging import LoggingConfig, configure_logging, get_logging_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "EngineConfig",
    "LoggingConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_positive_int",
    "get_database_config",
    "get_engine_config",
    "get_logging_config",
    "get_storage_config",
]
