"""SQLAlchemy adapter package for intake_engine."""

from __future__ import annotations

from .mappings import (
    client_snapshot_table,
    create_all_tables,
    metadata,
    update_log_table,
)
from .persistence import SqlAlchemyPersistence, serialize_client
from .repositories import SqlAlchemyClientSnapshotRepository, SqlAlchemyUpdateLogRepository
from .unit_of_work import (
    SqlAlchemyIntakeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyClientSnapshotRepository",
    "SqlAlchemyIntakeUnitOfWork",
    "SqlAlchemyPersistence",
    "SqlAlchemyUpdateLogRepository",
    "StartupError",
    "client_snapshot_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "serialize_client",
    "shutdown",
    "startup",
    "update_log_table",
]
