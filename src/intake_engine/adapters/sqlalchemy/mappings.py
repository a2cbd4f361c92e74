"""SQLAlchemy Core tables for persisted intake state."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONObject(TypeDecorator[dict[str, Any]]):
    """JSON object stored as text; non-JSON values are written via ``str``."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: dict[str, Any] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, default=str, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, Any]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        return cast(dict[str, Any], loaded)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

client_snapshot_table = Table(
    "client_snapshot",
    metadata,
    Column("client_id", String, primary_key=True),
    Column("payload", JSONObject, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

update_log_table = Table(
    "update_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", String, nullable=False, default=""),
    Column("field", String, nullable=False),
    Column("description", String, nullable=False),
    Column("timestamp", String, nullable=False),
    Column("client_name", String, nullable=True),
    Column("raw_parameters", JSONObject, nullable=False),
    Column("recorded_at", UTCDateTime, nullable=False),
    Index("ix_update_log_recorded_at", "recorded_at"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the intake metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
