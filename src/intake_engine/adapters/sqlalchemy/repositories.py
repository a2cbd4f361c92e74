"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, select

from intake_engine.adapters.sqlalchemy.mappings import client_snapshot_table, update_log_table
from intake_engine.domain.model import UpdateLogEntry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from sqlalchemy.orm import Session


class SqlAlchemyClientSnapshotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, client_id: str, payload: Mapping[str, Any], *, updated_at: datetime) -> None:
        exists = self.session.execute(
            select(client_snapshot_table.c.client_id).where(
                client_snapshot_table.c.client_id == client_id
            )
        ).scalar_one_or_none()
        if exists is None:
            stmt = client_snapshot_table.insert().values(
                client_id=client_id, payload=dict(payload), updated_at=updated_at
            )
        else:
            stmt = (
                client_snapshot_table.update()
                .where(client_snapshot_table.c.client_id == client_id)
                .values(payload=dict(payload), updated_at=updated_at)
            )
        self.session.execute(stmt)

    def get(self, client_id: str) -> dict[str, Any] | None:
        stmt = select(client_snapshot_table.c.payload).where(
            client_snapshot_table.c.client_id == client_id
        )
        payload = self.session.execute(stmt).scalar_one_or_none()
        return cast(dict[str, Any] | None, payload)

    def client_ids(self) -> Sequence[str]:
        stmt = select(client_snapshot_table.c.client_id).order_by(client_snapshot_table.c.client_id)
        return tuple(self.session.execute(stmt).scalars())

    def delete_missing(self, keep: Sequence[str]) -> int:
        stmt = delete(client_snapshot_table)
        if keep:
            stmt = stmt.where(client_snapshot_table.c.client_id.not_in(list(keep)))
        result = self.session.execute(stmt)
        return cast(int, getattr(result, "rowcount", 0) or 0)


class SqlAlchemyUpdateLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entry: UpdateLogEntry, *, recorded_at: datetime) -> None:
        self.session.execute(
            update_log_table.insert().values(
                kind=entry.kind,
                field=entry.field,
                description=entry.description,
                timestamp=entry.timestamp,
                client_name=entry.client_name,
                raw_parameters=dict(entry.raw_parameters),
                recorded_at=recorded_at,
            )
        )

    def list(self, *, limit: int | None = None) -> Sequence[UpdateLogEntry]:
        stmt = select(update_log_table).order_by(update_log_table.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return tuple(
            UpdateLogEntry(
                description=row.description,
                field=row.field,
                timestamp=row.timestamp,
                raw_parameters=row.raw_parameters,
                kind=row.kind,
                client_name=row.client_name,
            )
            for row in self.session.execute(stmt)
        )


if TYPE_CHECKING:
    from intake_engine.domain.ports.persistence import ClientSnapshotRepository, UpdateLogRepository

    _session_stub = cast("Session", object())
    _snapshot_repo: ClientSnapshotRepository = SqlAlchemyClientSnapshotRepository(_session_stub)
    _log_repo: UpdateLogRepository = SqlAlchemyUpdateLogRepository(_session_stub)
