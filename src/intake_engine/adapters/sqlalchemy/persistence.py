"""Persistence trigger writing store snapshots and the update log to SQL."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from intake_engine.adapters.sqlalchemy.unit_of_work import SqlAlchemyIntakeUnitOfWork
from intake_engine.domain.model import RecordKind, utc_now
from intake_engine.domain.ports.store import collection_for

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from intake_engine.domain.model import Entity, UpdateLogEntry
    from intake_engine.domain.ports.persistence import IntakeUnitOfWork
    from intake_engine.domain.ports.store import DomainStore

log = logging.getLogger(__name__)

_COLLECTION_KEYS: tuple[tuple[RecordKind, str], ...] = (
    (RecordKind.ADDRESS, "formerAddresses"),
    (RecordKind.EMPLOYMENT, "employment"),
    (RecordKind.ACTIVE_INCOME, "activeIncome"),
    (RecordKind.PASSIVE_INCOME, "passiveIncome"),
    (RecordKind.ASSET, "assets"),
    (RecordKind.REAL_ESTATE, "realEstate"),
)


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, list | tuple):
        return [_jsonable(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def serialize_entity(entity: Entity) -> dict[str, Any]:
    return _jsonable(dataclasses.asdict(entity))


def serialize_client(store: DomainStore, client_id: str) -> dict[str, Any] | None:
    """Full JSON-ready state of one client, or ``None`` when the client does not exist."""

    profile = store.clients.get(client_id)
    if profile is None:
        return None
    present = store.addresses.present(client_id)
    payload: dict[str, Any] = {
        "profile": serialize_entity(profile),
        "presentAddress": serialize_entity(present) if present is not None else None,
    }
    for kind, key in _COLLECTION_KEYS:
        payload[key] = [
            serialize_entity(record) for record in collection_for(store, kind).list(client_id)
        ]
    return payload


class SqlAlchemyPersistence:
    """Saves every client of a store plus the batch's update log in one unit of work."""

    def __init__(
        self,
        *,
        uow_factory: Callable[[], IntakeUnitOfWork] = SqlAlchemyIntakeUnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def persist(self, store: DomainStore, entries: Sequence[UpdateLogEntry]) -> None:
        now = self._clock()
        client_ids = [client.id for client in store.clients.list()]
        with self._uow_factory() as uow:
            snapshots = uow.repositories.snapshots
            for client_id in client_ids:
                payload = serialize_client(store, client_id)
                if payload is not None:
                    snapshots.save(client_id, payload, updated_at=now)
            removed = snapshots.delete_missing(client_ids)
            for entry in entries:
                uow.repositories.update_log.add(entry, recorded_at=now)
            uow.commit()
        log.info(
            "Persisted %d client snapshot(s) and %d log entries; removed %d stale snapshot(s)",
            len(client_ids),
            len(entries),
            removed,
        )


if TYPE_CHECKING:
    from intake_engine.domain.ports.history import PersistenceTrigger

    _trigger_check: PersistenceTrigger = SqlAlchemyPersistence()
