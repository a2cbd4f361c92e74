"""Ports for durably saving intake state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime
    from types import TracebackType

    from intake_engine.domain.model import UpdateLogEntry


@runtime_checkable
class ClientSnapshotRepository(Protocol):
    """Latest serialized state per client."""

    def save(self, client_id: str, payload: Mapping[str, Any], *, updated_at: datetime) -> None:
        """Insert or replace the snapshot stored for ``client_id``."""
        ...

    def get(self, client_id: str) -> dict[str, Any] | None: ...

    def client_ids(self) -> Sequence[str]: ...

    def delete_missing(self, keep: Sequence[str]) -> int:
        """Delete snapshots of clients not in ``keep``; return how many were removed."""
        ...


@runtime_checkable
class UpdateLogRepository(Protocol):
    """Append-only audit trail of applied updates."""

    def add(self, entry: UpdateLogEntry, *, recorded_at: datetime) -> None: ...

    def list(self, *, limit: int | None = None) -> Sequence[UpdateLogEntry]: ...


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


@runtime_checkable
class UnitOfWork(Protocol[TRepositories]):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class IntakeRepositories(RepositoryCollection):
    snapshots: ClientSnapshotRepository
    update_log: UpdateLogRepository


IntakeUnitOfWork: TypeAlias = UnitOfWork[IntakeRepositories]
