"""SQLAlchemy-backed unit of work for persisted intake state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from intake_engine.adapters.sqlalchemy.mappings import create_all_tables
from intake_engine.adapters.sqlalchemy.repositories import (
    SqlAlchemyClientSnapshotRepository,
    SqlAlchemyUpdateLogRepository,
)
from intake_engine.config.storage import get_database_config
from intake_engine.domain.ports.persistence import IntakeRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before ``startup`` or misconfigured."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to an engine and create any missing tables.

    Without ``engine`` one is built from ``database_uri`` or the database configuration.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started. Pass force=True to rebind.")

    if engine is None:
        config = get_database_config()
        engine = create_engine(database_uri or config.uri, echo=config.echo, future=True)
    create_all_tables(engine)
    _STATE.engine = engine
    _STATE.session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    log.debug("SQLAlchemy adapter bound to %s", engine.url)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine; a later unit of work needs ``startup`` again."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.session_factory = None


class SqlAlchemyIntakeUnitOfWork:
    """One session over client snapshots and the update log.

    Leaving the ``with`` block without ``commit()`` discards the work; an exception
    rolls back explicitly and propagates.
    """

    def __init__(self) -> None:
        if _STATE.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not started. Call "
                "intake_engine.adapters.sqlalchemy.startup() before opening a unit of work."
            )
        self._session_factory = _STATE.session_factory
        self._session: Session | None = None
        self._repositories: IntakeRepositories | None = None

    def __enter__(self) -> SqlAlchemyIntakeUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._session_factory()
        self._session = session
        self._repositories = IntakeRepositories(
            snapshots=SqlAlchemyClientSnapshotRepository(session),
            update_log=SqlAlchemyUpdateLogRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> IntakeRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with block")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session


if TYPE_CHECKING:
    from intake_engine.domain.ports.persistence import IntakeUnitOfWork

    _uow_check: IntakeUnitOfWork = SqlAlchemyIntakeUnitOfWork()
