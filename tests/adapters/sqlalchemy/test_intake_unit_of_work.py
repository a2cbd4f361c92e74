from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from intake_engine.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyIntakeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.stores import FIXED_NOW

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyIntakeUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_unit_of_work_commits_snapshots(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyIntakeUnitOfWork() as uow:
        uow.repositories.snapshots.save("client-1", {"profile": {"firstName": "Ada"}}, updated_at=FIXED_NOW)
        uow.commit()

    with SqlAlchemyIntakeUnitOfWork() as uow:
        assert uow.repositories.snapshots.get("client-1") == {"profile": {"firstName": "Ada"}}


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyIntakeUnitOfWork() as uow:
        uow.repositories.snapshots.save("client-1", {"profile": {}}, updated_at=FIXED_NOW)
        raise RuntimeError("boom")

    with SqlAlchemyIntakeUnitOfWork() as uow:
        assert uow.repositories.snapshots.client_ids() == ()


def test_repositories_require_an_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyIntakeUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
