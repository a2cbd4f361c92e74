"""Builders and fakes for domain store related tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from intake_engine.domain.actions import ProposedAction
from intake_engine.domain.model import AssetCategory

if TYPE_CHECKING:
    from collections.abc import Sequence

    from intake_engine.adapters.memory import InMemoryDomainStore
    from intake_engine.domain.model import UpdateLogEntry
    from intake_engine.domain.ports import DomainStore

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class FixedClock:
    """Clock returning ``start`` and then advancing by one second per call."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value


def add_client(store: InMemoryDomainStore, first: str = "Ada", last: str = "Lovelace") -> str:
    return store.clients.add({"first_name": first, "last_name": last})


def add_employment(store: InMemoryDomainStore, client_id: str, employer_name: str) -> str:
    return store.employment.add(client_id, {"employer_name": employer_name})


def add_asset(
    store: InMemoryDomainStore,
    client_id: str,
    category: AssetCategory = AssetCategory.BANK_ACCOUNT,
    amount: float = 10_000.0,
) -> str:
    return store.assets.add(client_id, {"category": category, "amount": amount})


def add_active_income(
    store: InMemoryDomainStore, client_id: str, company_name: str, monthly_amount: float
) -> str:
    return store.active_income.add(
        client_id, {"company_name": company_name, "monthly_amount": monthly_amount}
    )


def action(kind: str, placeholder_id: str | None = None, **parameters: Any) -> ProposedAction:
    return ProposedAction(kind=kind, parameters=parameters, placeholder_id=placeholder_id)


@dataclass(slots=True)
class RecordingPersistence:
    """Persistence trigger fake remembering every call."""

    calls: list[tuple[DomainStore, tuple[UpdateLogEntry, ...]]] = field(default_factory=list)

    def persist(self, store: DomainStore, entries: Sequence[UpdateLogEntry]) -> None:
        self.calls.append((store, tuple(entries)))
