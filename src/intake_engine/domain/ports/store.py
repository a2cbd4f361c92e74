"""Domain store ports: per-kind record collections and read-only snapshots."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from intake_engine.domain.model import AddressPeriod, ClientRecord, RecordKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from intake_engine.domain.model import (
        ActiveIncomeRecord,
        AssetRecord,
        ClientProfile,
        EmploymentRecord,
        PassiveIncomeRecord,
        RealEstateRecord,
    )


TRecord = TypeVar("TRecord", bound=ClientRecord)


@runtime_checkable
class RecordCollection(Protocol[TRecord]):
    """Records of one kind, partitioned by owning client.

    ``update`` and ``remove`` are tolerant: they return ``False`` instead of raising
    when the client or record does not exist.
    """

    def add(self, client_id: str, values: Mapping[str, Any] | None = None) -> str: ...

    def update(self, client_id: str, record_id: str, values: Mapping[str, Any]) -> bool: ...

    def remove(self, client_id: str, record_id: str) -> bool: ...

    def list(self, client_id: str) -> Sequence[TRecord]: ...


@runtime_checkable
class AddressPeriods(RecordCollection[AddressPeriod], Protocol):
    """Address history; the present address is kept apart from former ones."""

    def update_present(self, client_id: str, values: Mapping[str, Any]) -> bool: ...

    def present(self, client_id: str) -> AddressPeriod | None: ...


@runtime_checkable
class ClientProfiles(Protocol):
    def add(self, values: Mapping[str, Any] | None = None) -> str: ...

    def update(self, client_id: str, values: Mapping[str, Any]) -> bool: ...

    def remove(self, client_id: str) -> bool: ...

    def get(self, client_id: str) -> ClientProfile | None: ...

    def list(self) -> Sequence[ClientProfile]: ...


@runtime_checkable
class DomainStore(Protocol):
    """Everything the executor may write to."""

    @property
    def clients(self) -> ClientProfiles: ...

    @property
    def addresses(self) -> AddressPeriods: ...

    @property
    def employment(self) -> RecordCollection[EmploymentRecord]: ...

    @property
    def active_income(self) -> RecordCollection[ActiveIncomeRecord]: ...

    @property
    def passive_income(self) -> RecordCollection[PassiveIncomeRecord]: ...

    @property
    def assets(self) -> RecordCollection[AssetRecord]: ...

    @property
    def real_estate(self) -> RecordCollection[RealEstateRecord]: ...


def collection_for(store: DomainStore, kind: RecordKind) -> RecordCollection[Any]:
    """Return the client-owned collection holding records of ``kind``."""

    match kind:
        case RecordKind.ADDRESS:
            return store.addresses
        case RecordKind.EMPLOYMENT:
            return store.employment
        case RecordKind.ACTIVE_INCOME:
            return store.active_income
        case RecordKind.PASSIVE_INCOME:
            return store.passive_income
        case RecordKind.ASSET:
            return store.assets
        case RecordKind.REAL_ESTATE:
            return store.real_estate
        case RecordKind.CLIENT:
            raise ValueError("Client profiles are not a client-owned record collection")


@runtime_checkable
class RecordLookup(Protocol):
    """Read-only access to existing records, as needed by duplicate matching."""

    def records(self, kind: RecordKind, client_id: str) -> Sequence[ClientRecord]: ...


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Copies of existing records taken before a batch runs."""

    by_kind: Mapping[tuple[RecordKind, str], tuple[ClientRecord, ...]] = field(default_factory=dict)

    def records(self, kind: RecordKind, client_id: str) -> Sequence[ClientRecord]:
        return self.by_kind.get((kind, client_id), ())

    @classmethod
    def capture(
        cls,
        store: DomainStore,
        kinds: Iterable[RecordKind],
        client_ids: Iterable[str] | None = None,
    ) -> StoreSnapshot:
        if client_ids is None:
            client_ids = [client.id for client in store.clients.list()]
        client_ids = list(client_ids)
        by_kind: dict[tuple[RecordKind, str], tuple[ClientRecord, ...]] = {}
        for kind in kinds:
            collection = collection_for(store, kind)
            for client_id in client_ids:
                by_kind[kind, client_id] = tuple(
                    copy.copy(record) for record in collection.list(client_id)
                )
        return cls(by_kind=by_kind)
