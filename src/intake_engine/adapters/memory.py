"""In-memory domain store and conversation history."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from intake_engine.domain.errors import UnknownClientError
from intake_engine.domain.model import (
    ActiveIncomeRecord,
    AddressPeriod,
    AssetRecord,
    ClientProfile,
    ClientRecord,
    EmploymentRecord,
    PassiveIncomeRecord,
    RealEstateRecord,
    new_record_id,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from intake_engine.domain.ports.history import HistoryMessage

log = logging.getLogger(__name__)


class InMemoryClientProfiles:
    def __init__(self, *, on_remove: Callable[[str], None] | None = None) -> None:
        self._profiles: dict[str, ClientProfile] = {}
        self._on_remove = on_remove

    def add(self, values: Mapping[str, Any] | None = None) -> str:
        profile = ClientProfile(id=new_record_id(ClientProfile.ID_PREFIX))
        if values:
            profile.apply(values)
        self._profiles[profile.id] = profile
        return profile.id

    def update(self, client_id: str, values: Mapping[str, Any]) -> bool:
        profile = self._profiles.get(client_id)
        if profile is None:
            return False
        profile.apply(values)
        return True

    def remove(self, client_id: str) -> bool:
        if self._profiles.pop(client_id, None) is None:
            return False
        if self._on_remove is not None:
            self._on_remove(client_id)
        return True

    def get(self, client_id: str) -> ClientProfile | None:
        return self._profiles.get(client_id)

    def list(self) -> Sequence[ClientProfile]:
        return tuple(self._profiles.values())

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._profiles


TRecord = TypeVar("TRecord", bound=ClientRecord)


class InMemoryRecordCollection(Generic[TRecord]):
    """Records of one kind per client, in insertion order."""

    def __init__(self, record_type: type[TRecord], clients: InMemoryClientProfiles) -> None:
        self._record_type = record_type
        self._clients = clients
        self._records: dict[str, list[TRecord]] = {}

    def add(self, client_id: str, values: Mapping[str, Any] | None = None) -> str:
        if client_id not in self._clients:
            raise UnknownClientError(client_id)
        record = self._record_type(
            id=new_record_id(self._record_type.ID_PREFIX), client_id=client_id
        )
        if values:
            record.apply(values)
        self._records.setdefault(client_id, []).append(record)
        return record.id

    def update(self, client_id: str, record_id: str, values: Mapping[str, Any]) -> bool:
        record = self._find(client_id, record_id)
        if record is None:
            return False
        record.apply(values)
        return True

    def remove(self, client_id: str, record_id: str) -> bool:
        records = self._records.get(client_id, [])
        for position, record in enumerate(records):
            if record.id == record_id:
                del records[position]
                return True
        return False

    def list(self, client_id: str) -> Sequence[TRecord]:
        return tuple(self._records.get(client_id, ()))

    def drop_client(self, client_id: str) -> None:
        self._records.pop(client_id, None)

    def _find(self, client_id: str, record_id: str) -> TRecord | None:
        for record in self._records.get(client_id, ()):
            if record.id == record_id:
                return record
        return None


class InMemoryAddressPeriods(InMemoryRecordCollection[AddressPeriod]):
    """Former addresses as records; the present address kept per client."""

    def __init__(self, clients: InMemoryClientProfiles) -> None:
        super().__init__(AddressPeriod, clients)
        self._present: dict[str, AddressPeriod] = {}

    def update_present(self, client_id: str, values: Mapping[str, Any]) -> bool:
        if client_id not in self._clients:
            return False
        present = self._present.get(client_id)
        if present is None:
            present = AddressPeriod(
                id=AddressPeriod.PRESENT_ID, client_id=client_id, is_present=True
            )
            self._present[client_id] = present
        present.apply(values)
        return True

    def present(self, client_id: str) -> AddressPeriod | None:
        return self._present.get(client_id)

    def update(self, client_id: str, record_id: str, values: Mapping[str, Any]) -> bool:
        if record_id == AddressPeriod.PRESENT_ID:
            if client_id not in self._present:
                return False
            return self.update_present(client_id, values)
        return super().update(client_id, record_id, values)

    def drop_client(self, client_id: str) -> None:
        super().drop_client(client_id)
        self._present.pop(client_id, None)


class InMemoryDomainStore:
    """Reference domain store; mutations happen in place, without I/O."""

    def __init__(self) -> None:
        self._clients = InMemoryClientProfiles(on_remove=self._drop_client)
        self._addresses = InMemoryAddressPeriods(self._clients)
        self._employment = InMemoryRecordCollection(EmploymentRecord, self._clients)
        self._active_income = InMemoryRecordCollection(ActiveIncomeRecord, self._clients)
        self._passive_income = InMemoryRecordCollection(PassiveIncomeRecord, self._clients)
        self._assets = InMemoryRecordCollection(AssetRecord, self._clients)
        self._real_estate = InMemoryRecordCollection(RealEstateRecord, self._clients)

    @property
    def clients(self) -> InMemoryClientProfiles:
        return self._clients

    @property
    def addresses(self) -> InMemoryAddressPeriods:
        return self._addresses

    @property
    def employment(self) -> InMemoryRecordCollection[EmploymentRecord]:
        return self._employment

    @property
    def active_income(self) -> InMemoryRecordCollection[ActiveIncomeRecord]:
        return self._active_income

    @property
    def passive_income(self) -> InMemoryRecordCollection[PassiveIncomeRecord]:
        return self._passive_income

    @property
    def assets(self) -> InMemoryRecordCollection[AssetRecord]:
        return self._assets

    @property
    def real_estate(self) -> InMemoryRecordCollection[RealEstateRecord]:
        return self._real_estate

    def _drop_client(self, client_id: str) -> None:
        log.debug("Dropping records of removed client %s", client_id)
        for collection in (
            self._addresses,
            self._employment,
            self._active_income,
            self._passive_income,
            self._assets,
            self._real_estate,
        ):
            collection.drop_client(client_id)


class RollingHistory:
    """Conversation transcript keeping the most recent ``limit`` messages."""

    def __init__(self, *, limit: int) -> None:
        if limit < 1:
            raise ValueError("History limit must be positive")
        self._messages: deque[HistoryMessage] = deque(maxlen=limit)

    def append(self, message: HistoryMessage) -> None:
        self._messages.append(message)

    def messages(self) -> Sequence[HistoryMessage]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)


if TYPE_CHECKING:
    from intake_engine.domain.ports.history import ConversationHistory
    from intake_engine.domain.ports.store import DomainStore

    _store_check: DomainStore = InMemoryDomainStore()
    _history_check: ConversationHistory = RollingHistory(limit=1)
