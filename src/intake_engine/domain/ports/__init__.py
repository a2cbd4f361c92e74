"""Domain port definitions for adapters."""

from __future__ import annotations

from .history import ConversationHistory, HistoryMessage, MessageRole, PersistenceTrigger
from .persistence import (
    ClientSnapshotRepository,
    IntakeRepositories,
    IntakeUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
    UpdateLogRepository,
)
from .store import (
    AddressPeriods,
    ClientProfiles,
    DomainStore,
    RecordCollection,
    RecordLookup,
    StoreSnapshot,
    collection_for,
)

__all__ = [
    "AddressPeriods",
    "ClientProfiles",
    "ClientSnapshotRepository",
    "ConversationHistory",
    "DomainStore",
    "HistoryMessage",
    "IntakeRepositories",
    "IntakeUnitOfWork",
    "MessageRole",
    "PersistenceTrigger",
    "RecordCollection",
    "RecordLookup",
    "RepositoryCollection",
    "StoreSnapshot",
    "UnitOfWork",
    "UpdateLogRepository",
    "collection_for",
]
