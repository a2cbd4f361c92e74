"""Ports for collaborators that consume the update log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from intake_engine.domain.model import UpdateLogEntry
    from intake_engine.domain.ports.store import DomainStore


MessageRole: TypeAlias = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class HistoryMessage:
    role: MessageRole
    content: str
    updates: tuple[UpdateLogEntry, ...] = ()


@runtime_checkable
class ConversationHistory(Protocol):
    """Rolling transcript shown to the user."""

    def append(self, message: HistoryMessage) -> None: ...

    def messages(self) -> Sequence[HistoryMessage]: ...


@runtime_checkable
class PersistenceTrigger(Protocol):
    """Durably saves mutated state; invoked once per batch that changed something."""

    def persist(self, store: DomainStore, entries: Sequence[UpdateLogEntry]) -> None: ...
