"""Proposed mutations emitted by the oracle."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from intake_engine.domain.model.enums import ActionKind, ActionVerb, RecordKind


@dataclass(frozen=True, slots=True)
class ProposedAction:
    """One proposed mutation.

    ``kind`` stays a plain string so unknown kinds survive ingestion and the merge pass;
    they fail at execution time instead.

    ``shape_error`` marks an envelope whose parameters were not an object; such an
    action carries empty parameters and fails when executed.
    """

    kind: str
    parameters: Mapping[str, Any] = field(default_factory=dict[str, Any])
    placeholder_id: str | None = None
    shape_error: str | None = None

    @property
    def known_kind(self) -> ActionKind | None:
        return ActionKind.lookup(self.kind)

    @property
    def verb(self) -> ActionVerb | None:
        kind = self.known_kind
        return kind.verb if kind is not None else None

    @property
    def record_kind(self) -> RecordKind | None:
        kind = self.known_kind
        return kind.record_kind if kind is not None else None

    @property
    def client_id(self) -> Any:
        return self.parameters.get("clientId")

    @property
    def record_id(self) -> Any:
        return self.parameters.get("recordId")

    @property
    def updates(self) -> Mapping[str, Any]:
        updates = self.parameters.get("updates")
        if isinstance(updates, Mapping):
            return updates  # pyright: ignore[reportUnknownVariableType]
        return {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "parameters": dict(self.parameters)}
        if self.placeholder_id is not None:
            payload["placeholderId"] = self.placeholder_id
        return payload
