"""Update log entries produced by the executor."""

from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True, slots=True)
class UpdateLogEntry:
    """One human-readable line per successfully applied action."""

    description: str
    field: str
    timestamp: str
    raw_parameters: dict[str, Any] = dataclasses.field(default_factory=dict[str, Any])
    kind: str = ""
    client_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "description": self.description,
            "field": self.field,
            "timestamp": self.timestamp,
            "rawParameters": self.raw_parameters,
            "kind": self.kind,
        }
        if self.client_name is not None:
            payload["clientName"] = self.client_name
        return payload
