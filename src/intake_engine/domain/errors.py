"""Error taxonomy for batch interpretation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from intake_engine.domain.actions.proposed import ProposedAction


class IntakeError(Exception):
    """Base class for domain errors raised by intake_engine."""


class InvalidBatchError(IntakeError, ValueError):
    """Raised before any processing when the batch is structurally invalid."""


class MatchingError(IntakeError):
    """Raised while computing a duplicate match; always recovered by the merge pass."""

    def __init__(self, action: ProposedAction, message: str) -> None:
        self.action = action
        super().__init__(f"{action.kind}: {message}")


class ExecutionError(IntakeError):
    """Wraps the failure of a single action; carried on its outcome, never raised out of a batch."""

    def __init__(self, action: ProposedAction, message: str) -> None:
        self.action = action
        super().__init__(f"{action.kind}: {message}")


class UnknownActionError(ExecutionError):
    """Raised at dispatch when no domain store operation exists for an action kind."""

    def __init__(self, action: ProposedAction) -> None:
        super().__init__(action, "no domain store operation for this action kind")


class UnknownClientError(IntakeError, KeyError):
    """Raised by stores when a record is created for a client that does not exist."""

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__(f"Unknown client: {client_id}")

    def __str__(self) -> str:
        return self.args[0]
