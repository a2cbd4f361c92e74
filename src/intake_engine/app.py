"""Application entry point: one oracle response in, summarized result out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from intake_engine.adapters.memory import RollingHistory
from intake_engine.config.engine import EngineConfig, get_engine_config
from intake_engine.domain.batch.engine import BatchEngine
from intake_engine.domain.errors import InvalidBatchError
from intake_engine.domain.model import utc_now
from intake_engine.domain.next_steps import suggest_next_steps
from intake_engine.domain.ports.history import HistoryMessage

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from intake_engine.domain.actions.validation import RejectedAction
    from intake_engine.domain.batch.execute import ExecutionReport
    from intake_engine.domain.batch.merge import MergeRecord
    from intake_engine.domain.model import UpdateLogEntry
    from intake_engine.domain.ports.history import ConversationHistory, PersistenceTrigger
    from intake_engine.domain.ports.store import DomainStore

log = logging.getLogger(__name__)


class OracleResponse(BaseModel):
    """Structured reply of the assistant: the action batch plus user-facing text."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    actions: list[Any]
    summary: str = ""
    next_steps: str = ""


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    report: ExecutionReport
    summary: str
    next_steps: str
    rejected: tuple[RejectedAction, ...] = ()
    merges: tuple[MergeRecord, ...] = ()

    @property
    def entries(self) -> list[UpdateLogEntry]:
        return self.report.entries


def parse_response(payload: object) -> OracleResponse:
    """Validate the response envelope; JSON text and mappings are both accepted."""

    try:
        if isinstance(payload, str | bytes):
            return OracleResponse.model_validate_json(payload)
        return OracleResponse.model_validate(payload)
    except ValidationError as exc:
        raise InvalidBatchError(f"Malformed oracle response: {exc}") from exc


def create_history(config: EngineConfig | None = None) -> RollingHistory:
    config = config or get_engine_config()
    return RollingHistory(limit=config.history_limit)


def apply_oracle_response(
    payload: object,
    *,
    store: DomainStore,
    history: ConversationHistory | None = None,
    persistence: PersistenceTrigger | None = None,
    config: EngineConfig | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ProcessingResult:
    """Apply one oracle response to ``store``.

    Raises ``InvalidBatchError`` before anything is applied when the envelope or the
    batch is structurally invalid. Per-action failures never raise; they are reported
    on ``result.report.failures``. The persistence trigger runs once, and only when at
    least one update was applied.
    """

    config = config or get_engine_config()
    response = parse_response(payload)
    engine = BatchEngine(store, validate_fields=config.validate_fields, clock=clock or utc_now)
    result = engine.run(response.actions)
    entries = result.entries

    next_steps = response.next_steps.strip() or suggest_next_steps(store)

    if history is not None:
        history.append(
            HistoryMessage(role="assistant", content=response.summary, updates=tuple(entries))
        )

    if persistence is not None and entries:
        persistence.persist(store, entries)
    elif persistence is not None:
        log.debug("Nothing applied; skipping persistence")

    return ProcessingResult(
        report=result.report,
        summary=response.summary,
        next_steps=next_steps,
        rejected=result.rejected,
        merges=result.merge.merges,
    )
