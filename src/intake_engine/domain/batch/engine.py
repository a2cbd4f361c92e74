"""Batch orchestration: validate, merge duplicates, execute."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from intake_engine.domain.actions.ingest import parse_batch
from intake_engine.domain.actions.validation import RejectedAction, validate_actions
from intake_engine.domain.batch.execute import Executor
from intake_engine.domain.batch.matching import MERGEABLE_RECORD_KINDS
from intake_engine.domain.batch.merge import MergeResult, merge_duplicate_actions
from intake_engine.domain.model import utc_now
from intake_engine.domain.ports.store import StoreSnapshot

if TYPE_CHECKING:
    from intake_engine.domain.batch.execute import Clock, ExecutionReport
    from intake_engine.domain.model import UpdateLogEntry
    from intake_engine.domain.ports.store import DomainStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchResult:
    report: ExecutionReport
    merge: MergeResult
    rejected: tuple[RejectedAction, ...] = field(default=())

    @property
    def entries(self) -> list[UpdateLogEntry]:
        return self.report.entries


class BatchEngine:
    """Runs one action batch against a domain store.

    The caller serializes batches per client; nothing here locks the store.
    """

    def __init__(
        self,
        store: DomainStore,
        *,
        validate_fields: bool = True,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._validate_fields = validate_fields
        self._clock = clock

    def run(self, batch: object) -> BatchResult:
        """Apply ``batch``; raises ``InvalidBatchError`` only for a structurally invalid batch."""

        actions = parse_batch(batch)

        rejected: tuple[RejectedAction, ...] = ()
        if self._validate_fields:
            known_client_ids = {client.id for client in self._store.clients.list()}
            outcome = validate_actions(actions, known_client_ids=known_client_ids)
            actions, rejected = outcome.valid, tuple(outcome.rejected)

        snapshot = StoreSnapshot.capture(self._store, MERGEABLE_RECORD_KINDS)
        merge = merge_duplicate_actions(actions, snapshot)
        report = Executor(self._store, clock=self._clock).execute(merge.actions)

        log.info(
            "Batch done: %d applied, %d skipped, %d merged, %d rejected",
            report.applied,
            report.skipped,
            merge.merged_count,
            len(rejected),
        )
        return BatchResult(report=report, merge=merge, rejected=rejected)
