"""Duplicate-merge pass.

A create followed anywhere later in the batch by an update of its
own placeholder describes one new record. When that record already exists for
the client, the pair is collapsed into a single update of the existing record.

The pass is a pure function of the batch and a snapshot of existing records:
the set of claimed records is threaded in and returned, never kept globally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from intake_engine.domain.actions.proposed import ProposedAction
from intake_engine.domain.actions.tokens import PlaceholderToken
from intake_engine.domain.batch.matching import (
    MERGE_RULES,
    UPDATE_KIND_RULES,
    ClaimKey,
    MatchKey,
    MatchRule,
    claim_key,
    find_existing_match,
)
from intake_engine.domain.errors import MatchingError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from intake_engine.domain.ports.store import RecordLookup

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeRecord:
    create_index: int
    update_index: int
    match_key: MatchKey
    target_id: str


@dataclass(frozen=True, slots=True)
class MergeResult:
    actions: list[ProposedAction]
    claimed: frozenset[ClaimKey]
    merges: tuple[MergeRecord, ...] = ()

    @property
    def merged_count(self) -> int:
        return len(self.merges)


@dataclass(frozen=True, slots=True)
class _Candidate:
    update_index: int
    merged: ProposedAction
    record: MergeRecord
    claim: ClaimKey


def merge_duplicate_actions(
    actions: Iterable[ProposedAction],
    snapshot: RecordLookup,
    *,
    claimed: Iterable[ClaimKey] | None = None,
) -> MergeResult:
    """Collapse create+update pairs that describe records already in ``snapshot``.

    Untouched actions keep their relative order; a merged pair takes the position of
    its create. Each existing record is a merge target at most once per pass. Updates
    that carry a ``placeholderId`` are the products of an earlier pass and claim their
    record up front; plain updates by literal id claim nothing, so a pair may still
    merge onto a record the batch also edits directly.
    """

    batch = list(actions)
    claims: set[ClaimKey] = set(claimed or ())
    claims.update(_merged_update_claims(batch))
    consumed: set[int] = set()
    output: list[ProposedAction] = []
    merges: list[MergeRecord] = []

    for index, action in enumerate(batch):
        if index in consumed:
            continue
        kind = action.known_kind
        rule = MERGE_RULES.get(kind) if kind is not None else None
        if rule is None:
            output.append(action)
            continue
        try:
            candidate = _find_merge(index, action, batch, rule, snapshot, claims, consumed)
        except MatchingError as exc:
            log.warning("Duplicate check skipped: %s", exc)
            candidate = None
        if candidate is None:
            output.append(action)
            continue
        consumed.add(candidate.update_index)
        claims.add(candidate.claim)
        merges.append(candidate.record)
        output.append(candidate.merged)
        log.info(
            "Merged %s (action %d) with %s (action %d) into existing record %s",
            action.kind,
            index,
            rule.update_kind,
            candidate.update_index,
            candidate.record.target_id,
        )

    return MergeResult(actions=output, claimed=frozenset(claims), merges=tuple(merges))


def find_update_partner(
    index: int,
    create: ProposedAction,
    batch: Sequence[ProposedAction],
    rule: MatchRule,
    consumed: Iterable[int] = (),
) -> int | None:
    """Index of the first later update of the create's own placeholder, if any."""

    if create.placeholder_id is None:
        return None
    token = PlaceholderToken(create.placeholder_id)
    skip = set(consumed)
    for later in range(index + 1, len(batch)):
        if later in skip:
            continue
        action = batch[later]
        if action.known_kind is rule.update_kind and action.record_id == token:
            return later
    return None


def _find_merge(
    index: int,
    create: ProposedAction,
    batch: Sequence[ProposedAction],
    rule: MatchRule,
    snapshot: RecordLookup,
    claims: set[ClaimKey],
    consumed: set[int],
) -> _Candidate | None:
    client_id = create.client_id
    if not isinstance(client_id, str) or not client_id:
        return None
    update_index = find_update_partner(index, create, batch, rule, consumed)
    if update_index is None:
        return None
    update = batch[update_index]

    try:
        key = rule.key_for(client_id, update.updates)
        if key is None:
            return None
        existing = find_existing_match(
            rule, key, snapshot.records(rule.record_kind, client_id), claims
        )
    except Exception as exc:
        raise MatchingError(create, str(exc)) from exc
    if existing is None:
        return None

    updates: dict[str, Any] = {**create.updates, **update.updates}
    merged = ProposedAction(
        kind=rule.update_kind.value,
        parameters={"clientId": client_id, "recordId": existing.id, "updates": updates},
        placeholder_id=create.placeholder_id,
    )
    return _Candidate(
        update_index=update_index,
        merged=merged,
        record=MergeRecord(
            create_index=index,
            update_index=update_index,
            match_key=key,
            target_id=existing.id,
        ),
        claim=claim_key(key, existing),
    )


def _merged_update_claims(batch: Iterable[ProposedAction]) -> set[ClaimKey]:
    claims: set[ClaimKey] = set()
    for action in batch:
        kind = action.known_kind
        rule = UPDATE_KIND_RULES.get(kind) if kind is not None else None
        if rule is None or action.placeholder_id is None:
            continue
        client_id, record_id = action.client_id, action.record_id
        if isinstance(client_id, str) and isinstance(record_id, str):
            claims.add((rule.record_kind, client_id, record_id))
    return claims
