"""Executor: apply a merged batch to the domain store, one action at a time.

Every action yields an ``ActionOutcome``. A failing action never aborts the
rest of the batch; failures are collected on the report instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from pydantic import ValidationError

from intake_engine.domain.actions.params import (
    AddClientParams,
    ClientTargetParams,
    CreateRecordParams,
    OracleModel,
    RemoveRecordParams,
    SetSharedOwnersParams,
    UpdateClientParams,
    UpdatePresentAddressParams,
    UpdateRecordParams,
    params_model_for,
    parse_fields,
)
from intake_engine.domain.batch.describe import client_display_name, describe_action
from intake_engine.domain.batch.resolve import IdRegistry, resolve_parameters
from intake_engine.domain.errors import ExecutionError, UnknownActionError
from intake_engine.domain.model import (
    ActionKind,
    ActionVerb,
    OutcomeStatus,
    RecordKind,
    UpdateLogEntry,
    utc_now,
)
from intake_engine.domain.ports.store import collection_for

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from intake_engine.domain.actions.proposed import ProposedAction
    from intake_engine.domain.batch.resolve import Resolution
    from intake_engine.domain.ports.store import DomainStore

log = logging.getLogger(__name__)

Clock: TypeAlias = "Callable[[], datetime]"

# parameters naming the record an action writes to
_TARGET_KEYS = ("clientId", "id", "recordId", "assetId")


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    index: int
    action: ProposedAction
    status: OutcomeStatus
    entry: UpdateLogEntry | None = None
    record_id: str | None = None
    error: Exception | None = None
    reason: str | None = None


@dataclass(slots=True)
class ExecutionReport:
    outcomes: list[ActionOutcome] = field(default_factory=list[ActionOutcome])
    registry: IdRegistry = field(default_factory=IdRegistry)

    @property
    def entries(self) -> list[UpdateLogEntry]:
        return [outcome.entry for outcome in self.outcomes if outcome.entry is not None]

    @property
    def applied(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is OutcomeStatus.APPLIED)

    @property
    def skipped(self) -> int:
        return len(self.outcomes) - self.applied

    @property
    def failures(self) -> list[ActionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is OutcomeStatus.FAILED]


@dataclass(frozen=True, slots=True)
class _Write:
    """What a single store call did."""

    target_id: str | None
    client_id: str | None
    changed: bool


class Executor:
    """Dispatches resolved actions to the domain store."""

    def __init__(self, store: DomainStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._handlers: dict[ActionKind, Callable[[Any], _Write]] = {
            ActionKind.ADD_CLIENT: self._add_client,
            ActionKind.UPDATE_CLIENT_DATA: self._update_client,
            ActionKind.REMOVE_CLIENT: self._remove_client,
            ActionKind.UPDATE_ADDRESS_DATA: self._update_present_address,
            ActionKind.SET_SHARED_OWNERS: self._set_shared_owners,
        }

    def execute(
        self, actions: Iterable[ProposedAction], *, registry: IdRegistry | None = None
    ) -> ExecutionReport:
        report = ExecutionReport(registry=registry if registry is not None else IdRegistry())
        for index, action in enumerate(actions):
            outcome = self._execute_one(index, action, report.registry)
            report.outcomes.append(outcome)
        log.info(
            "Executed %d action(s): %d applied, %d skipped",
            len(report.outcomes),
            report.applied,
            report.skipped,
        )
        return report

    def _execute_one(self, index: int, action: ProposedAction, registry: IdRegistry) -> ActionOutcome:
        try:
            return self._apply(index, action, registry)
        except ExecutionError as exc:
            log.error("Action %d failed: %s", index, exc)
            return ActionOutcome(index=index, action=action, status=OutcomeStatus.FAILED, error=exc)
        except ValidationError as exc:
            log.error("Action %d (%s) has invalid parameters: %s", index, action.kind, exc)
            return ActionOutcome(index=index, action=action, status=OutcomeStatus.FAILED, error=exc)
        except Exception as exc:
            log.exception("Action %d (%s) failed", index, action.kind)
            error = ExecutionError(action, str(exc))
            error.__cause__ = exc
            return ActionOutcome(
                index=index, action=action, status=OutcomeStatus.FAILED, error=error
            )

    def _apply(self, index: int, action: ProposedAction, registry: IdRegistry) -> ActionOutcome:
        if action.shape_error is not None:
            raise ExecutionError(action, action.shape_error)
        kind = action.known_kind
        if kind is None:
            raise UnknownActionError(action)
        resolution = resolve_parameters(action.parameters, registry)
        unresolved_target = _unresolved_target(resolution)
        if unresolved_target is not None:
            log.info(
                "Skipping %s (action %d): unresolved reference %s",
                action.kind,
                index,
                unresolved_target,
            )
            return ActionOutcome(
                index=index,
                action=action,
                status=OutcomeStatus.NOOP,
                reason=f"unresolved reference {unresolved_target}",
            )
        if resolution.unresolved:
            log.info(
                "Action %s (action %d) keeps unresolved reference(s): %s",
                action.kind,
                index,
                ", ".join(str(token) for token in resolution.unresolved),
            )
        params = params_model_for(kind).model_validate(resolution.parameters)
        client_name = self._client_name_before(kind, params)
        write = self._dispatch(kind, params)

        if not write.changed:
            log.debug("Tolerant no-op for %s (action %d): target missing", action.kind, index)
            return ActionOutcome(
                index=index,
                action=action,
                status=OutcomeStatus.NOOP,
                record_id=write.target_id,
                reason="target does not exist",
            )

        if action.placeholder_id is not None and write.target_id is not None:
            registry.register(action.placeholder_id, write.target_id)

        if client_name is None:
            client_name = client_display_name(
                self._store.clients.get(write.client_id) if write.client_id else None
            )
        description = describe_action(kind, resolution.parameters, client_name=client_name)
        entry = UpdateLogEntry(
            description=description.text,
            field=description.field,
            timestamp=self._clock().isoformat(),
            raw_parameters=resolution.parameters,
            kind=action.kind,
            client_name=client_name,
        )
        return ActionOutcome(
            index=index,
            action=action,
            status=OutcomeStatus.APPLIED,
            entry=entry,
            record_id=write.target_id,
        )

    def _client_name_before(self, kind: ActionKind, params: OracleModel) -> str | None:
        # removed clients are gone by the time the log line is written
        if kind is ActionKind.REMOVE_CLIENT and isinstance(params, ClientTargetParams):
            return client_display_name(self._store.clients.get(params.client_id))
        return None

    def _dispatch(self, kind: ActionKind, params: OracleModel) -> _Write:
        handler = self._handlers.get(kind)
        if handler is None:
            handler = self._record_handler(kind)
        return handler(params)

    def _record_handler(self, kind: ActionKind) -> Callable[[Any], _Write]:
        record_kind = kind.record_kind
        match kind.verb:
            case ActionVerb.CREATE:
                return lambda params: self._add_record(record_kind, params)
            case ActionVerb.UPDATE:
                return lambda params: self._update_record(record_kind, params)
            case ActionVerb.REMOVE:
                return lambda params: self._remove_record(record_kind, params)

    # --- client profile ------------------------------------------------------

    def _add_client(self, params: AddClientParams) -> _Write:
        fields = parse_fields(RecordKind.CLIENT, params.initial_fields())
        client_id = self._store.clients.add(fields)
        return _Write(target_id=client_id, client_id=client_id, changed=True)

    def _update_client(self, params: UpdateClientParams) -> _Write:
        fields = parse_fields(RecordKind.CLIENT, params.updates)
        changed = self._store.clients.update(params.client_id, fields)
        return _Write(target_id=params.client_id, client_id=params.client_id, changed=changed)

    def _remove_client(self, params: ClientTargetParams) -> _Write:
        changed = self._store.clients.remove(params.client_id)
        return _Write(target_id=params.client_id, client_id=params.client_id, changed=changed)

    # --- client-owned records ---------------------------------------------------

    def _update_present_address(self, params: UpdatePresentAddressParams) -> _Write:
        fields = parse_fields(RecordKind.ADDRESS, params.updates)
        changed = self._store.addresses.update_present(params.client_id, fields)
        present = self._store.addresses.present(params.client_id) if changed else None
        return _Write(
            target_id=present.id if present is not None else None,
            client_id=params.client_id,
            changed=changed,
        )

    def _set_shared_owners(self, params: SetSharedOwnersParams) -> _Write:
        changed = self._store.assets.update(
            params.client_id,
            params.asset_id,
            {"shared_client_ids": list(params.shared_client_ids)},
        )
        return _Write(target_id=params.asset_id, client_id=params.client_id, changed=changed)

    def _add_record(self, record_kind: RecordKind, params: CreateRecordParams) -> _Write:
        fields = parse_fields(record_kind, params.updates)
        record_id = collection_for(self._store, record_kind).add(params.client_id, fields)
        return _Write(target_id=record_id, client_id=params.client_id, changed=True)

    def _update_record(self, record_kind: RecordKind, params: UpdateRecordParams) -> _Write:
        fields = parse_fields(record_kind, params.updates)
        changed = collection_for(self._store, record_kind).update(
            params.client_id, params.record_id, fields
        )
        return _Write(target_id=params.record_id, client_id=params.client_id, changed=changed)

    def _remove_record(self, record_kind: RecordKind, params: RemoveRecordParams) -> _Write:
        changed = collection_for(self._store, record_kind).remove(
            params.client_id, params.record_id
        )
        return _Write(target_id=params.record_id, client_id=params.client_id, changed=changed)


def _unresolved_target(resolution: Resolution) -> str | None:
    if resolution.complete:
        return None
    pending = {str(token) for token in resolution.unresolved}
    for key in _TARGET_KEYS:
        value = resolution.parameters.get(key)
        if isinstance(value, str) and value in pending:
            return value
    return None

