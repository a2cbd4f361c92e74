"""Batch ingestion: structural checks and placeholder tokenization."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from intake_engine.domain.actions.proposed import ProposedAction
from intake_engine.domain.actions.tokens import normalize_placeholder_id, tokenize
from intake_engine.domain.errors import InvalidBatchError

log = logging.getLogger(__name__)


class RawAction(BaseModel):
    """Envelope of one oracle action.

    Accepts both the ``kind``/``parameters``/``placeholderId`` vocabulary and the
    ``action``/``params``/``returnId`` one the assistant prompt uses. ``parameters`` is
    taken as given here; a non-object value fails that action at execution time.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: str = Field(min_length=1, validation_alias=AliasChoices("kind", "action"))
    parameters: Any = Field(
        default_factory=dict[str, Any],
        validation_alias=AliasChoices("parameters", "params"),
    )
    placeholder_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("placeholderId", "returnId", "placeholder_id"),
    )

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("placeholder_id", mode="before")
    @classmethod
    def _number_as_text(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("placeholder_id", mode="after")
    @classmethod
    def _strip_token_prefix(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = normalize_placeholder_id(value.strip())
        return value or None

    @property
    def shape_error(self) -> str | None:
        if isinstance(self.parameters, Mapping):
            return None
        return f"parameters must be an object, got {type(self.parameters).__name__}"  # pyright: ignore[reportUnknownArgumentType]

    def parameter_map(self) -> dict[str, Any]:
        if isinstance(self.parameters, Mapping):
            return dict(self.parameters)  # pyright: ignore[reportUnknownArgumentType]
        return {}


def parse_batch(raw: object) -> list[ProposedAction]:
    """Validate a raw batch and convert it into ``ProposedAction`` values.

    Raises ``InvalidBatchError`` before any processing when the batch is not a list,
    an entry is not an object or lacks its kind, or a placeholder id is declared twice.
    Entries whose parameters are not an object are kept and fail on their own later.
    """

    if isinstance(raw, str | bytes) or not isinstance(raw, Sequence):
        raise InvalidBatchError(f"Action batch must be a list, got {type(raw).__name__}")

    envelopes: list[tuple[RawAction, str | None]] = []
    for index, item in enumerate(raw):  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
        if isinstance(item, ProposedAction):
            envelopes.append((RawAction.model_validate(item.to_dict()), item.shape_error))
            continue
        if not isinstance(item, Mapping):
            raise InvalidBatchError(f"Action {index} must be an object, got {type(item).__name__}")  # pyright: ignore[reportUnknownArgumentType]
        try:
            envelope = RawAction.model_validate(dict(item))  # pyright: ignore[reportUnknownArgumentType]
        except ValidationError as exc:
            raise InvalidBatchError(f"Action {index} is malformed: {exc}") from exc
        if envelope.shape_error is not None:
            log.warning("Action %d (%s): %s", index, envelope.kind, envelope.shape_error)
        envelopes.append((envelope, envelope.shape_error))

    declared: set[str] = set()
    for index, (envelope, _) in enumerate(envelopes):
        if envelope.placeholder_id is None:
            continue
        if envelope.placeholder_id in declared:
            raise InvalidBatchError(
                f"Action {index} redeclares placeholder {envelope.placeholder_id!r}"
            )
        declared.add(envelope.placeholder_id)

    actions = [
        ProposedAction(
            kind=envelope.kind,
            parameters=tokenize(envelope.parameter_map(), declared=declared),
            placeholder_id=envelope.placeholder_id,
            shape_error=shape_error,
        )
        for envelope, shape_error in envelopes
    ]
    log.debug("Parsed %d action(s), %d placeholder(s)", len(actions), len(declared))
    return actions
