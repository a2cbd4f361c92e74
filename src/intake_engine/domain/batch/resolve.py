"""Placeholder resolution against identifiers produced earlier in the same pass."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from intake_engine.domain.actions.tokens import PlaceholderToken

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)


class IdRegistry:
    """Placeholder id -> concrete id, scoped to one execution pass."""

    __slots__ = ("_ids",)

    def __init__(self) -> None:
        self._ids: dict[str, str] = {}

    def register(self, placeholder_id: str, concrete_id: str) -> None:
        previous = self._ids.get(placeholder_id)
        if previous is not None and previous != concrete_id:
            log.warning(
                "Placeholder %s re-registered: %s -> %s", placeholder_id, previous, concrete_id
            )
        self._ids[placeholder_id] = concrete_id

    def lookup(self, token: PlaceholderToken) -> str | None:
        return self._ids.get(token.placeholder_id)

    def __contains__(self, placeholder_id: object) -> bool:
        return placeholder_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def as_dict(self) -> dict[str, str]:
        return dict(self._ids)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Resolved parameters plus the tokens that had no registered id yet.

    Unresolved tokens are rendered back to their literal ``$<id>`` text.
    """

    parameters: dict[str, Any]
    unresolved: tuple[PlaceholderToken, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unresolved


def resolve_parameters(parameters: Mapping[str, Any], registry: IdRegistry) -> Resolution:
    """Substitute every token anywhere in ``parameters`` by exact equality, never by substring."""

    unresolved: list[PlaceholderToken] = []

    def visit(value: Any) -> Any:
        if isinstance(value, PlaceholderToken):
            concrete = registry.lookup(value)
            if concrete is None:
                unresolved.append(value)
                return str(value)
            return concrete
        if isinstance(value, Mapping):
            return {key: visit(item) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
        if isinstance(value, list | tuple):
            return [visit(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
        return value

    resolved = {key: visit(value) for key, value in parameters.items()}
    return Resolution(parameters=resolved, unresolved=tuple(unresolved))
