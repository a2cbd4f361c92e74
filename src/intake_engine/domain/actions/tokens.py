"""Placeholder tokens referencing identifiers produced later in the same batch."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator

TOKEN_PREFIX = "$"


@dataclass(frozen=True, slots=True)
class PlaceholderToken:
    """Reference to the identifier a create action with ``placeholder_id`` will produce.

    Tokens are a distinct type so literal user data that happens to start with ``$``
    never collides with a reference. Equality is structural on the placeholder id.
    """

    PREFIX: ClassVar[str] = TOKEN_PREFIX

    placeholder_id: str

    def __str__(self) -> str:
        return f"{self.PREFIX}{self.placeholder_id}"

    @classmethod
    def from_text(cls, value: object, *, declared: Collection[str]) -> PlaceholderToken | None:
        """Return a token when ``value`` is exactly ``$<id>`` for a declared id."""

        if not isinstance(value, str) or not value.startswith(cls.PREFIX):
            return None
        placeholder_id = value[len(cls.PREFIX) :]
        if placeholder_id not in declared:
            return None
        return cls(placeholder_id)


def normalize_placeholder_id(value: str) -> str:
    """Strip a single leading ``$`` so ``r1`` and ``$r1`` declare the same placeholder."""

    return value[len(TOKEN_PREFIX) :] if value.startswith(TOKEN_PREFIX) else value


def tokenize(value: Any, *, declared: Collection[str]) -> Any:
    """Replace declared ``$<id>`` strings with tokens, recursing through dicts and lists."""

    return _transform(value, lambda leaf: PlaceholderToken.from_text(leaf, declared=declared))


def render(value: Any) -> Any:
    """Render any remaining tokens back to their literal ``$<id>`` text."""

    return _transform(
        value,
        lambda leaf: str(leaf) if isinstance(leaf, PlaceholderToken) else None,
    )


def iter_tokens(value: Any) -> Iterator[PlaceholderToken]:
    if isinstance(value, PlaceholderToken):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():  # pyright: ignore[reportUnknownVariableType]
            yield from iter_tokens(item)
    elif isinstance(value, list | tuple):
        for item in value:  # pyright: ignore[reportUnknownVariableType]
            yield from iter_tokens(item)


def _transform(value: Any, replace_leaf: Callable[[Any], Any | None]) -> Any:
    if isinstance(value, Mapping):
        return {
            key: _transform(item, replace_leaf)
            for key, item in value.items()  # pyright: ignore[reportUnknownVariableType]
        }
    if isinstance(value, list | tuple):
        return [_transform(item, replace_leaf) for item in value]  # pyright: ignore[reportUnknownVariableType]
    replacement = replace_leaf(value)
    return value if replacement is None else replacement
