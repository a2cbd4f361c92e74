"""Human-readable log lines for applied actions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from intake_engine.domain.model import ActionKind, RecordKind

if TYPE_CHECKING:
    from intake_engine.domain.model import ClientProfile

DEFAULT_CLIENT_NAME = "Client"

FIELD_TAGS: dict[RecordKind, str] = {
    RecordKind.CLIENT: "client",
    RecordKind.ADDRESS: "address",
    RecordKind.EMPLOYMENT: "employment",
    RecordKind.ACTIVE_INCOME: "income",
    RecordKind.PASSIVE_INCOME: "income",
    RecordKind.ASSET: "assets",
    RecordKind.REAL_ESTATE: "real-estate",
}

_TEMPLATES: dict[ActionKind, str] = {
    ActionKind.ADD_CLIENT: "Added new client",
    ActionKind.UPDATE_CLIENT_DATA: "Updated {name}",
    ActionKind.REMOVE_CLIENT: "Removed {name}",
    ActionKind.UPDATE_ADDRESS_DATA: "Updated address for {name}",
    ActionKind.ADD_FORMER_ADDRESS: "Added former address for {name}",
    ActionKind.UPDATE_FORMER_ADDRESS: "Updated former address for {name}",
    ActionKind.REMOVE_FORMER_ADDRESS: "Removed former address for {name}",
    ActionKind.ADD_EMPLOYMENT_RECORD: "Added employment record for {name}",
    ActionKind.UPDATE_EMPLOYMENT_RECORD: "Updated employment for {name}",
    ActionKind.REMOVE_EMPLOYMENT_RECORD: "Removed employment record for {name}",
    ActionKind.ADD_ACTIVE_INCOME: "Added income record for {name}",
    ActionKind.UPDATE_ACTIVE_INCOME: "Updated income for {name}",
    ActionKind.REMOVE_ACTIVE_INCOME: "Removed income record for {name}",
    ActionKind.ADD_PASSIVE_INCOME: "Added passive income for {name}",
    ActionKind.UPDATE_PASSIVE_INCOME: "Updated passive income for {name}",
    ActionKind.REMOVE_PASSIVE_INCOME: "Removed passive income for {name}",
    ActionKind.ADD_ASSET: "Added asset for {name}",
    ActionKind.UPDATE_ASSET: "Updated asset for {name}",
    ActionKind.REMOVE_ASSET: "Removed asset for {name}",
    ActionKind.SET_SHARED_OWNERS: "Marked asset as joint/shared ownership",
    ActionKind.ADD_REAL_ESTATE_RECORD: "Added new real estate property",
    ActionKind.UPDATE_REAL_ESTATE_RECORD: "Updated property: {fields}",
    ActionKind.REMOVE_REAL_ESTATE_RECORD: "Removed real estate property",
}


@dataclass(frozen=True, slots=True)
class Description:
    text: str
    field: str


def client_display_name(profile: ClientProfile | None) -> str:
    if profile is None:
        return DEFAULT_CLIENT_NAME
    return profile.display_name


def describe_action(
    kind: ActionKind, parameters: Mapping[str, Any], *, client_name: str
) -> Description:
    updates = parameters.get("updates")
    fields = ", ".join(updates) if isinstance(updates, Mapping) else ""  # pyright: ignore[reportUnknownArgumentType]
    text = _TEMPLATES[kind].format(name=client_name, fields=fields)
    return Description(text=text, field=FIELD_TAGS[kind.record_kind])
