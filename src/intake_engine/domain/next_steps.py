"""Default prompt listing what is still missing from the intake."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from intake_engine.domain.model import ClientProfile
    from intake_engine.domain.ports.store import DomainStore

ALL_COMPLETE = "All required information seems complete for all clients. Anything else to add?"

_PROFILE_FIELDS: tuple[tuple[str, str], ...] = (
    ("email", "email"),
    ("phone", "phone"),
    ("ssn", "SSN"),
    ("dob", "date of birth"),
    ("citizenship", "citizenship"),
    ("marital_status", "marital status"),
)


def _blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def missing_items(store: DomainStore, client: ClientProfile) -> list[str]:
    """Missing pieces for one fully named client, in prompt order."""

    missing = [label for attr, label in _PROFILE_FIELDS if _blank(getattr(client, attr))]
    if not store.employment.list(client.id):
        missing.append("employment details")
    if not store.active_income.list(client.id):
        missing.append("income information")
    present = store.addresses.present(client.id)
    if present is None or _blank(present.addr.address1):
        missing.append("current address")
    if not store.assets.list(client.id):
        missing.append("assets")
    return missing


def suggest_next_steps(store: DomainStore) -> str:
    unnamed = 0
    lines: list[str] = []
    for client in store.clients.list():
        if not client.has_complete_name:
            unnamed += 1
            continue
        missing = missing_items(store, client)
        if missing:
            lines.append(f"For {client.display_name}: {', '.join(missing)}")

    parts: list[str] = []
    if unnamed == 1:
        parts.append("You have 1 client that needs to be named")
    elif unnamed > 1:
        parts.append(f"You have {unnamed} clients that need to be named")
    if lines:
        parts.append("Please provide the following:\n" + "\n".join(lines))
    return "\n\n".join(parts) if parts else ALL_COMPLETE
