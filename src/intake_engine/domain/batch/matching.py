"""Business-key matching of proposed records against existing ones."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from intake_engine.domain.model import (
    ActionKind,
    ActiveIncomeRecord,
    AssetRecord,
    EmploymentRecord,
    RecordKind,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence

    from intake_engine.domain.model import ClientRecord

AMOUNT_TOLERANCE = 1.0

# (record kind, client id, existing record id) of a record already used as merge target
ClaimKey: TypeAlias = tuple[RecordKind, str, str]


@dataclass(frozen=True, slots=True)
class MatchKey:
    """Business identity of a proposed record, e.g. ``("acme corp",)`` for employment."""

    record_kind: RecordKind
    client_id: str
    values: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class MatchRule:
    """How a create/update pair of one kind is recognised as an existing record."""

    record_kind: RecordKind
    create_kind: ActionKind
    update_kind: ActionKind
    key_values: Callable[[Mapping[str, Any]], tuple[Any, ...] | None]
    matches: Callable[[ClientRecord, tuple[Any, ...]], bool]

    def key_for(self, client_id: str, updates: Mapping[str, Any]) -> MatchKey | None:
        values = self.key_values(updates)
        if values is None:
            return None
        return MatchKey(record_kind=self.record_kind, client_id=client_id, values=values)


def _amount(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise TypeError(f"expected a numeric amount, got {value!r}")
    return float(value)


def _within_tolerance(existing: float | None, proposed: float) -> bool:
    if existing is None:
        return False
    return abs(existing - proposed) < AMOUNT_TOLERANCE


def _lowered(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a name, got {value!r}")
    return value.lower()


# --- employment: employer name, case-insensitive --------------------------------


def _employment_key(updates: Mapping[str, Any]) -> tuple[Any, ...] | None:
    if not updates.get("employerName"):
        return None
    return (_lowered(updates["employerName"]),)


def _employment_matches(record: ClientRecord, values: tuple[Any, ...]) -> bool:
    if not isinstance(record, EmploymentRecord) or not record.employer_name:
        return False
    return record.employer_name.lower() == values[0]


# --- asset: category and amount within tolerance ----------------------------------


def _asset_key(updates: Mapping[str, Any]) -> tuple[Any, ...] | None:
    if updates.get("amount") is None or not updates.get("category"):
        return None
    return (str(updates["category"]), _amount(updates["amount"]))


def _asset_matches(record: ClientRecord, values: tuple[Any, ...]) -> bool:
    category, amount = values
    if not isinstance(record, AssetRecord) or record.category is None:
        return False
    return record.category == category and _within_tolerance(record.amount, amount)


# --- active income: company name and monthly amount within tolerance ---------------


def _active_income_key(updates: Mapping[str, Any]) -> tuple[Any, ...] | None:
    if not updates.get("companyName") or updates.get("monthlyAmount") is None:
        return None
    return (_lowered(updates["companyName"]), _amount(updates["monthlyAmount"]))


def _active_income_matches(record: ClientRecord, values: tuple[Any, ...]) -> bool:
    company, amount = values
    if not isinstance(record, ActiveIncomeRecord) or not record.company_name:
        return False
    return record.company_name.lower() == company and _within_tolerance(
        record.monthly_amount, amount
    )


MERGE_RULES: dict[ActionKind, MatchRule] = {
    rule.create_kind: rule
    for rule in (
        MatchRule(
            record_kind=RecordKind.EMPLOYMENT,
            create_kind=ActionKind.ADD_EMPLOYMENT_RECORD,
            update_kind=ActionKind.UPDATE_EMPLOYMENT_RECORD,
            key_values=_employment_key,
            matches=_employment_matches,
        ),
        MatchRule(
            record_kind=RecordKind.ASSET,
            create_kind=ActionKind.ADD_ASSET,
            update_kind=ActionKind.UPDATE_ASSET,
            key_values=_asset_key,
            matches=_asset_matches,
        ),
        MatchRule(
            record_kind=RecordKind.ACTIVE_INCOME,
            create_kind=ActionKind.ADD_ACTIVE_INCOME,
            update_kind=ActionKind.UPDATE_ACTIVE_INCOME,
            key_values=_active_income_key,
            matches=_active_income_matches,
        ),
    )
}

MERGEABLE_RECORD_KINDS = frozenset(rule.record_kind for rule in MERGE_RULES.values())

UPDATE_KIND_RULES: dict[ActionKind, MatchRule] = {
    rule.update_kind: rule for rule in MERGE_RULES.values()
}


def claim_key(key: MatchKey, record: ClientRecord) -> ClaimKey:
    return (key.record_kind, key.client_id, record.id)


def find_existing_match(
    rule: MatchRule,
    key: MatchKey,
    candidates: Sequence[ClientRecord],
    claimed: Collection[ClaimKey],
) -> ClientRecord | None:
    """First candidate in list order that matches ``key`` and is not yet claimed."""

    for record in candidates:
        if claim_key(key, record) in claimed:
            continue
        if rule.matches(record, key.values):
            return record
    return None
