from __future__ import annotations

import pytest

from intake_engine.domain.batch.matching import (
    MERGE_RULES,
    MERGEABLE_RECORD_KINDS,
    UPDATE_KIND_RULES,
    find_existing_match,
)
from intake_engine.domain.model import (
    ActionKind,
    ActiveIncomeRecord,
    AssetCategory,
    AssetRecord,
    EmploymentRecord,
    RecordKind,
)


def test_only_employment_asset_and_active_income_are_mergeable() -> None:
    assert MERGEABLE_RECORD_KINDS == {
        RecordKind.EMPLOYMENT,
        RecordKind.ASSET,
        RecordKind.ACTIVE_INCOME,
    }
    assert UPDATE_KIND_RULES[ActionKind.UPDATE_ASSET] is MERGE_RULES[ActionKind.ADD_ASSET]


@pytest.mark.parametrize(
    ("updates", "values"),
    [
        ({"employerName": "Acme"}, None),
        ({"category": "Gift"}, None),
        ({"amount": 0}, None),
        ({"category": "Gift", "amount": 0}, ("Gift", 0.0)),
        ({"category": AssetCategory.GIFT, "amount": "12.5"}, ("Gift", 12.5)),
    ],
)
def test_asset_key_needs_category_and_amount(
    updates: dict[str, object], values: tuple[object, ...] | None
) -> None:
    key = MERGE_RULES[ActionKind.ADD_ASSET].key_for("c1", updates)

    assert (key.values if key is not None else None) == values


def test_malformed_amount_raises() -> None:
    rule = MERGE_RULES[ActionKind.ADD_ACTIVE_INCOME]

    with pytest.raises((TypeError, ValueError)):
        rule.key_for("c1", {"companyName": "Acme", "monthlyAmount": "a lot"})
    with pytest.raises(TypeError):
        rule.key_for("c1", {"companyName": "Acme", "monthlyAmount": True})


def test_first_unclaimed_candidate_wins() -> None:
    rule = MERGE_RULES[ActionKind.ADD_EMPLOYMENT_RECORD]
    key = rule.key_for("c1", {"employerName": "ACME"})
    assert key is not None
    first = EmploymentRecord(id="emp-1", client_id="c1", employer_name="acme")
    second = EmploymentRecord(id="emp-2", client_id="c1", employer_name="Acme")
    nameless = EmploymentRecord(id="emp-0", client_id="c1")

    assert find_existing_match(rule, key, [nameless, first, second], claimed=()) is first
    claimed = {(RecordKind.EMPLOYMENT, "c1", "emp-1")}
    assert find_existing_match(rule, key, [first, second], claimed=claimed) is second


def test_amount_tolerance_is_strict() -> None:
    rule = MERGE_RULES[ActionKind.ADD_ACTIVE_INCOME]
    record = ActiveIncomeRecord(id="inc-1", client_id="c1", company_name="Acme", monthly_amount=100)

    near = rule.key_for("c1", {"companyName": "acme", "monthlyAmount": 100.99})
    edge = rule.key_for("c1", {"companyName": "acme", "monthlyAmount": 101})
    assert near is not None and edge is not None
    assert find_existing_match(rule, near, [record], claimed=()) is record
    assert find_existing_match(rule, edge, [record], claimed=()) is None


def test_asset_without_category_never_matches() -> None:
    rule = MERGE_RULES[ActionKind.ADD_ASSET]
    key = rule.key_for("c1", {"category": "Gift", "amount": 10})
    assert key is not None

    record = AssetRecord(id="asset-1", client_id="c1", amount=10)

    assert find_existing_match(rule, key, [record], claimed=()) is None
