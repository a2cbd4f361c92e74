from __future__ import annotations

import pytest

from intake_engine.adapters.memory import InMemoryDomainStore
from intake_engine.domain.batch import BatchEngine
from intake_engine.domain.errors import InvalidBatchError
from intake_engine.domain.model import OutcomeStatus
from tests.helpers.stores import FixedClock, add_client, add_employment


def _batch(client_id: str) -> list[dict[str, object]]:
    return [
        {"kind": "addEmploymentRecord", "parameters": {"clientId": client_id}, "placeholderId": "r1"},
        {
            "kind": "updateEmploymentRecord",
            "parameters": {
                "clientId": client_id,
                "recordId": "$r1",
                "updates": {"employerName": "ACME CORP", "jobTitle": "Engineer"},
            },
        },
        {"kind": "updateClientData", "parameters": {"clientId": client_id, "updates": {"phone": "12"}}},
    ]


def test_run_validates_merges_and_executes(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    existing_id = add_employment(store, client_id, "Acme Corp")

    result = BatchEngine(store, clock=FixedClock()).run(_batch(client_id))

    (record,) = store.employment.list(client_id)
    assert record.id == existing_id
    assert record.job_title == "Engineer"
    assert result.merge.merged_count == 1
    assert [outcome.status for outcome in result.report.outcomes] == [OutcomeStatus.APPLIED]
    (rejected,) = result.rejected
    assert rejected.action.kind == "updateClientData"
    assert rejected.errors == ("Invalid phone number format: 12",)
    profile = store.clients.get(client_id)
    assert profile is not None
    assert profile.phone == ""


def test_field_validation_can_be_disabled(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    add_employment(store, client_id, "Acme Corp")

    result = BatchEngine(store, validate_fields=False).run(_batch(client_id))

    assert result.rejected == ()
    assert result.report.applied == 2
    profile = store.clients.get(client_id)
    assert profile is not None
    assert profile.phone == "12"


def test_new_records_are_created_when_nothing_matches(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    add_employment(store, client_id, "Globex")

    result = BatchEngine(store).run(_batch(client_id)[:2])

    assert result.merge.merged_count == 0
    assert [record.employer_name for record in store.employment.list(client_id)] == [
        "Globex",
        "ACME CORP",
    ]
    assert len(result.entries) == 2


def test_structurally_invalid_batch_changes_nothing(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)

    with pytest.raises(InvalidBatchError):
        BatchEngine(store).run(
            [
                {"kind": "addAsset", "parameters": {"clientId": client_id}},
                {"parameters": {"clientId": client_id}},
            ]
        )

    assert store.assets.list(client_id) == ()
