from __future__ import annotations

from datetime import datetime

from pydantic import ValidationError

from intake_engine.adapters.memory import InMemoryDomainStore
from intake_engine.domain.actions import PlaceholderToken, ProposedAction, parse_batch
from intake_engine.domain.batch import Executor
from intake_engine.domain.errors import ExecutionError, UnknownActionError, UnknownClientError
from intake_engine.domain.model import AssetCategory, OutcomeStatus
from intake_engine.domain.next_steps import suggest_next_steps
from tests.helpers.stores import FIXED_NOW, FixedClock, action, add_asset, add_client


def test_forward_references_resolve_to_ids_created_earlier(store: InMemoryDomainStore) -> None:
    batch = parse_batch(
        [
            {"kind": "addClient", "parameters": {"firstName": "Grace", "lastName": "Hopper"}, "placeholderId": "c1"},
            {"kind": "addEmploymentRecord", "parameters": {"clientId": "$c1"}, "placeholderId": "e1"},
            {
                "kind": "updateEmploymentRecord",
                "parameters": {
                    "clientId": "$c1",
                    "recordId": "$e1",
                    "updates": {"employerName": "Navy", "grossMonthlyIncome": 4200},
                },
            },
        ]
    )

    report = Executor(store).execute(batch)

    (client,) = store.clients.list()
    (record,) = store.employment.list(client.id)
    assert report.applied == 3
    assert client.display_name == "Grace Hopper"
    assert record.employer_name == "Navy"
    assert record.gross_monthly_income == 4200.0
    assert report.registry.as_dict() == {"c1": client.id, "e1": record.id}
    assert all("$" not in str(entry.raw_parameters) for entry in report.entries)


def test_failing_action_does_not_abort_the_batch(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    batch = [
        action("updateClientData", clientId=client_id, updates={"email": "ada@example.com"}),
        action("addAsset", clientId="client-ghost"),
        action("addEmploymentRecord", clientId=client_id),
    ]

    report = Executor(store).execute(batch)

    assert [entry.kind for entry in report.entries] == ["updateClientData", "addEmploymentRecord"]
    assert report.applied == 2
    assert report.skipped == 1
    (failure,) = report.failures
    assert failure.index == 1
    assert isinstance(failure.error, ExecutionError)
    assert isinstance(failure.error.__cause__, UnknownClientError)


def test_unknown_kind_fails_at_dispatch(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    batch = [
        action("teleportClient", clientId=client_id),
        action("addAsset", clientId=client_id),
    ]

    report = Executor(store).execute(batch)

    assert [outcome.status for outcome in report.outcomes] == [
        OutcomeStatus.FAILED,
        OutcomeStatus.APPLIED,
    ]
    assert isinstance(report.outcomes[0].error, UnknownActionError)


def test_update_of_missing_record_is_a_tolerant_noop(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    asset_id = add_asset(store, client_id, amount=500.0)

    report = Executor(store).execute(
        [
            action("updateAsset", clientId=client_id, recordId="asset-stale", updates={"amount": 1}),
            action("removeEmploymentRecord", clientId=client_id, recordId="emp-none"),
            action("updateClientData", clientId="client-none", updates={"phone": "5551234567"}),
        ]
    )

    assert report.entries == []
    assert report.applied == 0
    assert report.skipped == 3
    assert report.failures == []
    assert {outcome.status for outcome in report.outcomes} == {OutcomeStatus.NOOP}
    assert store.assets.list(client_id)[0].id == asset_id
    assert store.assets.list(client_id)[0].amount == 500.0


def test_unresolved_target_is_skipped_not_written(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)

    report = Executor(store).execute(
        [
            ProposedAction(
                kind="updateEmploymentRecord",
                parameters={
                    "clientId": client_id,
                    "recordId": PlaceholderToken("later"),
                    "updates": {"employerName": "Acme"},
                },
            )
        ]
    )

    (outcome,) = report.outcomes
    assert outcome.status is OutcomeStatus.NOOP
    assert outcome.reason == "unresolved reference $later"
    assert store.employment.list(client_id) == ()


def test_merged_update_registers_its_placeholder(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    asset_id = add_asset(store, client_id, category=AssetCategory.GIFT, amount=100.0)
    other_client = add_client(store, "Charles", "Babbage")

    report = Executor(store).execute(
        [
            action(
                "updateAsset",
                placeholder_id="a1",
                clientId=client_id,
                recordId=asset_id,
                updates={"amount": 100.5},
            ),
            ProposedAction(
                kind="setSharedOwners",
                parameters={
                    "clientId": client_id,
                    "assetId": PlaceholderToken("a1"),
                    "sharedClientIds": [other_client],
                },
            ),
        ]
    )

    assert report.applied == 2
    (asset,) = store.assets.list(client_id)
    assert asset.amount == 100.5
    assert asset.shared_client_ids == [other_client]
    assert report.entries[1].description == "Marked asset as joint/shared ownership"


def test_log_entry_carries_description_field_and_timestamp(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)

    report = Executor(store, clock=FixedClock()).execute(
        [action("addEmploymentRecord", clientId=client_id, updates={"employerName": "Acme"})]
    )

    (entry,) = report.entries
    assert entry.description == "Added employment record for Ada Lovelace"
    assert entry.field == "employment"
    assert entry.timestamp == FIXED_NOW.isoformat()
    assert entry.raw_parameters == {"clientId": client_id, "updates": {"employerName": "Acme"}}
    assert entry.client_name == "Ada Lovelace"
    assert entry.to_dict()["rawParameters"] == entry.raw_parameters


def test_invalid_parameter_shape_fails_that_action(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    asset_id = add_asset(store, client_id)

    report = Executor(store).execute(
        [
            action("updateAsset", clientId=client_id, recordId=asset_id, updates={"category": "Yacht"}),
            action("removeAsset", clientId=client_id),
        ]
    )

    assert report.applied == 0
    assert len(report.failures) == 2
    assert all(isinstance(failure.error, ValidationError) for failure in report.failures)


def test_removed_client_is_named_in_the_log(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)

    report = Executor(store).execute([action("removeClient", id=client_id)])

    assert report.entries[0].description == "Removed Ada Lovelace"
    assert store.clients.get(client_id) is None


def test_present_address_and_former_address_writes(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)

    report = Executor(store).execute(
        [
            action(
                "updateAddressData",
                clientId=client_id,
                data={"addr": {"address1": "1 Main St", "city": "Springfield"}, "fromDate": "2020-01-01"},
            ),
            action(
                "addFormerAddress",
                clientId=client_id,
                address={"addr": {"address1": "9 Old Rd"}, "fromDate": "2015-01-01", "toDate": "2019-12-31"},
            ),
        ]
    )

    present = store.addresses.present(client_id)
    (former,) = store.addresses.list(client_id)
    assert report.applied == 2
    assert present is not None
    assert present.addr.address1 == "1 Main St"
    assert present.addr.city == "Springfield"
    assert former.addr.address1 == "9 Old Rd"
    assert former.to_date == "2019-12-31"
    assert [entry.field for entry in report.entries] == ["address", "address"]


def test_real_estate_update_lists_changed_fields(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    property_id = store.real_estate.add(client_id)

    report = Executor(store).execute(
        [
            action(
                "updateRealEstateRecord",
                clientId=client_id,
                recordId=property_id,
                updates={"propertyValue": 350000, "monthlyTaxes": 400},
            )
        ]
    )

    assert report.entries[0].description == "Updated property: propertyValue, monthlyTaxes"
    assert report.entries[0].field == "real-estate"
    assert store.real_estate.list(client_id)[0].property_value == 350000.0


def test_null_name_is_ignored_and_the_batch_continues(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    executor = Executor(store)

    report = executor.execute(
        [
            action("updateClientData", clientId=client_id, updates={"firstName": None}),
            action("updateClientData", clientId=client_id, updates={"email": "ada@example.com"}),
        ]
    )
    later = executor.execute(
        [action("updateClientData", clientId=client_id, updates={"phone": "5551234567"})]
    )

    profile = store.clients.get(client_id)
    assert profile is not None
    assert profile.first_name == "Ada"
    assert profile.email == "ada@example.com"
    assert [outcome.status for outcome in report.outcomes] == [OutcomeStatus.APPLIED] * 2
    assert later.entries[0].client_name == "Ada Lovelace"


def test_null_address_parts_leave_the_present_address_intact(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    store.addresses.update_present(client_id, {"addr": {"address1": "1 Main St", "city": "Springfield"}})

    report = Executor(store).execute(
        [
            action("updateAddressData", clientId=client_id, updates={"addr": None}),
            action("updateAddressData", clientId=client_id, updates={"addr": {"address1": None, "city": "Shelbyville"}}),
        ]
    )

    present = store.addresses.present(client_id)
    assert report.failures == []
    assert present is not None
    assert present.addr.address1 == "1 Main St"
    assert present.addr.city == "Shelbyville"
    assert "Ada Lovelace" in suggest_next_steps(store)


def test_null_amount_keeps_the_recorded_amount(store: InMemoryDomainStore) -> None:
    client_id = add_client(store)
    asset_id = add_asset(store, client_id, amount=2500.0)
    store.assets.update(client_id, asset_id, {"source": "Savings"})

    report = Executor(store).execute(
        [action("updateAsset", clientId=client_id, recordId=asset_id, updates={"amount": None, "source": None})]
    )

    (asset,) = store.assets.list(client_id)
    assert report.applied == 1
    assert asset.amount == 2500.0
    assert asset.source is None


def test_failure_while_logging_fails_only_that_action(store: InMemoryDomainStore) -> None:
    calls = iter([RuntimeError("clock unavailable"), FIXED_NOW])

    def flaky_clock() -> datetime:
        value = next(calls)
        if isinstance(value, Exception):
            raise value
        return value

    report = Executor(store, clock=flaky_clock).execute(
        [
            action("addClient", firstName="Ada"),
            action("addClient", firstName="Grace"),
        ]
    )

    (failure,) = report.failures
    assert failure.index == 0
    assert isinstance(failure.error, ExecutionError)
    assert isinstance(failure.error.__cause__, RuntimeError)
    assert report.applied == 1
    assert report.entries[0].timestamp == FIXED_NOW.isoformat()


def test_non_object_parameters_fail_that_action(store: InMemoryDomainStore) -> None:
    actions = parse_batch(
        [
            {"kind": "updateClientData", "parameters": ["firstName", "Ada"]},
            {"kind": "addClient", "parameters": {"firstName": "Grace"}},
        ]
    )

    report = Executor(store).execute(actions)

    (failure,) = report.failures
    assert failure.index == 0
    assert isinstance(failure.error, ExecutionError)
    assert "parameters must be an object" in str(failure.error)
    assert report.applied == 1
