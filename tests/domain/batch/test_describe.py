from __future__ import annotations

import pytest

from intake_engine.domain.batch import describe_action
from intake_engine.domain.batch.describe import FIELD_TAGS, client_display_name
from intake_engine.domain.model import ActionKind, ClientProfile


@pytest.mark.parametrize("kind", list(ActionKind))
def test_every_kind_has_a_description(kind: ActionKind) -> None:
    description = describe_action(kind, {"updates": {"amount": 1}}, client_name="Ada Lovelace")

    assert description.text
    assert description.field == FIELD_TAGS[kind.record_kind]


@pytest.mark.parametrize(
    ("kind", "parameters", "text", "field"),
    [
        (ActionKind.ADD_CLIENT, {}, "Added new client", "client"),
        (ActionKind.UPDATE_EMPLOYMENT_RECORD, {}, "Updated employment for Ada Lovelace", "employment"),
        (ActionKind.REMOVE_ACTIVE_INCOME, {}, "Removed income record for Ada Lovelace", "income"),
        (ActionKind.ADD_PASSIVE_INCOME, {}, "Added passive income for Ada Lovelace", "income"),
        (ActionKind.SET_SHARED_OWNERS, {}, "Marked asset as joint/shared ownership", "assets"),
        (ActionKind.UPDATE_REAL_ESTATE_RECORD, {"updates": "bad"}, "Updated property: ", "real-estate"),
    ],
)
def test_description_templates(
    kind: ActionKind, parameters: dict[str, object], text: str, field: str
) -> None:
    description = describe_action(kind, parameters, client_name="Ada Lovelace")

    assert (description.text, description.field) == (text, field)


def test_client_display_name_falls_back() -> None:
    assert client_display_name(None) == "Client"
    assert client_display_name(ClientProfile(id="client-1", last_name="Lovelace")) == "Lovelace"
    assert client_display_name(ClientProfile(id="client-1")) == "Client"
