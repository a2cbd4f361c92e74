from __future__ import annotations

from intake_engine.domain.actions import PlaceholderToken
from intake_engine.domain.batch import IdRegistry, resolve_parameters


def test_tokens_resolve_inside_nested_objects_and_lists() -> None:
    registry = IdRegistry()
    registry.register("c1", "client-abc")
    registry.register("a1", "asset-xyz")

    resolution = resolve_parameters(
        {
            "clientId": PlaceholderToken("c1"),
            "updates": {
                "sharedClientIds": [PlaceholderToken("c1"), "client-other"],
                "nested": {"assetId": PlaceholderToken("a1")},
            },
        },
        registry,
    )

    assert resolution.complete
    assert resolution.parameters == {
        "clientId": "client-abc",
        "updates": {
            "sharedClientIds": ["client-abc", "client-other"],
            "nested": {"assetId": "asset-xyz"},
        },
    }


def test_literal_strings_are_never_substituted() -> None:
    registry = IdRegistry()
    registry.register("r1", "emp-1")

    resolution = resolve_parameters(
        {"recordId": "$r1 and more", "notes": "see $r1", "price": "$r1"}, registry
    )

    assert resolution.parameters == {
        "recordId": "$r1 and more",
        "notes": "see $r1",
        "price": "$r1",
    }


def test_unresolved_tokens_degrade_to_literal_text() -> None:
    resolution = resolve_parameters({"recordId": PlaceholderToken("r9")}, IdRegistry())

    assert resolution.parameters == {"recordId": "$r9"}
    assert resolution.unresolved == (PlaceholderToken("r9"),)
    assert not resolution.complete


def test_registry_tracks_registered_placeholders() -> None:
    registry = IdRegistry()
    registry.register("r1", "emp-1")
    registry.register("r1", "emp-1")

    assert "r1" in registry
    assert len(registry) == 1
    assert registry.lookup(PlaceholderToken("r1")) == "emp-1"
    assert registry.as_dict() == {"r1": "emp-1"}
