"""Tests for overlaying generated content on a persisted profile."""

from __future__ import annotations

from craftprofile import (
    EngineGlobalFields,
    ProjectIdentity,
    ServerPropertiesFields,
    WorldSettings,
    build_document,
    merge_documents,
    parse_profile,
    parse_profile_text,
)


def _generated(identity: ProjectIdentity, *, paper_global: bool = True):
    return build_document(
        identity,
        WorldSettings(seed="99"),
        [],
        ServerPropertiesFields(motd="Welcome to Aurora"),
        EngineGlobalFields(include=paper_global),
    )


def test_unknown_keys_survive_a_merge(existing_profile_text: str, identity: ProjectIdentity) -> None:
    existing = parse_profile_text(existing_profile_text)
    merged = merge_documents(existing, _generated(identity)).to_payload()

    assert merged["initCommands"] == existing["initCommands"]
    assert merged["gamerules"] == {"doDaylightCycle": False}
    assert list(merged) == [
        "name",
        "minecraft",
        "world",
        "plugins",
        "configs",
        "overrides",
        "mergePolicy",
        "initCommands",
        "gamerules",
    ]


def test_owned_keys_come_from_generated(existing_profile_text: str, identity: ProjectIdentity) -> None:
    generated = _generated(identity)
    merged = merge_documents(parse_profile_text(existing_profile_text), generated)

    assert merged.owned_payload() == generated.owned_payload()
    assert merged.plugins == []
    assert merged.world == WorldSettings(mode="generated", name="world", seed="99")


def test_excluded_owned_key_is_removed(identity: ProjectIdentity) -> None:
    existing = {
        "overrides": [{"path": "paper-global.yml:chunk-system.target-tick-distance", "value": 4}],
        "notes": "keep me",
    }
    merged = merge_documents(existing, _generated(identity, paper_global=False)).to_payload()

    assert "overrides" not in merged
    assert merged["notes"] == "keep me"


def test_nested_config_fields_are_replaced_not_merged(identity: ProjectIdentity) -> None:
    existing = {
        "configs": {
            "files": [
                {
                    "template": "server.properties.hbs",
                    "output": "server.properties",
                    "data": {"motd": "old", "spawn-protection": 0},
                }
            ],
            "notes": "lost with the rest of configs",
        }
    }
    merged = merge_documents(existing, _generated(identity)).to_payload()

    assert "notes" not in merged["configs"]
    data = merged["configs"]["files"][0]["data"]
    assert data["motd"] == "Welcome to Aurora"
    assert "spawn-protection" not in data


def test_absent_existing_yields_generated(identity: ProjectIdentity) -> None:
    generated = _generated(identity)
    merged = merge_documents(None, generated)

    assert merged == generated
    assert merged is not generated


def test_merge_accepts_parsed_documents(existing_profile_text: str, identity: ProjectIdentity) -> None:
    merged = merge_documents(parse_profile(existing_profile_text), _generated(identity))
    assert list(merged.extras) == ["initCommands", "gamerules"]


def test_merge_does_not_alias_inputs(existing_profile_text: str, identity: ProjectIdentity) -> None:
    existing = parse_profile_text(existing_profile_text)
    generated = _generated(identity)
    merged = merge_documents(existing, generated)

    merged.extras["gamerules"]["doDaylightCycle"] = True
    merged.config_files[0].data["motd"] = "changed"

    assert existing["gamerules"] == {"doDaylightCycle": False}
    assert generated.config_files[0].data["motd"] == "Welcome to Aurora"
