from __future__ import annotations

from craftprofile import InitCommand, collect_init_commands, parse_profile, parse_profile_text
from craftprofile.init_commands import iter_init_commands


def test_reads_string_and_mapping_entries(existing_profile_text: str) -> None:
    commands = iter_init_commands(parse_profile_text(existing_profile_text))

    assert commands == [
        InitCommand(command="say hi"),
        InitCommand(command="gamerule keepInventory true", type="gamerule"),
    ]


def test_reads_from_parsed_documents(existing_profile_text: str) -> None:
    document = parse_profile(existing_profile_text)
    assert [command.command for command in iter_init_commands(document)] == [
        "say hi",
        "gamerule keepInventory true",
    ]


def test_unusable_entries_are_skipped() -> None:
    document = {
        "initCommands": [
            "  ",
            {"type": "plugin"},
            {"command": 5},
            {
                "command": " lp group default permission set essentials.home ",
                "type": "plugin",
                "plugin": "luckperms",
                "description": "Allow /home",
            },
            {"command": "time set day", "type": "weird"},
        ]
    }

    assert iter_init_commands(document) == [
        InitCommand(
            command="lp group default permission set essentials.home",
            type="plugin",
            plugin="luckperms",
            description="Allow /home",
        ),
        InitCommand(command="time set day"),
    ]


def test_missing_or_malformed_list_yields_nothing() -> None:
    assert iter_init_commands(None) == []
    assert iter_init_commands({"initCommands": "say hi"}) == []


def test_overlays_follow_the_base_profile() -> None:
    base = {"initCommands": ["say base"]}
    overlays = [
        {"initCommands": [{"command": "say overlay one"}]},
        None,
        {"initCommands": ["say overlay two"]},
    ]

    assert collect_init_commands(base, overlays) == [
        "say base",
        "say overlay one",
        "say overlay two",
    ]
