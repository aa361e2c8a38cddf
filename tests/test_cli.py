"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from main import main


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CRAFTPROFILE_PROJECTS_ROOT",
        "CRAFTPROFILE_PROFILE_PATH",
        "CRAFTPROFILE_LOG_LEVEL",
        "CRAFTPROFILE_FETCH_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def projects_root(tmp_path: Path, project_payload: dict) -> Path:
    project_dir = tmp_path / "aurora"
    project_dir.mkdir()
    (project_dir / "project.json").write_text(json.dumps(project_payload), encoding="utf-8")
    return tmp_path


def _run(projects_root: Path, *args: str) -> None:
    main(["--projects-root", str(projects_root), *args])


def test_show_prints_form_state(projects_root: Path, capsys) -> None:
    _run(projects_root, "show", "aurora")

    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "new"
    assert payload["serverProperties"]["motd"] == "Welcome to Aurora"
    assert payload["plugins"] == [{"id": "luckperms", "version": "5.4.102"}]


def test_generate_prints_preview_without_writing(projects_root: Path, capsys) -> None:
    _run(
        projects_root,
        "generate",
        "aurora",
        "--max-players",
        "40",
        "--no-online-mode",
        "--plugin",
        "geyser=2.0",
        "--remove-plugin",
        "luckperms",
    )

    document = yaml.safe_load(capsys.readouterr().out)
    data = document["configs"]["files"][0]["data"]
    assert data["maxPlayers"] == 40
    assert data["onlineMode"] is False
    assert document["plugins"] == [{"id": "geyser", "version": "2.0"}]
    assert not (projects_root / "aurora" / "profiles" / "base.yml").exists()


def test_generate_write_merges_into_existing_profile(
    projects_root: Path, existing_profile_text: str, capsys
) -> None:
    profile = projects_root / "aurora" / "profiles" / "base.yml"
    profile.parent.mkdir()
    profile.write_text(existing_profile_text, encoding="utf-8")

    _run(
        projects_root,
        "generate",
        "aurora",
        "--no-paper-global",
        "--seed",
        "",
        "--write",
    )

    out = capsys.readouterr().out
    assert out.rstrip().endswith("Saved profile to profiles/base.yml")

    saved = yaml.safe_load(profile.read_text(encoding="utf-8"))
    assert saved["initCommands"][0] == "say hi"
    assert "overrides" not in saved
    assert "seed" not in saved["world"]
    assert [entry["output"] for entry in saved["configs"]["files"]] == ["server.properties"]

    project = json.loads((projects_root / "aurora" / "project.json").read_text(encoding="utf-8"))
    assert [plugin["id"] for plugin in project["plugins"]] == ["luckperms", "essentialsx"]


def test_unknown_project_exits_with_error(projects_root: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(projects_root, "show", "missing")

    assert excinfo.value.code == 2
    assert "Unknown project 'missing'." in capsys.readouterr().out


def test_unparsable_profile_exits_with_error(projects_root: Path, capsys) -> None:
    profile = projects_root / "aurora" / "profiles" / "base.yml"
    profile.parent.mkdir()
    profile.write_text("name: [broken\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _run(projects_root, "generate", "aurora", "--write")

    assert excinfo.value.code == 2
    assert "Failed to parse existing profile YAML" in capsys.readouterr().out
    assert profile.read_text(encoding="utf-8") == "name: [broken\n"


def test_invalid_settings_exit_with_error(
    projects_root: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.setenv("CRAFTPROFILE_FETCH_WORKERS", "none")

    with pytest.raises(SystemExit) as excinfo:
        _run(projects_root, "show", "aurora")

    assert excinfo.value.code == 2
    assert "Invalid configuration" in capsys.readouterr().out


def test_malformed_plugin_option_is_rejected(projects_root: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(projects_root, "generate", "aurora", "--plugin", "geyser")
    assert excinfo.value.code == 2
