from __future__ import annotations

from pathlib import Path

import pytest

from craftprofile import ProfileSettings


def test_defaults_when_environment_is_empty() -> None:
    settings = ProfileSettings.from_env({})

    assert settings.projects_root == Path("projects")
    assert settings.profile_path == "profiles/base.yml"
    assert settings.log_level == "WARNING"
    assert settings.fetch_workers == 3


def test_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CRAFTPROFILE_PROJECTS_ROOT", str(tmp_path))
    monkeypatch.setenv("CRAFTPROFILE_PROFILE_PATH", " profiles/survival.yml ")
    monkeypatch.setenv("CRAFTPROFILE_LOG_LEVEL", "debug")
    monkeypatch.setenv("CRAFTPROFILE_FETCH_WORKERS", "5")

    settings = ProfileSettings.from_env()

    assert settings.projects_root == tmp_path
    assert settings.profile_path == "profiles/survival.yml"
    assert settings.log_level == "DEBUG"
    assert settings.fetch_workers == 5


def test_blank_values_fall_back_to_defaults() -> None:
    settings = ProfileSettings.from_env(
        {
            "CRAFTPROFILE_PROJECTS_ROOT": "  ",
            "CRAFTPROFILE_PROFILE_PATH": "",
            "CRAFTPROFILE_LOG_LEVEL": " ",
            "CRAFTPROFILE_FETCH_WORKERS": "",
        }
    )
    assert settings == ProfileSettings()


def test_home_directory_is_expanded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = ProfileSettings.from_env({"CRAFTPROFILE_PROJECTS_ROOT": "~/servers"})
    assert settings.projects_root == tmp_path / "servers"


@pytest.mark.parametrize(
    "environ",
    [
        {"CRAFTPROFILE_LOG_LEVEL": "verbose"},
        {"CRAFTPROFILE_FETCH_WORKERS": "many"},
        {"CRAFTPROFILE_FETCH_WORKERS": "0"},
    ],
)
def test_invalid_values_are_rejected(environ: dict) -> None:
    with pytest.raises(ValueError):
        ProfileSettings.from_env(environ)
