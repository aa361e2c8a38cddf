"""Test configuration for the profile tooling."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from textwrap import dedent
from typing import Any, Callable, Dict

import pytest

from craftprofile import InMemoryProfileService, ProjectIdentity
from craftprofile.schemas import ProjectSummary


EXISTING_PROFILE = dedent(
    """
    name: Aurora
    minecraft:
      loader: paper
      version: 1.21.1
    world:
      mode: imported
      name: aurora-world
    plugins:
      - id: luckperms
        version: "5.4.102"
      - id: "  essentialsx "
        version: " 2.20.1 "
      - id: ""
        version: "1.0"
    configs:
      files:
        - template: server.properties.hbs
          output: server.properties
          data:
            motd: Hello from Aurora
            max-players: 42
            view-distance: "12"
            online-mode: false
            enforce-secure-profile: "TRUE"
            level-seed: "8675309"
        - template: paper-global.yml.hbs
          output: config/paper-global.yml
          data:
            chunk-system:
              target-tick-distance: 4
        - template: ""
          output: bukkit.yml
    initCommands:
      - say hi
      - type: gamerule
        command: gamerule keepInventory true
    gamerules:
      doDaylightCycle: false
    """
).lstrip()


@pytest.fixture()
def project_payload() -> Dict[str, Any]:
    return {
        "id": "aurora",
        "name": "Aurora",
        "minecraftVersion": "1.21.1",
        "loader": "paper",
        "plugins": [{"id": "luckperms", "version": "5.4.102"}],
    }


@pytest.fixture()
def project_summary(project_payload: Dict[str, Any]) -> ProjectSummary:
    return ProjectSummary.model_validate(project_payload)


@pytest.fixture()
def identity() -> ProjectIdentity:
    return ProjectIdentity(name="Aurora", minecraft_version="1.21.1", loader="paper")


@pytest.fixture()
def existing_profile_text() -> str:
    return EXISTING_PROFILE


@pytest.fixture()
def make_service(
    project_payload: Dict[str, Any],
) -> Callable[..., InMemoryProfileService]:
    """Factory fixture for in-memory services holding the sample project."""

    def _factory(
        profile: str | None = None,
        configs: list[dict[str, Any]] | None = None,
    ) -> InMemoryProfileService:
        profiles = {"aurora": profile} if profile is not None else {}
        return InMemoryProfileService(
            [project_payload],
            profiles=profiles,
            configs={"aurora": configs or []},
        )

    return _factory


__all__ = ["EXISTING_PROFILE"]
