"""Read the ``initCommands`` a profile and its overlays ask the server to run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping

from .documents import as_mapping, as_sequence
from .models import ProfileDocument

INIT_COMMAND_TYPES = ("gamerule", "plugin", "custom")


@dataclass(frozen=True)
class InitCommand:
    """A console command executed once after the server is first built."""

    command: str
    type: str | None = None
    plugin: str | None = None
    description: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "InitCommand | None":
        """Return the command described by ``payload`` or ``None`` if unusable."""

        if isinstance(payload, str):
            command = payload.strip()
            return cls(command=command) if command else None

        source = as_mapping(payload)
        command = source.get("command")
        if not isinstance(command, str) or not command.strip():
            return None
        kind = source.get("type")
        plugin = source.get("plugin")
        description = source.get("description")
        return cls(
            command=command.strip(),
            type=kind if kind in INIT_COMMAND_TYPES else None,
            plugin=plugin if isinstance(plugin, str) else None,
            description=description if isinstance(description, str) else None,
        )


def _payload(document: Mapping[Any, Any] | ProfileDocument | None) -> Mapping[Any, Any]:
    if isinstance(document, ProfileDocument):
        return document.extras
    return as_mapping(document)


def iter_init_commands(
    document: Mapping[Any, Any] | ProfileDocument | None,
) -> List[InitCommand]:
    """Return the parsed ``initCommands`` of a single document."""

    commands: List[InitCommand] = []
    for entry in as_sequence(_payload(document).get("initCommands")):
        command = InitCommand.from_payload(entry)
        if command is not None:
            commands.append(command)
    return commands


def collect_init_commands(
    base: Mapping[Any, Any] | ProfileDocument | None,
    overlays: Iterable[Mapping[Any, Any] | ProfileDocument | None] = (),
) -> List[str]:
    """Return the command strings of ``base`` followed by each overlay in order."""

    commands = [command.command for command in iter_init_commands(base)]
    for overlay in overlays:
        commands.extend(command.command for command in iter_init_commands(overlay))
    return commands


__all__ = [
    "INIT_COMMAND_TYPES",
    "InitCommand",
    "collect_init_commands",
    "iter_init_commands",
]
