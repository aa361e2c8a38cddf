"""Typed building blocks for profile documents and the editable form state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from .coercion import coerce_string
from .documents import GenericValue, as_mapping, as_sequence, clone_value

SERVER_PROPERTIES_OUTPUT = "server.properties"
SERVER_PROPERTIES_TEMPLATE = "server.properties.hbs"
PAPER_GLOBAL_OUTPUT = "config/paper-global.yml"
PAPER_GLOBAL_TEMPLATE = "paper-global.yml.hbs"
TARGET_TICK_DISTANCE_OVERRIDE = "paper-global.yml:chunk-system.target-tick-distance"

DEFAULT_WORLD_MODE = "generated"
DEFAULT_WORLD_NAME = "world"
DEFAULT_MOTD = "New MC Server"
ARRAY_MERGE_POLICIES = ("replace", "merge")

# Top-level keys produced by the builder, in the order they are written.
OWNED_KEYS: Tuple[str, ...] = (
    "name",
    "minecraft",
    "world",
    "plugins",
    "configs",
    "overrides",
    "mergePolicy",
)


@dataclass(frozen=True)
class ProjectIdentity:
    """Read-only description of the project a profile belongs to."""

    name: str
    minecraft_version: str = ""
    loader: str = ""

    def default_motd(self) -> str:
        """Return the welcome message offered for a fresh profile."""

        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            return DEFAULT_MOTD
        return f"Welcome to {name}"


@dataclass(frozen=True)
class PluginReference:
    """A plugin pinned to a version inside a profile."""

    id: str
    version: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "version": self.version}

    @classmethod
    def from_payload(cls, payload: Any) -> "PluginReference":
        source = as_mapping(payload)
        return cls(
            id=coerce_string(source.get("id"), ""),
            version=coerce_string(source.get("version"), ""),
        )


@dataclass
class WorldSettings:
    """World generation settings. ``seed`` is omitted from output when blank."""

    mode: str = DEFAULT_WORLD_MODE
    name: str = DEFAULT_WORLD_NAME
    seed: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "mode": self.mode or DEFAULT_WORLD_MODE,
            "name": self.name or DEFAULT_WORLD_NAME,
        }
        seed = self.seed.strip() if self.seed else ""
        if seed:
            payload["seed"] = seed
        return payload

    @classmethod
    def from_payload(cls, payload: Any) -> "WorldSettings":
        source = as_mapping(payload)
        return cls(
            mode=coerce_string(source.get("mode"), "").strip() or DEFAULT_WORLD_MODE,
            name=coerce_string(source.get("name"), "").strip() or DEFAULT_WORLD_NAME,
            seed=coerce_string(source.get("seed"), "").strip(),
        )


@dataclass
class ConfigFileEntry:
    """A single ``configs.files`` item.

    ``output`` is the unique key within a document's file list. ``data`` is
    the generic payload rendered into the template and is omitted when
    ``None``.
    """

    output: str
    template: str = ""
    data: GenericValue = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"template": self.template, "output": self.output}
        if self.data is not None:
            payload["data"] = clone_value(self.data)
        return payload

    @classmethod
    def from_payload(cls, payload: Any) -> "ConfigFileEntry":
        source = as_mapping(payload)
        return cls(
            output=coerce_string(source.get("output"), ""),
            template=coerce_string(source.get("template"), ""),
            data=clone_value(source.get("data")),
        )


@dataclass(frozen=True)
class OverrideEntry:
    """Top-level override addressing a value inside a rendered config file."""

    path: str
    value: GenericValue

    def to_payload(self) -> Dict[str, Any]:
        return {"path": self.path, "value": clone_value(self.value)}


@dataclass
class ServerPropertiesFields:
    """Editable projection of the ``server.properties`` entry.

    ``max_players`` and ``view_distance`` hold the text typed into the form;
    the builder turns them into integers. ``include=False`` means the entry is
    left out of the document.
    """

    include: bool = True
    motd: str = DEFAULT_MOTD
    max_players: str = "20"
    view_distance: str = "10"
    online_mode: bool = True
    enforce_secure_profile: bool = False

    @classmethod
    def defaults_for(cls, identity: ProjectIdentity | None) -> "ServerPropertiesFields":
        motd = identity.default_motd() if identity is not None else DEFAULT_MOTD
        return cls(motd=motd)


@dataclass
class EngineGlobalFields:
    """Editable projection of the ``config/paper-global.yml`` entry."""

    include: bool = True
    target_tick_distance: str = "6"


@dataclass
class ProfileFormState:
    """Everything an edit session lets the user change."""

    world: WorldSettings = field(default_factory=WorldSettings)
    plugins: List[PluginReference] = field(default_factory=list)
    server_properties: ServerPropertiesFields = field(
        default_factory=ServerPropertiesFields
    )
    engine_global: EngineGlobalFields = field(default_factory=EngineGlobalFields)
    source: str = "new"

    def to_payload(self) -> Dict[str, Any]:
        """Return a JSON-serialisable view of the form state."""

        server = self.server_properties
        return {
            "source": self.source,
            "world": {
                "mode": self.world.mode,
                "name": self.world.name,
                "seed": self.world.seed,
            },
            "plugins": [plugin.to_payload() for plugin in self.plugins],
            "serverProperties": {
                "include": server.include,
                "motd": server.motd,
                "maxPlayers": server.max_players,
                "viewDistance": server.view_distance,
                "onlineMode": server.online_mode,
                "enforceSecureProfile": server.enforce_secure_profile,
            },
            "paperGlobal": {
                "include": self.engine_global.include,
                "targetTickDistance": self.engine_global.target_tick_distance,
            },
        }


@dataclass
class ProfileDocument:
    """A profile split into builder-owned fields and a passthrough bag.

    ``extras`` keeps every top-level key the builder does not own, in the
    order it was read, so that a generate/save cycle never drops content the
    editor has no model for. Owned fields left as ``None`` are omitted from
    the payload.
    """

    name: str | None = None
    loader: str | None = None
    minecraft_version: str | None = None
    world: WorldSettings | None = None
    plugins: List[PluginReference] | None = None
    config_files: List[ConfigFileEntry] | None = None
    overrides: List[OverrideEntry] | None = None
    array_merge_policy: str | None = None
    extras: Dict[Any, GenericValue] = field(default_factory=dict)

    def find_config(self, output: str) -> ConfigFileEntry | None:
        for entry in self.config_files or ():
            if entry.output == output:
                return entry
        return None

    def owned_payload(self) -> Dict[str, Any]:
        """Return only the builder-owned keys that are set."""

        payload: Dict[str, Any] = {}
        if self.name is not None:
            payload["name"] = self.name
        if self.loader is not None or self.minecraft_version is not None:
            minecraft: Dict[str, Any] = {}
            if self.loader is not None:
                minecraft["loader"] = self.loader
            if self.minecraft_version is not None:
                minecraft["version"] = self.minecraft_version
            payload["minecraft"] = minecraft
        if self.world is not None:
            payload["world"] = self.world.to_payload()
        if self.plugins is not None:
            payload["plugins"] = [plugin.to_payload() for plugin in self.plugins]
        if self.config_files is not None:
            payload["configs"] = {
                "files": [entry.to_payload() for entry in self.config_files]
            }
        if self.overrides is not None:
            payload["overrides"] = [entry.to_payload() for entry in self.overrides]
        if self.array_merge_policy is not None:
            payload["mergePolicy"] = {"arrays": self.array_merge_policy}
        return payload

    def to_payload(self) -> Dict[Any, Any]:
        """Return the full document as plain data, extras after owned keys."""

        payload: Dict[Any, Any] = self.owned_payload()
        for key, value in self.extras.items():
            if key in OWNED_KEYS:
                continue
            payload[key] = clone_value(value)
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[Any, Any]) -> "ProfileDocument":
        """Read a parsed mapping, tolerating foreign or older-schema shapes."""

        if not isinstance(payload, Mapping):
            raise TypeError("profile payload must be a mapping")

        name = payload.get("name")
        minecraft = payload.get("minecraft")
        world = payload.get("world")
        plugins = payload.get("plugins")
        configs = payload.get("configs")
        overrides = payload.get("overrides")
        merge_policy = as_mapping(payload.get("mergePolicy")).get("arrays")

        document = cls(
            name=coerce_string(name, "") if name is not None else None,
            world=WorldSettings.from_payload(world) if isinstance(world, Mapping) else None,
        )
        if isinstance(minecraft, Mapping):
            loader = minecraft.get("loader")
            version = minecraft.get("version")
            document.loader = coerce_string(loader, "") if loader is not None else None
            document.minecraft_version = (
                coerce_string(version, "") if version is not None else None
            )
        if plugins is not None:
            document.plugins = [
                PluginReference.from_payload(entry)
                for entry in as_sequence(plugins)
                if isinstance(entry, Mapping)
            ]
        if isinstance(configs, Mapping):
            document.config_files = [
                ConfigFileEntry.from_payload(entry)
                for entry in as_sequence(configs.get("files"))
                if isinstance(entry, Mapping)
            ]
        if overrides is not None:
            document.overrides = [
                OverrideEntry(path=coerce_string(entry.get("path"), ""), value=entry.get("value"))
                for entry in as_sequence(overrides)
                if isinstance(entry, Mapping)
            ]
        if merge_policy in ARRAY_MERGE_POLICIES:
            document.array_merge_policy = merge_policy

        document.extras = {
            key: clone_value(value)
            for key, value in payload.items()
            if key not in OWNED_KEYS
        }
        return document


__all__ = [
    "ARRAY_MERGE_POLICIES",
    "ConfigFileEntry",
    "DEFAULT_MOTD",
    "DEFAULT_WORLD_MODE",
    "DEFAULT_WORLD_NAME",
    "EngineGlobalFields",
    "OWNED_KEYS",
    "OverrideEntry",
    "PAPER_GLOBAL_OUTPUT",
    "PAPER_GLOBAL_TEMPLATE",
    "PluginReference",
    "ProfileDocument",
    "ProfileFormState",
    "ProjectIdentity",
    "SERVER_PROPERTIES_OUTPUT",
    "SERVER_PROPERTIES_TEMPLATE",
    "ServerPropertiesFields",
    "TARGET_TICK_DISTANCE_OVERRIDE",
    "WorldSettings",
]
