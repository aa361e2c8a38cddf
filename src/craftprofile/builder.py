"""Reconstruct the editor-managed subset of a profile from form state."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .coercion import parse_int_prefix
from .models import (
    DEFAULT_WORLD_MODE,
    DEFAULT_WORLD_NAME,
    PAPER_GLOBAL_OUTPUT,
    PAPER_GLOBAL_TEMPLATE,
    SERVER_PROPERTIES_OUTPUT,
    SERVER_PROPERTIES_TEMPLATE,
    TARGET_TICK_DISTANCE_OVERRIDE,
    ConfigFileEntry,
    EngineGlobalFields,
    OverrideEntry,
    PluginReference,
    ProfileDocument,
    ProfileFormState,
    ProjectIdentity,
    ServerPropertiesFields,
    WorldSettings,
)

DEFAULT_MAX_PLAYERS = 10
DEFAULT_VIEW_DISTANCE = 10
DEFAULT_TARGET_TICK_DISTANCE = 6


class ProfileBuildError(RuntimeError):
    """Raised when form state cannot be turned into a consistent document."""


def _text(value: object, *, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ProfileBuildError(f"{field_name} must be text, got {type(value).__name__}")
    return value


def _positive_int(text: str, fallback: int) -> int:
    # Zero and unparsable input both fall back.
    return parse_int_prefix(text) or fallback


def _tick_distance(text: str) -> int:
    parsed = parse_int_prefix(text)
    return DEFAULT_TARGET_TICK_DISTANCE if parsed is None else parsed


def _plugin_entries(plugins: Iterable[PluginReference]) -> List[PluginReference]:
    entries: List[PluginReference] = []
    for plugin in plugins:
        plugin_id = _text(plugin.id, field_name="plugin id").strip()
        version = _text(plugin.version, field_name="plugin version").strip()
        if plugin_id and version:
            entries.append(PluginReference(id=plugin_id, version=version))
    return entries


def _server_properties_entry(
    fields: ServerPropertiesFields, seed: str
) -> ConfigFileEntry:
    data = {
        "motd": _text(fields.motd, field_name="motd"),
        "maxPlayers": _positive_int(
            _text(fields.max_players, field_name="maxPlayers"), DEFAULT_MAX_PLAYERS
        ),
        "enforceSecureProfile": bool(fields.enforce_secure_profile),
        "viewDistance": _positive_int(
            _text(fields.view_distance, field_name="viewDistance"), DEFAULT_VIEW_DISTANCE
        ),
        "onlineMode": bool(fields.online_mode),
    }
    if seed:
        data["levelSeed"] = seed
    return ConfigFileEntry(
        output=SERVER_PROPERTIES_OUTPUT, template=SERVER_PROPERTIES_TEMPLATE, data=data
    )


def build_document(
    identity: ProjectIdentity,
    world: WorldSettings,
    plugins: Sequence[PluginReference],
    server_properties: ServerPropertiesFields,
    engine_global: EngineGlobalFields,
    passthrough_outputs: Iterable[str] = (),
) -> ProfileDocument:
    """Return the generated part of a profile.

    Args:
        identity: Project name, loader and Minecraft version.
        world: World settings; blank mode/name fall back to defaults.
        plugins: Plugin rows from the form. Rows missing an id or a version
            are skipped.
        server_properties: Fields for ``server.properties``.
        engine_global: Fields for ``config/paper-global.yml``.
        passthrough_outputs: Paths of other config files known to the
            project. Each is listed as a bare entry unless it collides with a
            recognised output.

    Raises:
        ProfileBuildError: If a field holds a value of the wrong type.

    The result depends only on the arguments, so identical inputs always
    produce identical documents.
    """

    if not isinstance(identity, ProjectIdentity):
        raise ProfileBuildError("a project identity is required to build a profile")

    seed = _text(world.seed, field_name="world seed").strip()
    config_files: List[ConfigFileEntry] = []
    overrides: List[OverrideEntry] | None = None

    if server_properties.include:
        config_files.append(_server_properties_entry(server_properties, seed))

    if engine_global.include:
        distance = _tick_distance(
            _text(engine_global.target_tick_distance, field_name="targetTickDistance")
        )
        config_files.append(
            ConfigFileEntry(
                output=PAPER_GLOBAL_OUTPUT,
                template=PAPER_GLOBAL_TEMPLATE,
                data={"chunkSystem": {"targetTickDistance": distance}},
            )
        )
        overrides = [OverrideEntry(path=TARGET_TICK_DISTANCE_OVERRIDE, value=distance)]

    # Recognised outputs are never passthrough, even when excluded.
    known_outputs = {SERVER_PROPERTIES_OUTPUT, PAPER_GLOBAL_OUTPUT}
    for output in passthrough_outputs:
        path = _text(output, field_name="config path")
        if not path or path in known_outputs:
            continue
        known_outputs.add(path)
        config_files.append(ConfigFileEntry(output=path))

    world_mode = _text(world.mode, field_name="world mode").strip()
    world_name = _text(world.name, field_name="world name").strip()

    return ProfileDocument(
        name=identity.name,
        loader=identity.loader,
        minecraft_version=identity.minecraft_version,
        world=WorldSettings(
            mode=world_mode or DEFAULT_WORLD_MODE,
            name=world_name or DEFAULT_WORLD_NAME,
            seed=seed,
        ),
        plugins=_plugin_entries(plugins),
        config_files=config_files,
        overrides=overrides,
        array_merge_policy="replace",
    )


def build_from_state(
    identity: ProjectIdentity,
    state: ProfileFormState,
    passthrough_outputs: Iterable[str] = (),
) -> ProfileDocument:
    """Convenience wrapper around :func:`build_document` for a form state."""

    return build_document(
        identity,
        state.world,
        state.plugins,
        state.server_properties,
        state.engine_global,
        passthrough_outputs,
    )


__all__ = [
    "DEFAULT_MAX_PLAYERS",
    "DEFAULT_TARGET_TICK_DISTANCE",
    "DEFAULT_VIEW_DISTANCE",
    "ProfileBuildError",
    "build_document",
    "build_from_state",
]
