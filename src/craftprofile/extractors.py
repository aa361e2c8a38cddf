"""Populate typed form fields from a parsed profile document.

Every field is read independently and falls back to the project's defaults
when missing or malformed. Hand-written profiles use either camelCase or
hyphenated keys, so each lookup tries both spellings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

from .coercion import coerce_boolean, coerce_number_string, coerce_string
from .documents import as_mapping, as_sequence, lookup_alias
from .models import (
    PAPER_GLOBAL_OUTPUT,
    PAPER_GLOBAL_TEMPLATE,
    SERVER_PROPERTIES_OUTPUT,
    SERVER_PROPERTIES_TEMPLATE,
    EngineGlobalFields,
    PluginReference,
    ProfileDocument,
    ProfileFormState,
    ProjectIdentity,
    ServerPropertiesFields,
    WorldSettings,
)

_SEED_ALIASES = ("levelSeed", "seed", "level-seed", "world-seed")

ProfileSource = Mapping[Any, Any] | ProfileDocument | None


@dataclass(frozen=True)
class ExtractedServerProperties:
    """Server-properties fields plus the seed found in the same entry.

    The seed belongs to the world settings, so it is returned separately.
    """

    fields: ServerPropertiesFields
    seed_hint: str | None = None


def _payload(document: ProfileSource) -> Mapping[Any, Any]:
    if isinstance(document, ProfileDocument):
        return document.to_payload()
    return as_mapping(document)


def find_config_entry(
    document: ProfileSource, *, output: str, template: str
) -> Mapping[str, Any] | None:
    """Return the first ``configs.files`` entry matching ``output`` or ``template``."""

    configs = as_mapping(_payload(document).get("configs"))
    for entry in as_sequence(configs.get("files")):
        if not isinstance(entry, Mapping):
            continue
        if entry.get("output") == output or entry.get("template") == template:
            return entry
    return None


def extract_server_properties(
    document: ProfileSource, identity: ProjectIdentity | None
) -> ExtractedServerProperties:
    """Read the ``server.properties`` entry into :class:`ServerPropertiesFields`.

    Args:
        document: Parsed profile, or ``None`` when no profile exists yet.
        identity: Project used to derive the default welcome message.

    Returns:
        The extracted fields and, when present and non-blank, the seed stored
        under any of ``levelSeed``, ``seed``, ``level-seed`` or ``world-seed``.
        A missing entry yields ``include=False`` and default values.
    """

    defaults = ServerPropertiesFields.defaults_for(identity)
    entry = find_config_entry(
        document, output=SERVER_PROPERTIES_OUTPUT, template=SERVER_PROPERTIES_TEMPLATE
    )
    if entry is None:
        defaults.include = False
        return ExtractedServerProperties(fields=defaults)

    data = as_mapping(entry.get("data"))
    fields = ServerPropertiesFields(
        include=True,
        motd=coerce_string(lookup_alias(data, "motd"), defaults.motd),
        max_players=coerce_number_string(
            lookup_alias(data, "maxPlayers", "max-players"), defaults.max_players
        ),
        view_distance=coerce_number_string(
            lookup_alias(data, "viewDistance", "view-distance"), defaults.view_distance
        ),
        online_mode=coerce_boolean(
            lookup_alias(data, "onlineMode", "online-mode"), defaults.online_mode
        ),
        enforce_secure_profile=coerce_boolean(
            lookup_alias(data, "enforceSecureProfile", "enforce-secure-profile"),
            defaults.enforce_secure_profile,
        ),
    )

    seed = coerce_string(lookup_alias(data, *_SEED_ALIASES), "")
    return ExtractedServerProperties(
        fields=fields, seed_hint=seed if seed.strip() else None
    )


def extract_engine_global(document: ProfileSource) -> EngineGlobalFields:
    """Read ``chunkSystem.targetTickDistance`` from the paper-global entry."""

    defaults = EngineGlobalFields()
    entry = find_config_entry(
        document, output=PAPER_GLOBAL_OUTPUT, template=PAPER_GLOBAL_TEMPLATE
    )
    if entry is None:
        defaults.include = False
        return defaults

    chunk_system = lookup_alias(as_mapping(entry.get("data")), "chunkSystem", "chunk-system")
    return EngineGlobalFields(
        include=True,
        target_tick_distance=coerce_number_string(
            lookup_alias(chunk_system, "targetTickDistance", "target-tick-distance"),
            defaults.target_tick_distance,
        ),
    )


def extract_plugins(document: ProfileSource) -> List[PluginReference]:
    """Return the trimmed plugin list, dropping entries without an id."""

    plugins: List[PluginReference] = []
    for entry in as_sequence(_payload(document).get("plugins")):
        if not isinstance(entry, Mapping):
            continue
        plugin_id = coerce_string(entry.get("id"), "").strip()
        if not plugin_id:
            continue
        version = coerce_string(entry.get("version"), "").strip()
        plugins.append(PluginReference(id=plugin_id, version=version))
    return plugins


def extract_world(document: ProfileSource, seed_hint: str | None = None) -> WorldSettings:
    """Read world settings, using ``seed_hint`` when ``world.seed`` is blank."""

    world = WorldSettings.from_payload(_payload(document).get("world"))
    if not world.seed and seed_hint:
        world.seed = seed_hint.strip()
    return world


def extract_form_state(
    document: ProfileSource, identity: ProjectIdentity | None
) -> ProfileFormState:
    """Populate the complete edit form from an existing profile."""

    server = extract_server_properties(document, identity)
    return ProfileFormState(
        world=extract_world(document, server.seed_hint),
        plugins=extract_plugins(document),
        server_properties=server.fields,
        engine_global=extract_engine_global(document),
        source="existing",
    )


def new_form_state(
    identity: ProjectIdentity | None,
    plugins: List[PluginReference] | None = None,
) -> ProfileFormState:
    """Return the form state offered when no profile exists yet.

    Plugins are copied from the project's own list; both recognised config
    files start included.
    """

    return ProfileFormState(
        world=WorldSettings(),
        plugins=list(plugins or ()),
        server_properties=ServerPropertiesFields.defaults_for(identity),
        engine_global=EngineGlobalFields(),
        source="new",
    )


__all__ = [
    "ExtractedServerProperties",
    "extract_engine_global",
    "extract_form_state",
    "extract_plugins",
    "extract_server_properties",
    "extract_world",
    "find_config_entry",
    "new_form_state",
]
