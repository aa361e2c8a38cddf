"""Core package for generating and merging server profile documents."""

from .builder import ProfileBuildError, build_document, build_from_state
from .coercion import (
    coerce_boolean,
    coerce_number_string,
    coerce_string,
    parse_int_prefix,
)
from .extractors import (
    ExtractedServerProperties,
    extract_engine_global,
    extract_form_state,
    extract_plugins,
    extract_server_properties,
    extract_world,
    new_form_state,
)
from .init_commands import InitCommand, collect_init_commands
from .merge import merge_documents
from .models import (
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
from .parser import ProfileParseError, parse_profile, parse_profile_text
from .serializer import serialize_profile
from .services import (
    FileProfileService,
    InMemoryProfileService,
    ProfileService,
)
from .session import (
    ProfileEditor,
    ProfileSaveError,
    SessionCancelledError,
    SessionToken,
)
from .settings import ProfileSettings

__all__ = [
    "ConfigFileEntry",
    "EngineGlobalFields",
    "ExtractedServerProperties",
    "FileProfileService",
    "InMemoryProfileService",
    "InitCommand",
    "OverrideEntry",
    "PluginReference",
    "ProfileBuildError",
    "ProfileDocument",
    "ProfileEditor",
    "ProfileFormState",
    "ProfileParseError",
    "ProfileSaveError",
    "ProfileService",
    "ProfileSettings",
    "ProjectIdentity",
    "ServerPropertiesFields",
    "SessionCancelledError",
    "SessionToken",
    "WorldSettings",
    "build_document",
    "build_from_state",
    "coerce_boolean",
    "coerce_number_string",
    "coerce_string",
    "collect_init_commands",
    "extract_engine_global",
    "extract_form_state",
    "extract_plugins",
    "extract_server_properties",
    "extract_world",
    "merge_documents",
    "new_form_state",
    "parse_int_prefix",
    "parse_profile",
    "parse_profile_text",
    "serialize_profile",
]
