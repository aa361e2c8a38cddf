"""Payload models for the project service boundary."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import PluginReference, ProjectIdentity


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PluginSummary(_Payload):
    """Plugin pinned by a project."""

    id: str
    version: str = ""

    @field_validator("id", "version", mode="before")
    @classmethod
    def _normalise_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_reference(self) -> PluginReference:
        return PluginReference(id=self.id, version=self.version)


class ConfigReference(_Payload):
    """A config file declared by a saved profile."""

    path: str
    template: str = ""


class ProjectSummary(_Payload):
    """Response of the "fetch project" call."""

    id: str
    name: str
    minecraft_version: str = Field(default="", alias="minecraftVersion")
    loader: str = ""
    plugins: List[PluginSummary] = Field(default_factory=list)
    configs: List[ConfigReference] = Field(default_factory=list)

    @field_validator("id", "name")
    @classmethod
    def _validate_required_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value must be a non-empty string.")
        return trimmed

    def to_identity(self) -> ProjectIdentity:
        return ProjectIdentity(
            name=self.name,
            minecraft_version=self.minecraft_version,
            loader=self.loader,
        )

    def plugin_references(self) -> List[PluginReference]:
        return [plugin.to_reference() for plugin in self.plugins]


class ProjectConfigSummary(_Payload):
    """A config file uploaded to the project."""

    path: str
    modified_at: datetime = Field(alias="modifiedAt")
    size: int = Field(..., ge=0)


class ProfilePayload(_Payload):
    """Response of the "fetch profile" call; ``yaml`` is ``None`` for a new profile."""

    yaml: str | None = None


class SaveProfileResult(_Payload):
    """Response of the "save profile" call."""

    path: str
    plugins: List[PluginSummary] = Field(default_factory=list)
    configs: List[ConfigReference] = Field(default_factory=list)


__all__ = [
    "ConfigReference",
    "PluginSummary",
    "ProfilePayload",
    "ProjectConfigSummary",
    "ProjectSummary",
    "SaveProfileResult",
]
