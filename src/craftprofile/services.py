"""Project services the profile editor talks to.

The editor only needs four request/response operations, described by
:class:`ProfileService`. Two implementations are provided: one keeping
everything in process memory and one reading a project tree on disk.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .coercion import coerce_string
from .documents import as_mapping, as_sequence
from .parser import ProfileParseError, parse_profile_text
from .schemas import (
    ConfigReference,
    PluginSummary,
    ProfilePayload,
    ProjectConfigSummary,
    ProjectSummary,
    SaveProfileResult,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PATH = "profiles/base.yml"
PROJECT_FILE = "project.json"
CONFIGS_DIR = "configs"


class ProfileService(ABC):
    """Interface describing the remote operations used by an edit session."""

    @abstractmethod
    def fetch_project(self, project_id: str) -> ProjectSummary:
        """Return the project summary.

        Raises:
            KeyError: If the project cannot be found.
        """

    @abstractmethod
    def fetch_profile(self, project_id: str) -> ProfilePayload:
        """Return the persisted profile text (``yaml`` is ``None`` when absent)."""

    @abstractmethod
    def fetch_project_configs(self, project_id: str) -> List[ProjectConfigSummary]:
        """Return the config files uploaded to the project."""

    @abstractmethod
    def save_profile(self, project_id: str, text: str) -> SaveProfileResult:
        """Persist ``text`` as the project's profile."""


def summarise_profile(text: str) -> Tuple[List[PluginSummary], List[ConfigReference]]:
    """Return the plugins and config files declared by profile ``text``.

    Plugins are unique by id and version (``latest`` when unversioned) and
    config files by output path, falling back to the template id.

    Raises:
        ValueError: If ``text`` is not a valid profile document.
    """

    try:
        payload = parse_profile_text(text) or {}
    except ProfileParseError as exc:
        raise ValueError(str(exc)) from exc

    plugins: List[PluginSummary] = []
    seen_plugins: set[str] = set()
    for entry in as_sequence(payload.get("plugins")):
        if not isinstance(entry, Mapping):
            continue
        plugin_id = coerce_string(entry.get("id"), "").strip()
        if not plugin_id:
            continue
        version = coerce_string(entry.get("version"), "").strip() or "latest"
        key = f"{plugin_id}:{version}"
        if key in seen_plugins:
            continue
        seen_plugins.add(key)
        plugins.append(PluginSummary(id=plugin_id, version=version))

    configs: List[ConfigReference] = []
    seen_configs: set[str] = set()
    for entry in as_sequence(as_mapping(payload.get("configs")).get("files")):
        if not isinstance(entry, Mapping):
            continue
        output = coerce_string(entry.get("output"), "")
        template = coerce_string(entry.get("template"), "")
        key = output or template
        if not key or key in seen_configs:
            continue
        seen_configs.add(key)
        configs.append(ConfigReference(path=key, template=template))

    return plugins, configs


class InMemoryProfileService(ProfileService):
    """Keep projects, profiles and config listings in local process memory."""

    def __init__(
        self,
        projects: Iterable[ProjectSummary | Mapping[str, Any]] = (),
        *,
        profiles: Mapping[str, str] | None = None,
        configs: Mapping[str, Iterable[ProjectConfigSummary | Mapping[str, Any]]]
        | None = None,
    ) -> None:
        self._projects: Dict[str, ProjectSummary] = {}
        for project in projects:
            summary = (
                project
                if isinstance(project, ProjectSummary)
                else ProjectSummary.model_validate(project)
            )
            self._projects[summary.id] = summary
        self._profiles: Dict[str, str] = dict(profiles or {})
        self._configs: Dict[str, List[ProjectConfigSummary]] = {
            _validate_project_id(project_id): [
                entry
                if isinstance(entry, ProjectConfigSummary)
                else ProjectConfigSummary.model_validate(entry)
                for entry in entries
            ]
            for project_id, entries in (configs or {}).items()
        }
        self.saved: List[Tuple[str, str]] = []

    def fetch_project(self, project_id: str) -> ProjectSummary:
        key = _validate_project_id(project_id)
        try:
            return self._projects[key].model_copy(deep=True)
        except KeyError as exc:
            raise KeyError(f"Project '{project_id}' does not exist") from exc

    def fetch_profile(self, project_id: str) -> ProfilePayload:
        key = self._require_project(project_id)
        return ProfilePayload(yaml=self._profiles.get(key))

    def fetch_project_configs(self, project_id: str) -> List[ProjectConfigSummary]:
        key = self._require_project(project_id)
        return list(self._configs.get(key, ()))

    def save_profile(self, project_id: str, text: str) -> SaveProfileResult:
        key = self._require_project(project_id)
        plugins, configs = summarise_profile(text)
        self._profiles[key] = text
        self.saved.append((key, text))
        project = self._projects[key]
        self._projects[key] = project.model_copy(
            update={"plugins": plugins, "configs": configs}
        )
        return SaveProfileResult(
            path=DEFAULT_PROFILE_PATH, plugins=plugins, configs=configs
        )

    def set_profile(self, project_id: str, text: str | None) -> None:
        """Replace the stored profile out of band, as another editor would."""

        key = self._require_project(project_id)
        if text is None:
            self._profiles.pop(key, None)
        else:
            self._profiles[key] = text

    def _require_project(self, project_id: str) -> str:
        key = _validate_project_id(project_id)
        if key not in self._projects:
            raise KeyError(f"Project '{project_id}' does not exist")
        return key


class FileProfileService(ProfileService):
    """Serve projects from a directory tree.

    Each project lives in ``<root>/<project_id>/`` with its summary in
    ``project.json``, its profile at ``profile_path`` and uploaded config
    files below ``configs/``.
    """

    def __init__(self, root: Path, *, profile_path: str = DEFAULT_PROFILE_PATH) -> None:
        self.root = Path(root)
        self.profile_path = profile_path

    def fetch_project(self, project_id: str) -> ProjectSummary:
        project_file = self._project_dir(project_id) / PROJECT_FILE
        if not project_file.exists():
            raise KeyError(f"Project '{project_id}' does not exist")
        payload = json.loads(project_file.read_text(encoding="utf-8"))
        payload.setdefault("id", _validate_project_id(project_id))
        return ProjectSummary.model_validate(payload)

    def fetch_profile(self, project_id: str) -> ProfilePayload:
        profile_file = self._require_project(project_id) / self.profile_path
        if not profile_file.is_file():
            return ProfilePayload(yaml=None)
        return ProfilePayload(yaml=profile_file.read_text(encoding="utf-8"))

    def fetch_project_configs(self, project_id: str) -> List[ProjectConfigSummary]:
        configs_dir = self._require_project(project_id) / CONFIGS_DIR
        if not configs_dir.is_dir():
            return []

        summaries: List[ProjectConfigSummary] = []
        for config_file in sorted(configs_dir.rglob("*")):
            if not config_file.is_file():
                continue
            stat = config_file.stat()
            summaries.append(
                ProjectConfigSummary(
                    path=config_file.relative_to(configs_dir).as_posix(),
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    size=stat.st_size,
                )
            )
        return summaries

    def save_profile(self, project_id: str, text: str) -> SaveProfileResult:
        project_dir = self._require_project(project_id)
        plugins, configs = summarise_profile(text)

        profile_file = project_dir / self.profile_path
        profile_file.parent.mkdir(parents=True, exist_ok=True)
        profile_file.write_text(text, encoding="utf-8")

        project_file = project_dir / PROJECT_FILE
        payload = json.loads(project_file.read_text(encoding="utf-8"))
        payload["plugins"] = [plugin.model_dump() for plugin in plugins]
        payload["configs"] = [config.model_dump() for config in configs]
        project_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Saved profile for project %s to %s", project_id, profile_file)

        return SaveProfileResult(
            path=self.profile_path, plugins=plugins, configs=configs
        )

    def _project_dir(self, project_id: str) -> Path:
        return self.root / _validate_project_id(project_id)

    def _require_project(self, project_id: str) -> Path:
        project_dir = self._project_dir(project_id)
        if not (project_dir / PROJECT_FILE).exists():
            raise KeyError(f"Project '{project_id}' does not exist")
        return project_dir


def _validate_project_id(project_id: str) -> str:
    if not isinstance(project_id, str):
        raise TypeError("project_id must be a string")
    stripped = project_id.strip()
    if not stripped:
        raise ValueError("project_id must be a non-empty string")
    if "/" in stripped or "\\" in stripped or stripped in {".", ".."}:
        raise ValueError("project_id must not contain path separators")
    return stripped


__all__ = [
    "DEFAULT_PROFILE_PATH",
    "FileProfileService",
    "InMemoryProfileService",
    "ProfileService",
    "summarise_profile",
]
