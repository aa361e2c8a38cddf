"""Edit-session orchestration around the profile document engine.

An editor loads the project, its config uploads and the persisted profile in
parallel, exposes the typed form state for editing, and on save merges the
generated document with a freshly re-fetched copy of the persisted one.
There is no locking: two editors saving at overlapping times race and the
later write wins.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from .builder import ProfileBuildError, build_from_state
from .extractors import extract_form_state, new_form_state
from .merge import merge_documents
from .models import ProfileDocument, ProfileFormState, ProjectIdentity
from .parser import ProfileParseError, parse_profile_text
from .schemas import ProjectConfigSummary, ProjectSummary, SaveProfileResult
from .serializer import serialize_profile
from .services import ProfileService

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = (
    "Failed to parse existing profile YAML. Please fix the file and retry."
)


class ProfileSaveError(RuntimeError):
    """Raised when a profile cannot be saved. The form state is left intact."""


class SessionCancelledError(RuntimeError):
    """Raised when a session token was invalidated before a save was written."""


class SessionToken:
    """Cooperative cancellation flag shared between a caller and an editor."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def invalidate(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class ProfileEditor:
    """Load, edit and save the profile of a single project."""

    def __init__(
        self, service: ProfileService, project_id: str, *, max_workers: int = 3
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.service = service
        self.project_id = project_id
        self.project: ProjectSummary | None = None
        self.configs: List[ProjectConfigSummary] = []
        self.state: ProfileFormState | None = None
        self.baseline_text: str | None = None
        self.error: str | None = None
        self.preview_error: str | None = None
        self._max_workers = max_workers

    @property
    def blocked(self) -> bool:
        """``True`` when the session cannot generate or save."""

        return self.error is not None

    @property
    def identity(self) -> ProjectIdentity | None:
        if self.project is None:
            return None
        return self.project.to_identity()

    def load(self, token: SessionToken | None = None) -> ProfileFormState | None:
        """Fetch everything the form needs and populate :attr:`state`.

        Returns ``None`` without touching the editor when ``token`` was
        invalidated while the fetches were in flight.

        Raises:
            ProfileParseError: If a persisted profile exists but cannot be
                parsed. The editor stays blocked until it is reloaded.
            KeyError: If the project does not exist.
        """

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            project_future = executor.submit(self.service.fetch_project, self.project_id)
            configs_future = executor.submit(self._fetch_configs)
            profile_future = executor.submit(self.service.fetch_profile, self.project_id)

        if token is not None and token.cancelled:
            logger.debug("Discarding load results for cancelled session %s", self.project_id)
            return None

        try:
            project = project_future.result()
            profile = profile_future.result()
        except Exception as exc:
            self.error = str(exc) or "Failed to load project"
            raise
        configs = configs_future.result()

        self.project = project
        self.configs = configs
        self.preview_error = None

        try:
            payload = parse_profile_text(profile.yaml)
        except ProfileParseError:
            logger.error("Profile for project %s could not be parsed", self.project_id)
            self.state = None
            self.baseline_text = profile.yaml
            self.error = PARSE_FAILURE_MESSAGE
            raise

        identity = project.to_identity()
        if payload is None:
            state = new_form_state(identity, project.plugin_references())
        else:
            state = extract_form_state(payload, identity)

        self.state = state
        self.baseline_text = profile.yaml
        self.error = None
        return state

    def build(self) -> ProfileDocument:
        """Return the generated document for the current form state.

        Raises:
            ProfileBuildError: If the editor is not loaded, is blocked, or
                the form state is inconsistent.
        """

        if self.blocked:
            raise ProfileBuildError(self.error)
        if self.project is None or self.state is None:
            raise ProfileBuildError("Profile has not been loaded.")
        return build_from_state(
            self.project.to_identity(),
            self.state,
            [config.path for config in self.configs],
        )

    def preview(self) -> str | None:
        """Return the generated YAML, or ``None`` when it cannot be produced."""

        try:
            text = serialize_profile(self.build())
        except ProfileBuildError as exc:
            logger.warning("Profile preview unavailable for %s: %s", self.project_id, exc)
            self.preview_error = str(exc)
            return None
        self.preview_error = None
        return text

    def save(self, token: SessionToken | None = None) -> SaveProfileResult:
        """Merge the generated document into the persisted one and save it.

        The persisted profile is fetched again right before writing so that
        keys edited out of band since :meth:`load` are kept.

        Raises:
            ProfileSaveError: If generation, the re-fetch or the save fails.
            SessionCancelledError: If ``token`` was invalidated before writing.
        """

        try:
            generated = self.build()
        except ProfileBuildError as exc:
            raise ProfileSaveError(str(exc)) from exc

        try:
            current = self.service.fetch_profile(self.project_id)
            existing = parse_profile_text(current.yaml)
        except ProfileParseError as exc:
            raise ProfileSaveError(str(exc)) from exc
        except Exception as exc:
            raise ProfileSaveError(str(exc) or "Failed to fetch profile") from exc

        try:
            text = serialize_profile(merge_documents(existing, generated))
        except ProfileBuildError as exc:
            raise ProfileSaveError(str(exc)) from exc
        if not text.strip():
            raise ProfileSaveError("Nothing to save; YAML is empty.")

        if token is not None and token.cancelled:
            raise SessionCancelledError(
                f"Session for project '{self.project_id}' was cancelled"
            )

        try:
            result = self.service.save_profile(self.project_id, text)
        except Exception as exc:
            raise ProfileSaveError(str(exc) or "Failed to save profile") from exc

        self.project = self.project.model_copy(
            update={"plugins": result.plugins, "configs": result.configs}
        )
        self.baseline_text = text
        if self.state is not None:
            self.state.source = "existing"
        logger.info("Saved profile for project %s to %s", self.project_id, result.path)
        return result

    def _fetch_configs(self) -> List[ProjectConfigSummary]:
        try:
            return list(self.service.fetch_project_configs(self.project_id))
        except Exception as exc:
            logger.warning(
                "Ignoring config listing failure for project %s: %s",
                self.project_id,
                exc,
            )
            return []

    def describe(self) -> Dict[str, Any]:
        """Return a JSON-serialisable summary of the session."""

        return {
            "projectId": self.project_id,
            "blocked": self.blocked,
            "error": self.error,
            "state": self.state.to_payload() if self.state is not None else None,
            "configs": [config.path for config in self.configs],
        }


__all__ = [
    "PARSE_FAILURE_MESSAGE",
    "ProfileEditor",
    "ProfileSaveError",
    "SessionCancelledError",
    "SessionToken",
]
