"""Decode persisted profile text into the generic document tree."""

from __future__ import annotations

import logging
from typing import Any, Dict

import yaml

from .models import ProfileDocument

logger = logging.getLogger(__name__)


class ProfileParseError(ValueError):
    """Raised when persisted profile text exists but is not a usable document.

    This is distinct from a missing profile: callers should block editing
    rather than fall back to a blank profile and risk overwriting the file.
    """

    def __init__(
        self, message: str, *, line: int | None = None, column: int | None = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def parse_profile_text(text: str | None) -> Dict[Any, Any] | None:
    """Parse ``text`` into a mapping, or return ``None`` when there is no document.

    Args:
        text: The persisted YAML, or ``None`` when no profile has been saved.

    Raises:
        ProfileParseError: If ``text`` is not well-formed YAML, holds more
            than one document, or its top level is not a mapping.
    """

    if text is None:
        return None
    if not isinstance(text, str):
        raise TypeError(f"profile text must be a string, got {type(text)!r}")
    if not text.strip():
        return None

    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        logger.error("Failed to parse profile YAML: %s", exc)
        raise ProfileParseError(
            f"Failed to parse profile YAML: {exc}", line=line, column=column
        ) from exc

    if len(documents) > 1:
        raise ProfileParseError(
            f"Profile YAML must contain a single document, found {len(documents)}."
        )

    payload = documents[0] if documents else None
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ProfileParseError(
            f"Profile YAML must be a mapping at the top level, got {type(payload).__name__}."
        )
    return payload


def parse_profile(text: str | None) -> ProfileDocument | None:
    """Parse ``text`` into a :class:`ProfileDocument` (``None`` when absent)."""

    payload = parse_profile_text(text)
    if payload is None:
        return None
    return ProfileDocument.from_payload(payload)


__all__ = ["ProfileParseError", "parse_profile", "parse_profile_text"]
