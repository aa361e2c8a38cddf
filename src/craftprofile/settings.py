"""Configuration helpers for the profile tooling."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .services import DEFAULT_PROFILE_PATH

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _normalise_path(value: str | None, *, default: Path) -> Path:
    if value is None:
        return default

    trimmed = value.strip()
    if not trimmed:
        return default

    return Path(trimmed).expanduser()


def _normalise_string(value: str | None, *, default: str) -> str:
    if value is None:
        return default

    trimmed = value.strip()
    return trimmed or default


@dataclass(frozen=True)
class ProfileSettings:
    """Settings read from ``CRAFTPROFILE_*`` environment variables.

    Empty strings are treated as if the variable was unset and paths are
    expanded to support ``~`` prefixes.
    """

    projects_root: Path = Path("projects")
    profile_path: str = DEFAULT_PROFILE_PATH
    log_level: str = "WARNING"
    fetch_workers: int = 3

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProfileSettings":
        """Return settings populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.
        """

        source = environ if environ is not None else os.environ

        projects_root = _normalise_path(
            source.get("CRAFTPROFILE_PROJECTS_ROOT"), default=Path("projects")
        )
        profile_path = _normalise_string(
            source.get("CRAFTPROFILE_PROFILE_PATH"), default=DEFAULT_PROFILE_PATH
        )

        log_level = _normalise_string(
            source.get("CRAFTPROFILE_LOG_LEVEL"), default="WARNING"
        ).upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(
                "CRAFTPROFILE_LOG_LEVEL must be one of " + ", ".join(_LOG_LEVELS) + "."
            )

        fetch_workers = 3
        workers_raw = source.get("CRAFTPROFILE_FETCH_WORKERS")
        if workers_raw is not None and workers_raw.strip():
            try:
                fetch_workers = int(workers_raw.strip())
            except ValueError as exc:
                raise ValueError(
                    "CRAFTPROFILE_FETCH_WORKERS must be a positive integer."
                ) from exc
            if fetch_workers < 1:
                raise ValueError("CRAFTPROFILE_FETCH_WORKERS must be greater than zero.")

        return cls(
            projects_root=projects_root,
            profile_path=profile_path,
            log_level=log_level,
            fetch_workers=fetch_workers,
        )

    def configure_logging(self) -> None:
        """Install a basic root handler at :attr:`log_level`."""

        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


__all__ = ["ProfileSettings"]
