"""Render profile documents as YAML text."""

from __future__ import annotations

from typing import Any, Mapping

import yaml

from .builder import ProfileBuildError
from .models import ProfileDocument

_LINE_WIDTH = 4096


class ProfileDumper(yaml.SafeDumper):
    """Safe dumper that double-quotes every string and never emits aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_quoted_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


ProfileDumper.add_representer(str, _represent_quoted_str)


def serialize_profile(document: ProfileDocument | Mapping[Any, Any]) -> str:
    """Return ``document`` as YAML with double-quoted strings.

    Key order follows the document; comments and layout of a previously
    hand-edited file are not preserved.

    Raises:
        ProfileBuildError: If the document holds a value YAML cannot represent.
    """

    if isinstance(document, ProfileDocument):
        payload: Any = document.to_payload()
    elif isinstance(document, Mapping):
        payload = dict(document)
    else:
        raise TypeError("document must be a ProfileDocument or a mapping")

    try:
        return yaml.dump(
            payload,
            Dumper=ProfileDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=_LINE_WIDTH,
        )
    except yaml.YAMLError as exc:
        raise ProfileBuildError(f"Failed to serialise profile: {exc}") from exc


__all__ = ["ProfileDumper", "serialize_profile"]
