"""Combine a persisted profile with freshly generated content."""

from __future__ import annotations

import copy
from typing import Any, Mapping

from .documents import as_mapping, clone_value
from .models import OWNED_KEYS, ProfileDocument


def merge_documents(
    existing: Mapping[Any, Any] | ProfileDocument | None,
    generated: ProfileDocument,
) -> ProfileDocument:
    """Overlay ``generated`` on top of ``existing``, one level deep.

    Every builder-owned top-level key comes from ``generated`` in full,
    including its absence: an owned key the builder left unset (``overrides``
    when the paper-global entry is excluded) is removed. Every other key of
    ``existing`` passes through untouched, in the order it was read.

    Nested content is never merged. Fields inside ``configs.files`` entries
    that the builder does not reproduce are therefore replaced along with the
    rest of ``configs``.
    """

    if isinstance(existing, ProfileDocument):
        existing_payload: Mapping[Any, Any] = existing.to_payload()
    else:
        existing_payload = as_mapping(existing)

    extras = {
        key: clone_value(value)
        for key, value in existing_payload.items()
        if key not in OWNED_KEYS
    }
    for key, value in generated.extras.items():
        if key not in OWNED_KEYS:
            extras[key] = clone_value(value)

    merged = copy.deepcopy(generated)
    merged.extras = extras
    return merged


__all__ = ["merge_documents"]
