"""Helpers for walking the loosely typed profile document tree.

Parsed profiles are plain Python values as produced by PyYAML's safe loader:
``None``, ``bool``, ``int``, ``float``, ``str``, ``list`` and ``dict``. The
functions here give the rest of the package a small, explicit vocabulary for
reading that tree instead of indexing into it ad hoc.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

GenericValue = Union[
    None, bool, int, float, str, List["GenericValue"], Dict[str, "GenericValue"]
]

_EMPTY_MAPPING: Mapping[str, Any] = {}


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` when it is a mapping, otherwise an empty mapping."""

    if isinstance(value, Mapping):
        return value
    return _EMPTY_MAPPING


def as_sequence(value: Any) -> Sequence[Any]:
    """Return ``value`` when it is a list-like sequence, otherwise ``()``.

    Strings and bytes are sequences in Python but never list values in a
    profile, so they are rejected.
    """

    if isinstance(value, (str, bytes)):
        return ()
    if isinstance(value, (list, tuple)):
        return value
    return ()


def lookup_alias(mapping: Any, *aliases: str) -> Any:
    """Return the value stored under the first alias present in ``mapping``.

    Keys holding ``None`` are skipped so a later alias can still supply the
    value. ``None`` is returned when no alias matches.
    """

    source = as_mapping(mapping)
    for alias in aliases:
        value = source.get(alias)
        if value is not None:
            return value
    return None


def clone_value(value: Any) -> GenericValue:
    """Deep-copy a generic value so callers can mutate it freely."""

    if isinstance(value, Mapping):
        return {key: clone_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [clone_value(item) for item in value]
    return value


__all__ = [
    "GenericValue",
    "as_mapping",
    "as_sequence",
    "clone_value",
    "lookup_alias",
]
