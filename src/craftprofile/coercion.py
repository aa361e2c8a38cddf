"""Total conversions from untyped document values to form primitives.

None of these functions raise: a missing or malformed value resolves to the
caller-supplied fallback.
"""

from __future__ import annotations

import math
import re
from typing import Any

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _render_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_string(value: Any, fallback: str) -> str:
    """Return ``value`` if it is text, the decimal rendering of a finite number,
    or ``fallback``."""

    if isinstance(value, str):
        return value
    if _is_finite_number(value):
        return _render_number(value)
    return fallback


def coerce_number_string(value: Any, fallback: str) -> str:
    """Return a finite number as text, non-blank text stripped, or ``fallback``."""

    if _is_finite_number(value):
        return _render_number(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback


def coerce_boolean(value: Any, fallback: bool) -> bool:
    """Return booleans unchanged and map ``"true"``/``"false"`` text
    case-insensitively. Anything else yields ``fallback``."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised == "true":
            return True
        if normalised == "false":
            return False
    return fallback


def parse_int_prefix(text: Any) -> int | None:
    """Parse the leading integer of ``text``.

    Leading whitespace and a sign are accepted and anything after the digits
    is ignored, so ``"12 players"`` parses as ``12``. Returns ``None`` when no
    digits are found or ``text`` is not a string.
    """

    if not isinstance(text, str):
        return None
    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    return int(match.group(1))


__all__ = [
    "coerce_boolean",
    "coerce_number_string",
    "coerce_string",
    "parse_int_prefix",
]
