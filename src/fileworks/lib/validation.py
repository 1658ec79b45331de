"""Shared argument validation helpers used by file operations and options.

These functions check values handed in by callers (path arguments, option
records) and raise :class:`~fileworks.lib.errors.InvalidArgument` with a
clear message before any backend call is made.
"""

from __future__ import annotations

import codecs
import os
from collections.abc import Iterable, Mapping
from typing import Any

from fileworks.lib.errors import InvalidArgument

__all__ = [
    "coerce_option_values",
    "parse_optional_charset",
    "require_charset",
    "require_known_keys",
    "require_path",
]


def require_path(value: Any, *, name: str = "path") -> str:
    """Return *value* as a path string, rejecting ``None`` and blank input.

    Args:
        value: A ``str``, ``bytes``, an ``os.PathLike`` (including
            ``PathHandle``), or anything else convertible with ``str()``.
        name: Argument name used in the error message.

    Returns:
        The path as a string, unchanged apart from ``os.fsdecode`` conversion.

    Raises:
        InvalidArgument: If the value is ``None`` or blank after trimming.
    """
    if value is None:
        raise InvalidArgument(f"undefined {name} argument")
    if isinstance(value, (bytes, os.PathLike)):
        text = os.fsdecode(value)
    else:
        text = str(value)
    if not text.strip():
        raise InvalidArgument(f"blank {name} argument")
    return text


def require_known_keys(payload: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """Raise on the first key of *payload* that is not in *allowed*."""
    allowed_keys = frozenset(allowed)
    for key in payload:
        if key not in allowed_keys:
            raise InvalidArgument(f"unsupported option: {key}")


def parse_optional_charset(raw: Any) -> str | None:
    """Coerce a charset option to ``str``; ``None`` stays ``None``."""
    if raw is None:
        return None
    return str(raw)


def require_charset(charset: str) -> str:
    """Return *charset* if Python has a codec for it.

    Raises:
        InvalidArgument: If ``codecs.lookup`` does not know *charset*.
    """
    try:
        codecs.lookup(charset)
    except LookupError:
        raise InvalidArgument(f"unsupported charset: {charset}") from None
    return charset


def coerce_option_values(
    payload: Mapping[str, Any],
    *,
    string_keys: Iterable[str] = ("charset",),
) -> dict[str, Any]:
    """Coerce option values: ``string_keys`` to strings, everything else to bool."""
    text_keys = frozenset(string_keys)
    coerced: dict[str, Any] = {}
    for key, value in payload.items():
        if key in text_keys:
            coerced[key] = parse_optional_charset(value)
        else:
            coerced[key] = bool(value)
    return coerced
