"""Open-mode resolution: mode strings and option records → ``OpenIntent``.

A mode string such as ``"wb"`` or ``"a+"`` is only a compact spelling of
the same flags an options record carries. Both are translated into one
frozen :class:`OpenIntent`; mode-string flags are OR-ed on top of the
options record. Unknown option keys and unknown mode characters raise
:class:`~fileworks.lib.errors.InvalidArgument` before anything is applied.

The resolver does not default any access flag. Consumers that open a
stream call :meth:`OpenIntent.with_defaults` to fall back to reading.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from fileworks.lib.errors import InvalidArgument
from fileworks.lib.validation import (
    coerce_option_values,
    parse_optional_charset,
    require_charset,
    require_known_keys,
)

__all__ = [
    "ACCESS_FLAGS",
    "MODE_FLAGS",
    "OPTION_KEYS",
    "OpenIntent",
    "apply_mode",
    "resolve_open_mode",
]

MODE_FLAGS: dict[str, str] = {
    "r": "read",
    "w": "write",
    "a": "append",
    "+": "update",
    "b": "binary",
    "x": "exclusive",
    "c": "canonical",
}

ACCESS_FLAGS = ("read", "write", "append", "update")


class OpenIntent(BaseModel):
    """Validated description of how a stream should be opened."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    read: bool = False
    write: bool = False
    append: bool = False
    update: bool = False
    binary: bool = False
    exclusive: bool = False
    canonical: bool = False
    charset: str | None = None

    @field_validator(
        "read",
        "write",
        "append",
        "update",
        "binary",
        "exclusive",
        "canonical",
        mode="before",
    )
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("charset", mode="before")
    @classmethod
    def _coerce_charset(cls, value: Any) -> str | None:
        return parse_optional_charset(value)

    @property
    def has_access_flag(self) -> bool:
        """Return whether any of read/write/append/update is set."""
        return any(getattr(self, flag) for flag in ACCESS_FLAGS)

    def with_defaults(self) -> OpenIntent:
        """Return this intent, reading by default when no access flag is set."""
        if self.has_access_flag:
            return self
        return self.model_copy(update={"read": True})

    def flags(self) -> dict[str, bool]:
        """Return only the boolean flags that are set."""
        return {
            name: True
            for name in MODE_FLAGS.values()
            if getattr(self, name)
        }


OPTION_KEYS = frozenset(OpenIntent.model_fields)

OptionsArg = Mapping[str, Any] | OpenIntent | str | None


def apply_mode(mode: str, intent: OpenIntent | None = None) -> OpenIntent:
    """Set the flag of each character of *mode* on top of *intent*.

    Raises:
        InvalidArgument: If *mode* contains a character outside ``rwa+bxc``.
    """
    updates: dict[str, bool] = {}
    for char in mode:
        flag = MODE_FLAGS.get(char)
        if flag is None:
            raise InvalidArgument(f"unsupported mode argument: {mode!r}")
        updates[flag] = True
    base = intent if intent is not None else OpenIntent()
    if not updates:
        return base
    return base.model_copy(update=updates)


def _intent_from_options(options: OptionsArg) -> OpenIntent:
    if options is None:
        return OpenIntent()
    if isinstance(options, OpenIntent):
        return options
    if isinstance(options, str):
        return apply_mode(options)
    if isinstance(options, Mapping):
        require_known_keys(options, OPTION_KEYS)
        return OpenIntent(**coerce_option_values(options))
    raise InvalidArgument(
        f"unsupported options argument of type {type(options).__name__}"
    )


def resolve_open_mode(
    mode: str | None = None,
    options: OptionsArg = None,
) -> OpenIntent:
    """Merge *mode* and *options* into one validated :class:`OpenIntent`.

    >>> resolve_open_mode("wb").flags()
    {'write': True, 'binary': True}

    Args:
        mode: Mode string made of ``r``, ``w``, ``a``, ``+``, ``b``, ``x``
            and ``c``; ``None`` for none.
        options: An options record (mapping limited to the ``OpenIntent``
            field names), an existing ``OpenIntent``, a mode string, or
            ``None``.

    Raises:
        InvalidArgument: On the first unknown option key or mode character,
            on a charset Python has no codec for, or when *mode*/*options*
            has an unsupported type.
    """
    intent = _intent_from_options(options)
    if intent.charset is not None:
        require_charset(intent.charset)
    if mode is None:
        return intent
    if not isinstance(mode, str):
        raise InvalidArgument(
            f"unsupported mode argument of type {type(mode).__name__}"
        )
    return apply_mode(mode, intent)
