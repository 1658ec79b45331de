"""Error taxonomy shared by the path algebra, mode resolver, and backends."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "BackendFailure",
    "FileworksError",
    "InvalidArgument",
    "UnsupportedOperation",
]


class FileworksError(Exception):
    """Base class for all errors raised by ``fileworks``."""


class InvalidArgument(FileworksError, ValueError):
    """A path, option key, or mode character was rejected before any I/O."""


class UnsupportedOperation(FileworksError, NotImplementedError):
    """The request is well-formed but no stream implementation exists."""


class BackendFailure(FileworksError, OSError):
    """A filesystem backend rejected an operation.

    Carries the failed ``operation`` name and the ``paths`` involved so
    callers can report the failure without parsing the message.
    """

    def __init__(
        self,
        operation: str,
        paths: Sequence[str],
        cause: BaseException | str | None = None,
    ) -> None:
        self.operation = operation
        self.paths = tuple(str(p) for p in paths)
        self.cause = cause
        target = " to ".join(self.paths)
        msg = f"failed to {operation} {target}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.args[0]
