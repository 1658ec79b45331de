"""Process-wide working directory accessor pair.

Relative paths are made absolute against this value. It is the only shared
mutable state in ``fileworks`` and is backed by the interpreter's own
working directory (``os.getcwd`` / ``os.chdir``).

Not thread-safe: callers that change the working directory while other
threads resolve relative paths must synchronize themselves.
"""

from __future__ import annotations

import logging
import os

__all__ = ["get_working_directory", "set_working_directory"]

logger = logging.getLogger(__name__)


def get_working_directory() -> str:
    """Return the current working directory."""
    return os.getcwd()


def set_working_directory(path: str | os.PathLike[str]) -> str:
    """Change the working directory to the canonical form of *path*.

    Returns the canonical path that is now current. ``OSError`` from the
    underlying ``os.chdir`` propagates unchanged.
    """
    target = os.path.realpath(os.fspath(path))
    os.chdir(target)
    logger.debug("Working directory changed to %s", target)
    return target
