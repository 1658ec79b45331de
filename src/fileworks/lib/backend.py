"""Filesystem backends consumed by file operations and ``PathHandle``.

``FilesystemBackend`` is the capability surface the rest of the package
depends on. ``LocalBackend`` implements it over the local disk with
``os``, ``shutil`` and ``pathlib``; every ``OSError`` it sees is re-raised
as :class:`~fileworks.lib.errors.BackendFailure` naming the operation and
the paths involved. Backends never retry.

Paths handed to a backend are already resolved and absolute.
"""

from __future__ import annotations

__all__ = ["FilesystemBackend", "LocalBackend"]

import abc
import logging
import os
import shutil

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from fileworks.lib import workdir
from fileworks.lib.config import Config
from fileworks.lib.errors import BackendFailure, UnsupportedOperation
from fileworks.lib.modes import OpenIntent
from fileworks.lib.validation import require_charset

logger = logging.getLogger(__name__)


class FilesystemBackend(abc.ABC):
    """Storage operations over resolved path strings."""

    @abc.abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether *path* exists."""

    @abc.abstractmethod
    def is_file(self, path: str) -> bool:
        """Return whether *path* is a regular file."""

    @abc.abstractmethod
    def is_directory(self, path: str) -> bool:
        """Return whether *path* is a directory."""

    @abc.abstractmethod
    def is_readable(self, path: str) -> bool:
        """Return whether *path* can be read."""

    @abc.abstractmethod
    def is_writable(self, path: str) -> bool:
        """Return whether *path* can be written."""

    @abc.abstractmethod
    def list(self, path: str) -> list[str]:
        """Return the names of the entries of directory *path*."""

    @abc.abstractmethod
    def size(self, path: str) -> int:
        """Return the size of *path* in bytes."""

    @abc.abstractmethod
    def mtime(self, path: str) -> datetime:
        """Return the last modification time of *path*."""

    @abc.abstractmethod
    def mkdir(self, path: str) -> None:
        """Create directory *path*; its parent must exist."""

    @abc.abstractmethod
    def mkdirs(self, path: str) -> None:
        """Create directory *path* and any missing parents."""

    @abc.abstractmethod
    def copy(self, source: str, target: str) -> None:
        """Copy file contents from *source* to *target*."""

    @abc.abstractmethod
    def move(self, source: str, target: str) -> None:
        """Move or rename *source* to *target*."""

    @abc.abstractmethod
    def remove(self, path: str) -> None:
        """Remove file *path*."""

    @abc.abstractmethod
    def rmdir(self, path: str) -> None:
        """Remove empty directory *path*."""

    @abc.abstractmethod
    def rmtree(self, path: str) -> None:
        """Remove *path* and everything below it."""

    @abc.abstractmethod
    def canonical(self, path: str) -> str:
        """Return *path* with symbolic links and relative parts resolved."""

    @abc.abstractmethod
    def open_stream(self, path: str, intent: OpenIntent) -> IO[Any]:
        """Open *path* as a byte or text stream described by *intent*."""

    @abc.abstractmethod
    def get_working_directory(self) -> str:
        """Return the working directory relative paths are resolved against."""

    @abc.abstractmethod
    def set_working_directory(self, path: str) -> str:
        """Change the working directory and return its canonical form."""


@contextmanager
def _wrap_os_errors(operation: str, *paths: str) -> Iterator[None]:
    """Re-raise ``OSError`` as ``BackendFailure`` for *operation*."""
    try:
        yield
    except OSError as exc:
        logger.warning("Backend %s failed for %s: %s", operation, paths, exc)
        raise BackendFailure(operation, paths, exc.strerror or exc) from exc


class LocalBackend(FilesystemBackend):
    """Backend over the local filesystem."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()

    @property
    def default_charset(self) -> str:
        """Charset used for text streams that do not name one."""
        return self.config.charset

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_readable(self, path: str) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: str) -> bool:
        return os.access(path, os.W_OK)

    def list(self, path: str) -> list[str]:
        with _wrap_os_errors("list directory", path):
            return sorted(os.listdir(path))

    def size(self, path: str) -> int:
        with _wrap_os_errors("stat", path):
            return os.path.getsize(path)

    def mtime(self, path: str) -> datetime:
        with _wrap_os_errors("stat", path):
            stamp = os.path.getmtime(path)
        return datetime.fromtimestamp(stamp, tz=timezone.utc)

    def mkdir(self, path: str) -> None:
        self._mutate("make directory", os.mkdir, path)

    def mkdirs(self, path: str) -> None:
        self._mutate("make directories", os.makedirs, path)

    def copy(self, source: str, target: str) -> None:
        self._mutate("copy", shutil.copyfile, source, target)

    def move(self, source: str, target: str) -> None:
        self._mutate("move", shutil.move, source, target)

    def remove(self, path: str) -> None:
        self._mutate("remove file", os.remove, path)

    def rmdir(self, path: str) -> None:
        self._mutate("remove directory", os.rmdir, path)

    def rmtree(self, path: str) -> None:
        if os.path.isdir(path) and not os.path.islink(path):
            self._mutate("remove tree", shutil.rmtree, path)
        else:
            self._mutate("remove tree", os.remove, path)

    def canonical(self, path: str) -> str:
        with _wrap_os_errors("canonicalize", path):
            return str(Path(path).resolve())

    def open_stream(self, path: str, intent: OpenIntent) -> IO[Any]:
        if intent.update:
            raise UnsupportedOperation("update mode is not implemented")
        target = os.path.realpath(path) if intent.canonical else path
        mode = self._python_mode(intent)
        encoding = None
        if not intent.binary:
            # open() truncates before it looks up the codec
            encoding = require_charset(intent.charset or self.default_charset)
        logger.debug("Opening %s with mode %r", target, mode)
        with _wrap_os_errors("open", target):
            return open(target, mode, encoding=encoding)

    def get_working_directory(self) -> str:
        return workdir.get_working_directory()

    def set_working_directory(self, path: str) -> str:
        if not os.path.isdir(path):
            raise BackendFailure("change directory", (path,), "not a directory")
        with _wrap_os_errors("change directory", path):
            return workdir.set_working_directory(path)

    @staticmethod
    def _python_mode(intent: OpenIntent) -> str:
        """Translate an access intent into a mode for the builtin ``open``."""
        if intent.read:
            mode = "r"
        elif intent.append:
            mode = "a"
        elif intent.exclusive:
            mode = "x"
        else:
            mode = "w"
        return mode + ("b" if intent.binary else "")

    def _mutate(
        self,
        operation: str,
        func: Callable[..., Any],
        *paths: str,
    ) -> None:
        with _wrap_os_errors(operation, *paths):
            func(*paths)
        logger.debug("%s: %s", operation, " -> ".join(paths))
