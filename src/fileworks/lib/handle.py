"""Fluent, immutable path handle.

``PathHandle`` wraps a path string. Algebra methods return new handles;
I/O methods delegate to :mod:`fileworks.lib.files` and return the result,
or the handle itself when the operation produces nothing, so calls chain::

    path("build", "out").mkdirs().join("log.txt").write("done")
"""

from __future__ import annotations

__all__ = ["PathHandle", "path"]

from dataclasses import dataclass, field
from datetime import datetime
from typing import IO, Any

from fileworks.lib import files, paths
from fileworks.lib.backend import FilesystemBackend
from fileworks.lib.modes import OptionsArg
from fileworks.lib.validation import require_path


@dataclass(frozen=True)
class PathHandle:
    """A path string bundled with the backend its I/O goes to."""

    path: str
    backend: FilesystemBackend = field(
        default_factory=files.default_backend,
        compare=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            object.__setattr__(self, "path", require_path(self.path))

    def __str__(self) -> str:
        return self.path

    def __fspath__(self) -> str:
        return self.path

    def _derive(self, new_path: str) -> PathHandle:
        return PathHandle(new_path, self.backend)

    # -- algebra --------------------------------------------------------

    def join(self, *parts: Any) -> PathHandle:
        return self._derive(paths.join(self.path, *parts))

    def absolute(self) -> PathHandle:
        return self._derive(
            paths.absolute(self.path, self.backend.get_working_directory())
        )

    def normal(self) -> PathHandle:
        return self._derive(paths.normal(self.path))

    def basename(self, ext: str | None = None) -> PathHandle:
        return self._derive(paths.basename(self.path, ext))

    def dirname(self) -> PathHandle:
        return self._derive(paths.dirname(self.path))

    def relative(self, target: Any = None) -> PathHandle:
        """Return *target* relative to this path's directory.

        Without *target*, return this path relative to the working
        directory.
        """
        cwd = self.backend.get_working_directory()
        return self._derive(paths.relative(self.path, target, cwd))

    def canonical(self) -> PathHandle:
        return self._derive(files.canonical(self.path, backend=self.backend))

    def extension(self) -> str:
        return paths.extension(self.path)

    def split(self) -> list[str]:
        return paths.split(self.path)

    def is_absolute(self) -> bool:
        return paths.is_absolute(self.path)

    # -- I/O ------------------------------------------------------------

    def open(self, mode: str | None = None, options: OptionsArg = None) -> IO[Any]:
        return files.open_file(self.path, mode, options, backend=self.backend)

    def read(self, options: OptionsArg = None) -> str | bytes:
        return files.read(self.path, options, backend=self.backend)

    def write(self, content: str | bytes, options: OptionsArg = None) -> PathHandle:
        files.write(self.path, content, options, backend=self.backend)
        return self

    def copy(self, target: Any) -> PathHandle:
        files.copy(self.path, target, backend=self.backend)
        return self

    def move(self, target: Any) -> PathHandle:
        files.move(self.path, target, backend=self.backend)
        return self

    def remove(self) -> PathHandle:
        files.remove(self.path, backend=self.backend)
        return self

    def rmdir(self) -> PathHandle:
        files.rmdir(self.path, backend=self.backend)
        return self

    def rmtree(self) -> PathHandle:
        files.rmtree(self.path, backend=self.backend)
        return self

    def mkdir(self) -> PathHandle:
        files.mkdir(self.path, backend=self.backend)
        return self

    def mkdirs(self) -> PathHandle:
        files.mkdirs(self.path, backend=self.backend)
        return self

    def list(self) -> list[str]:
        return files.list_dir(self.path, backend=self.backend)

    def exists(self) -> bool:
        return files.exists(self.path, backend=self.backend)

    def is_file(self) -> bool:
        return files.is_file(self.path, backend=self.backend)

    def is_directory(self) -> bool:
        return files.is_directory(self.path, backend=self.backend)

    def is_readable(self) -> bool:
        return files.is_readable(self.path, backend=self.backend)

    def is_writable(self) -> bool:
        return files.is_writable(self.path, backend=self.backend)

    def size(self) -> int:
        return files.size(self.path, backend=self.backend)

    def mtime(self) -> datetime:
        return files.mtime(self.path, backend=self.backend)


def path(*parts: Any, backend: FilesystemBackend | None = None) -> PathHandle:
    """Join *parts* and wrap the result in a :class:`PathHandle`."""
    joined = paths.join(*parts)
    if backend is None:
        return PathHandle(joined)
    return PathHandle(joined, backend)
