"""File operations over a filesystem backend.

Each function validates its path arguments, makes them absolute against
the working directory, and then issues exactly one backend call. The
module keeps a shared default :class:`LocalBackend`; every function also
accepts an explicit ``backend=``.
"""

from __future__ import annotations

__all__ = [
    "canonical",
    "chdir",
    "configure",
    "copy",
    "cwd",
    "default_backend",
    "exists",
    "is_absolute",
    "is_directory",
    "is_file",
    "is_readable",
    "is_writable",
    "list_dir",
    "mkdir",
    "mkdirs",
    "move",
    "mtime",
    "open_file",
    "read",
    "remove",
    "rmdir",
    "rmtree",
    "set_default_backend",
    "size",
    "write",
]

import logging
from datetime import datetime
from typing import IO, Any

from fileworks.lib import paths
from fileworks.lib.backend import FilesystemBackend, LocalBackend
from fileworks.lib.config import Config
from fileworks.lib.errors import UnsupportedOperation
from fileworks.lib.modes import OptionsArg, resolve_open_mode
from fileworks.lib.validation import require_path

logger = logging.getLogger(__name__)

_default_backend: FilesystemBackend | None = None


def default_backend() -> FilesystemBackend:
    """Return the backend used when no ``backend=`` is passed.

    On first use this is a ``LocalBackend`` over ``Config.from_env()``.
    Unlike :func:`configure`, it leaves logging and the working directory
    alone.
    """
    global _default_backend
    if _default_backend is None:
        _default_backend = LocalBackend(Config.from_env())
    return _default_backend


def set_default_backend(backend: FilesystemBackend) -> FilesystemBackend:
    """Replace the default backend and return the previous one."""
    global _default_backend
    previous = default_backend()
    _default_backend = backend
    return previous


def configure(config: Config | None = None) -> FilesystemBackend:
    """Install a ``LocalBackend`` built from *config* (default: the environment).

    Also applies the configured logging level and starting working
    directory. Returns the new default backend.
    """
    config = config if config is not None else Config.from_env()
    config.configure_logging()
    backend = LocalBackend(config)
    if config.working_directory:
        backend.set_working_directory(config.working_directory)
    set_default_backend(backend)
    logger.debug("Configured default backend with charset %s", config.charset)
    return backend


def _backend(backend: FilesystemBackend | None) -> FilesystemBackend:
    return backend if backend is not None else default_backend()


def _resolve(path: Any, backend: FilesystemBackend, name: str = "path") -> str:
    text = require_path(path, name=name)
    return paths.absolute(text, backend.get_working_directory())


def open_file(
    path: Any,
    mode: str | None = None,
    options: OptionsArg = None,
    *,
    backend: FilesystemBackend | None = None,
) -> IO[Any]:
    """Open *path* and return a byte or text stream.

    Reading is assumed when neither *mode* nor *options* asks for read,
    write, append or update access. Binary intents give a byte stream;
    everything else a text stream in the requested or default charset.

    Raises:
        InvalidArgument: For a missing path, unknown option, or bad mode.
        UnsupportedOperation: When update mode (``+``) is requested.
        BackendFailure: When the backend cannot open the path.
    """
    fs = _backend(backend)
    intent = resolve_open_mode(mode, options).with_defaults()
    target = _resolve(path, fs)
    if intent.update:
        raise UnsupportedOperation(f"update mode is not implemented: {target}")
    return fs.open_stream(target, intent)


def read(
    path: Any,
    options: OptionsArg = None,
    *,
    backend: FilesystemBackend | None = None,
) -> str | bytes:
    """Return the whole content of *path* as text (or bytes in binary mode)."""
    with open_file(path, "r", options, backend=backend) as stream:
        return stream.read()


def write(
    path: Any,
    content: str | bytes,
    options: OptionsArg = None,
    *,
    backend: FilesystemBackend | None = None,
) -> None:
    """Replace the content of *path* with *content*."""
    mode = "wb" if isinstance(content, (bytes, bytearray)) else "w"
    with open_file(path, mode, options, backend=backend) as stream:
        stream.write(content)
        stream.flush()


def copy(source: Any, target: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.copy(_resolve(source, fs, "source"), _resolve(target, fs, "target"))


def move(source: Any, target: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.move(_resolve(source, fs, "source"), _resolve(target, fs, "target"))


def remove(path: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.remove(_resolve(path, fs))


def rmdir(path: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.rmdir(_resolve(path, fs))


def rmtree(path: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.rmtree(_resolve(path, fs))


def mkdir(path: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.mkdir(_resolve(path, fs))


def mkdirs(path: Any, *, backend: FilesystemBackend | None = None) -> None:
    fs = _backend(backend)
    fs.mkdirs(_resolve(path, fs))


def exists(path: Any, *, backend: FilesystemBackend | None = None) -> bool:
    fs = _backend(backend)
    return fs.exists(_resolve(path, fs))


def is_file(path: Any, *, backend: FilesystemBackend | None = None) -> bool:
    fs = _backend(backend)
    return fs.is_file(_resolve(path, fs))


def is_directory(path: Any, *, backend: FilesystemBackend | None = None) -> bool:
    fs = _backend(backend)
    return fs.is_directory(_resolve(path, fs))


def is_readable(path: Any, *, backend: FilesystemBackend | None = None) -> bool:
    fs = _backend(backend)
    return fs.is_readable(_resolve(path, fs))


def is_writable(path: Any, *, backend: FilesystemBackend | None = None) -> bool:
    fs = _backend(backend)
    return fs.is_writable(_resolve(path, fs))


def is_absolute(path: Any) -> bool:
    return paths.is_absolute(require_path(path))


def list_dir(path: Any, *, backend: FilesystemBackend | None = None) -> list[str]:
    """Return the sorted entry names of directory *path*."""
    fs = _backend(backend)
    return fs.list(_resolve(path, fs))


def size(path: Any, *, backend: FilesystemBackend | None = None) -> int:
    fs = _backend(backend)
    return fs.size(_resolve(path, fs))


def mtime(path: Any, *, backend: FilesystemBackend | None = None) -> datetime:
    fs = _backend(backend)
    return fs.mtime(_resolve(path, fs))


def canonical(path: Any, *, backend: FilesystemBackend | None = None) -> str:
    """Return the canonical form of *path* with symbolic links resolved."""
    fs = _backend(backend)
    return fs.canonical(_resolve(path, fs))


def cwd(*, backend: FilesystemBackend | None = None) -> str:
    """Return the working directory of *backend*."""
    return _backend(backend).get_working_directory()


def chdir(path: Any, *, backend: FilesystemBackend | None = None) -> str:
    """Change the working directory of *backend*; return the new one.

    The process-wide working directory is not guarded by a lock.
    """
    fs = _backend(backend)
    return fs.set_working_directory(_resolve(path, fs))
