"""Core library: path algebra, open modes, backends, and path handles.

Primary modules:
- ``fileworks.lib.paths`` for pure path resolution and name extraction.
- ``fileworks.lib.modes`` for turning mode strings/options into ``OpenIntent``.
- ``fileworks.lib.files`` for file operations over a backend.
- ``fileworks.lib.handle`` for the fluent ``PathHandle`` wrapper.
"""

from fileworks.lib.backend import FilesystemBackend, LocalBackend
from fileworks.lib.errors import (
    BackendFailure,
    FileworksError,
    InvalidArgument,
    UnsupportedOperation,
)
from fileworks.lib.handle import PathHandle, path
from fileworks.lib.modes import OpenIntent, resolve_open_mode

__all__ = [
    "BackendFailure",
    "FilesystemBackend",
    "FileworksError",
    "InvalidArgument",
    "LocalBackend",
    "OpenIntent",
    "PathHandle",
    "UnsupportedOperation",
    "path",
    "resolve_open_mode",
]
