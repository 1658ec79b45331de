"""Pure path algebra over path strings.

None of these functions touch the filesystem. They split paths into
segments, resolve a sequence of path fragments incrementally, and extract
names. Resolution keeps a root marker, an accumulated list of directory
elements, and a pending leaf:

- an absolute argument discards everything accumulated so far;
- ``..`` cancels one accumulated element, or is kept when a relative path
  underflows (a rooted path never goes above its root);
- the final segment of the last argument is kept verbatim as the leaf.

``resolve(a, b) == resolve(resolve(a), b)`` holds for all inputs, so
resolution can be done one fragment at a time.
"""

from __future__ import annotations

__all__ = [
    "SEPARATOR",
    "absolute",
    "basename",
    "dirname",
    "extension",
    "is_absolute",
    "join",
    "normal",
    "relative",
    "resolve",
    "split",
]

import os
import re
from pathlib import PurePath

from fileworks.lib.errors import InvalidArgument
from fileworks.lib.workdir import get_working_directory

PathArg = str | os.PathLike[str]

SEPARATOR = os.sep
_SEPARATOR_RE = re.compile(
    re.escape(SEPARATOR) if SEPARATOR == "/" else f"{re.escape(SEPARATOR)}|/"
)


def _as_text(path: PathArg | None) -> str:
    """Return *path* as ``str`` or raise for an undefined path."""
    if path is None:
        raise InvalidArgument("undefined path argument")
    if isinstance(path, (bytes, os.PathLike)):
        return os.fsdecode(path)
    return str(path)


def split(path: PathArg | None) -> list[str]:
    """Split *path* into segments on the platform separator.

    Empty segments are kept, so ``split("/a")`` is ``["", "a"]``. ``None``
    and ``""`` give an empty list.
    """
    if path is None:
        return []
    text = _as_text(path)
    if not text:
        return []
    return _SEPARATOR_RE.split(text)


def is_absolute(path: PathArg) -> bool:
    """Return whether *path* starts with a root marker."""
    return os.path.isabs(_as_text(path))


def _push_segment(elements: list[str], segment: str, rooted: bool) -> None:
    if segment == "..":
        if elements and elements[-1] != "..":
            elements.pop()
        elif not rooted:
            elements.append(segment)
    elif segment not in ("", "."):
        elements.append(segment)


def resolve(*paths: PathArg) -> str:
    """Resolve path fragments left to right into one normalized path.

    >>> resolve("/usr", "local", "../lib")
    '/usr/lib'
    >>> resolve("a", "..", "..")
    '..'
    >>> resolve("/a", "..", "..")
    '/'

    Blank fragments are skipped; an absolute fragment restarts resolution
    from its root. Returns ``""`` when no fragment contributes anything.
    """
    root = ""
    elements: list[str] = []
    leaf = ""
    for raw in paths:
        path = _as_text(raw)
        if not path.strip():
            continue
        parts = split(path)
        if is_absolute(path):
            root = parts.pop(0) + SEPARATOR
            elements = []
        elif leaf:
            # the previous fragment's leaf is a directory of this one
            elements.append(leaf)
        leaf = parts.pop() if parts else ""
        if leaf in (".", ".."):
            parts.append(leaf)
            leaf = ""
        for part in parts:
            _push_segment(elements, part, bool(root))
    if leaf:
        elements.append(leaf)
    return root + SEPARATOR.join(elements)


def normal(path: PathArg) -> str:
    """Normalize *path*; equivalent to ``resolve(path)`` and idempotent."""
    return resolve(path)


def join(*paths: PathArg) -> str:
    """Concatenate fragments with the separator, then normalize."""
    return normal(SEPARATOR.join(_as_text(p) for p in paths))


def absolute(path: PathArg | None, cwd: PathArg | None = None) -> str:
    """Anchor *path* against *cwd* (default: the working directory)."""
    text = _as_text(path)
    base = get_working_directory() if cwd is None else _as_text(cwd)
    return resolve(join(base, ""), text)


def basename(path: PathArg | None, ext: str | None = None) -> str:
    """Return the last segment of *path*, minus *ext* when it ends with it."""
    segments = split(path)
    name = segments[-1] if segments else ""
    if ext and name and name.endswith(ext):
        return name[: len(name) - len(ext)]
    return name


def dirname(path: PathArg | None) -> str:
    """Return the parent directory of *path*, or ``"."`` if it has none."""
    pure = PurePath(_as_text(path))
    parent = pure.parent
    if parent == pure:
        return "."
    return str(parent)


def extension(path: PathArg | None) -> str:
    """Return the extension of *path* including the dot, or ``""``.

    Leading dots are ignored so dotfiles such as ``.bashrc`` have no
    extension.
    """
    name = basename(path).lstrip(".")
    index = name.rfind(".")
    return name[index:] if index > 0 else ""


def relative(
    source: PathArg,
    target: PathArg | None = None,
    cwd: PathArg | None = None,
) -> str:
    """Return the path that leads from *source* to *target* using ``..``.

    With one argument, return *source* relative to the working directory.
    With two, return *target* relative to the directory containing
    *source*. Paths on different roots cannot be linked, so the absolute
    *target* is returned for them.
    """
    if target is None:
        target = source
        base = split(absolute(cwd if cwd is not None else get_working_directory()))
    else:
        base = split(absolute(source, cwd))[:-1]
    destination = absolute(target, cwd)
    dest_parts = split(destination)
    if not base or not dest_parts or base[0] != dest_parts[0]:
        return destination

    base_rest = [p for p in base[1:] if p]
    dest_rest = [p for p in dest_parts[1:] if p]
    while base_rest and dest_rest and base_rest[0] == dest_rest[0]:
        base_rest.pop(0)
        dest_rest.pop(0)
    return SEPARATOR.join([".."] * len(base_rest) + dest_rest) or "."
