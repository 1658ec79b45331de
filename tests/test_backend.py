"""Tests for fileworks.lib.backend local filesystem backend."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

import pytest

from fileworks.lib.backend import FilesystemBackend, LocalBackend
from fileworks.lib.config import Config
from fileworks.lib.errors import BackendFailure, InvalidArgument, UnsupportedOperation
from fileworks.lib.modes import OpenIntent


@pytest.fixture()
def backend() -> LocalBackend:
    return LocalBackend()


# ---------------------------------------------------------------------------
# queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_is_a_filesystem_backend(self, backend: LocalBackend) -> None:
        assert isinstance(backend, FilesystemBackend)

    def test_exists_and_kinds(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("x")
        assert backend.exists(str(tmp_path / "f.txt")) is True
        assert backend.exists(str(tmp_path / "missing")) is False
        assert backend.is_file(str(tmp_path / "f.txt")) is True
        assert backend.is_directory(str(tmp_path)) is True
        assert backend.is_file(str(tmp_path)) is False

    def test_readable_writable(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f.txt"
        target.write_text("x")
        assert backend.is_readable(str(target)) is True
        assert backend.is_writable(str(target)) is True
        assert backend.is_readable(str(tmp_path / "missing")) is False

    def test_list_sorted(self, backend: LocalBackend, tmp_path: Path) -> None:
        for name in ("c", "a", "b"):
            (tmp_path / name).write_text(name)
        assert backend.list(str(tmp_path)) == ["a", "b", "c"]

    def test_list_missing_directory(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        missing = str(tmp_path / "nope")
        with pytest.raises(BackendFailure) as excinfo:
            backend.list(missing)
        assert excinfo.value.operation == "list directory"
        assert excinfo.value.paths == (missing,)
        assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    def test_list_file_is_not_a_directory(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        target = tmp_path / "f.txt"
        target.write_text("x")
        with pytest.raises(BackendFailure) as excinfo:
            backend.list(str(target))
        assert isinstance(excinfo.value.__cause__, NotADirectoryError)

    def test_size_and_mtime(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f.bin"
        target.write_bytes(b"12345")
        assert backend.size(str(target)) == 5
        stamp = backend.mtime(str(target))
        assert isinstance(stamp, datetime)
        assert stamp.tzinfo is not None
        assert abs(stamp.timestamp() - target.stat().st_mtime) < 1

    def test_size_missing(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(BackendFailure, match="failed to stat"):
            backend.size(str(tmp_path / "missing"))

    def test_canonical_resolves_symlink(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)
        assert backend.canonical(str(link / "x")) == str(real.resolve() / "x")


# ---------------------------------------------------------------------------
# mutations
# ---------------------------------------------------------------------------


class TestMutations:
    def test_mkdir(self, backend: LocalBackend, tmp_path: Path) -> None:
        backend.mkdir(str(tmp_path / "d"))
        assert (tmp_path / "d").is_dir()

    def test_mkdir_existing_fails(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(BackendFailure, match="failed to make directory"):
            backend.mkdir(str(tmp_path))

    def test_mkdir_missing_parent_fails(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        with pytest.raises(BackendFailure):
            backend.mkdir(str(tmp_path / "a" / "b"))

    def test_mkdirs(self, backend: LocalBackend, tmp_path: Path) -> None:
        backend.mkdirs(str(tmp_path / "a" / "b" / "c"))
        assert (tmp_path / "a" / "b" / "c").is_dir()

    def test_copy(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "src.txt").write_text("payload")
        backend.copy(str(tmp_path / "src.txt"), str(tmp_path / "dst.txt"))
        assert (tmp_path / "dst.txt").read_text() == "payload"
        assert (tmp_path / "src.txt").exists()

    def test_move(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "src.txt").write_text("payload")
        backend.move(str(tmp_path / "src.txt"), str(tmp_path / "dst.txt"))
        assert (tmp_path / "dst.txt").read_text() == "payload"
        assert not (tmp_path / "src.txt").exists()

    def test_move_missing_names_both_paths(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        source = str(tmp_path / "missing")
        target = str(tmp_path / "dst")
        with pytest.raises(BackendFailure) as excinfo:
            backend.move(source, target)
        assert excinfo.value.paths == (source, target)
        assert f"failed to move {source} to {target}" in str(excinfo.value)

    def test_remove(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f").write_text("x")
        backend.remove(str(tmp_path / "f"))
        assert not (tmp_path / "f").exists()

    def test_remove_missing_logs_warning(
        self,
        backend: LocalBackend,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING), pytest.raises(BackendFailure):
            backend.remove(str(tmp_path / "missing"))
        assert "Backend remove file failed" in caplog.text

    def test_rmdir(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "d").mkdir()
        backend.rmdir(str(tmp_path / "d"))
        assert not (tmp_path / "d").exists()

    def test_rmdir_not_empty_fails(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "f").write_text("x")
        with pytest.raises(BackendFailure, match="failed to remove directory"):
            backend.rmdir(str(tmp_path / "d"))

    def test_rmtree_directory(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "d" / "e").mkdir(parents=True)
        (tmp_path / "d" / "e" / "f").write_text("x")
        backend.rmtree(str(tmp_path / "d"))
        assert not (tmp_path / "d").exists()

    def test_rmtree_file(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f").write_text("x")
        backend.rmtree(str(tmp_path / "f"))
        assert not (tmp_path / "f").exists()


# ---------------------------------------------------------------------------
# open_stream
# ---------------------------------------------------------------------------


class TestOpenStream:
    def test_read_text(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("héllo", encoding="utf-8")
        with backend.open_stream(str(tmp_path / "f.txt"), OpenIntent(read=True)) as s:
            assert s.read() == "héllo"

    def test_write_binary(self, backend: LocalBackend, tmp_path: Path) -> None:
        intent = OpenIntent(write=True, binary=True)
        with backend.open_stream(str(tmp_path / "f.bin"), intent) as stream:
            stream.write(b"\x00\x01")
        assert (tmp_path / "f.bin").read_bytes() == b"\x00\x01"

    def test_append(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("a")
        with backend.open_stream(str(tmp_path / "f.txt"), OpenIntent(append=True)) as s:
            s.write("b")
        assert (tmp_path / "f.txt").read_text() == "ab"

    def test_exclusive_write_on_existing_fails(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        (tmp_path / "f.txt").write_text("a")
        intent = OpenIntent(write=True, exclusive=True)
        with pytest.raises(BackendFailure) as excinfo:
            backend.open_stream(str(tmp_path / "f.txt"), intent)
        assert isinstance(excinfo.value.__cause__, FileExistsError)

    def test_exclusive_write_creates(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        intent = OpenIntent(write=True, exclusive=True)
        with backend.open_stream(str(tmp_path / "new.txt"), intent) as stream:
            stream.write("x")
        assert (tmp_path / "new.txt").read_text() == "x"

    def test_explicit_charset(self, backend: LocalBackend, tmp_path: Path) -> None:
        intent = OpenIntent(write=True, charset="latin-1")
        with backend.open_stream(str(tmp_path / "f.txt"), intent) as stream:
            stream.write("é")
        assert (tmp_path / "f.txt").read_bytes() == b"\xe9"

    def test_default_charset_from_config(self, tmp_path: Path) -> None:
        backend = LocalBackend(Config(charset="utf-16"))
        with backend.open_stream(str(tmp_path / "f.txt"), OpenIntent(write=True)) as s:
            s.write("a")
        assert (tmp_path / "f.txt").read_text(encoding="utf-16") == "a"

    def test_unknown_default_charset_leaves_file_alone(self, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("keep")
        backend = LocalBackend(Config(charset="no-such-codec"))
        with pytest.raises(InvalidArgument, match="unsupported charset"):
            backend.open_stream(str(tmp_path / "f.txt"), OpenIntent(write=True))
        assert (tmp_path / "f.txt").read_text() == "keep"

    def test_unknown_default_charset_ignored_for_binary(self, tmp_path: Path) -> None:
        backend = LocalBackend(Config(charset="no-such-codec"))
        intent = OpenIntent(write=True, binary=True)
        with backend.open_stream(str(tmp_path / "f.bin"), intent) as stream:
            stream.write(b"\x01")
        assert (tmp_path / "f.bin").read_bytes() == b"\x01"

    def test_canonical_follows_symlink(
        self, backend: LocalBackend, tmp_path: Path
    ) -> None:
        (tmp_path / "real.txt").write_text("target")
        (tmp_path / "link.txt").symlink_to(tmp_path / "real.txt")
        intent = OpenIntent(read=True, canonical=True)
        with backend.open_stream(str(tmp_path / "link.txt"), intent) as stream:
            assert os.path.realpath(stream.name) == str((tmp_path / "real.txt").resolve())
            assert stream.read() == "target"

    def test_update_unsupported(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(UnsupportedOperation):
            backend.open_stream(str(tmp_path / "f"), OpenIntent(update=True))

    def test_missing_file(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(BackendFailure, match="failed to open"):
            backend.open_stream(str(tmp_path / "missing"), OpenIntent(read=True))


# ---------------------------------------------------------------------------
# working directory
# ---------------------------------------------------------------------------


class TestWorkingDirectory:
    def test_get(self, backend: LocalBackend) -> None:
        assert backend.get_working_directory() == os.getcwd()

    def test_set_canonicalizes(
        self,
        backend: LocalBackend,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "real").mkdir()
        (tmp_path / "link").symlink_to(tmp_path / "real")
        result = backend.set_working_directory(str(tmp_path / "link"))
        assert result == str((tmp_path / "real").resolve())
        assert os.getcwd() == result

    def test_set_not_a_directory(
        self,
        backend: LocalBackend,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(BackendFailure, match="not a directory"):
            backend.set_working_directory(str(tmp_path / "missing"))
        assert os.getcwd() == str(tmp_path.resolve())
