"""
Unit tests for the file store.
"""

import os
import sys
from pathlib import Path

import pytest

from labserver.errors import FileNotFoundInStore, StorageError, ValidationError
from labserver.store import FileStore


@pytest.fixture
def store(tmp_path: Path) -> FileStore:
    return FileStore(tmp_path)


class TestAppend:
    """Tests for FileStore.append()."""

    def test_creates_file(self, store: FileStore, tmp_path: Path):
        path = store.append("file.txt", "Hello")

        assert path == tmp_path.resolve() / "file.txt"
        assert path.read_text(encoding="utf-8") == "Hello\n"

    def test_appends_in_order(self, store: FileStore):
        store.append("file.txt", "A")
        store.append("file.txt", "B")

        assert store.read("file.txt") == "A\nB\n"

    def test_keeps_existing_content(self, store: FileStore, tmp_path: Path):
        (tmp_path / "file.txt").write_text("old\n", encoding="utf-8")

        store.append("file.txt", "new")

        assert store.read("file.txt") == "old\nnew\n"

    def test_text_with_newline_stored_verbatim(self, store: FileStore):
        store.append("file.txt", "line1\nline2")

        assert store.read("file.txt") == "line1\nline2\n"

    def test_creates_base_dir(self, tmp_path: Path):
        store = FileStore(tmp_path / "nested" / "dir")

        store.append("file.txt", "x")

        assert (tmp_path / "nested" / "dir" / "file.txt").exists()

    def test_write_failure_is_storage_error(self, store: FileStore, tmp_path: Path):
        (tmp_path / "file.txt").mkdir()

        with pytest.raises(StorageError) as exc_info:
            store.append("file.txt", "x")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message.startswith("Error writing to file")


class TestRead:
    """Tests for FileStore.read()."""

    def test_reads_unicode(self, store: FileStore):
        store.append("file.txt", "héllo wörld")

        assert store.read("file.txt") == "héllo wörld\n"

    def test_missing_file(self, store: FileStore):
        with pytest.raises(FileNotFoundInStore) as exc_info:
            store.read("nope.txt")

        assert exc_info.value.filename == "nope.txt"
        assert exc_info.value.status_code == 404

    def test_directory_is_storage_error(self, store: FileStore, tmp_path: Path):
        (tmp_path / "adir").mkdir()

        with pytest.raises(StorageError):
            store.read("adir")

    def test_undecodable_is_storage_error(self, store: FileStore, tmp_path: Path):
        (tmp_path / "binary.bin").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(StorageError) as exc_info:
            store.read("binary.bin")

        assert "binary.bin" in exc_info.value.message

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permissions are not enforced",
    )
    def test_unreadable_is_storage_error(self, store: FileStore, tmp_path: Path):
        path = tmp_path / "secret.txt"
        path.write_text("x", encoding="utf-8")
        path.chmod(0)

        try:
            with pytest.raises(StorageError):
                store.read("secret.txt")
        finally:
            path.chmod(0o644)


class TestPathSafety:
    """Tests for FileStore.path_for()."""

    @pytest.mark.parametrize("filename", ["../secret.txt", "../../etc/passwd", "a/../../b"])
    def test_escaping_names_rejected(self, store: FileStore, filename: str):
        with pytest.raises(ValidationError) as exc_info:
            store.path_for(filename)

        assert exc_info.value.status_code == 400

    def test_absolute_name_rejected(self, store: FileStore):
        with pytest.raises(ValidationError):
            store.path_for("/etc/passwd")

    @pytest.mark.parametrize("filename", ["", ".", "sub/.."])
    def test_empty_or_base_rejected(self, store: FileStore, filename: str):
        with pytest.raises(ValidationError):
            store.path_for(filename)

    def test_inner_dots_allowed(self, store: FileStore, tmp_path: Path):
        assert store.path_for("notes..txt") == tmp_path.resolve() / "notes..txt"

    def test_traversal_never_touches_disk(self, tmp_path: Path):
        base = tmp_path / "base"
        base.mkdir()
        (tmp_path / "outside.txt").write_text("secret", encoding="utf-8")
        store = FileStore(base)

        with pytest.raises(ValidationError):
            store.read("../outside.txt")
        with pytest.raises(ValidationError):
            store.append("../outside.txt", "x")

        assert (tmp_path / "outside.txt").read_text(encoding="utf-8") == "secret"
