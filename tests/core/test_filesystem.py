"""
Unit tests for filesystem utilities.

Tests cover:
- Directory creation
- Recursive file listing
- Streaming tar extraction
- Symlink creation with copy fallback
"""

from unittest.mock import patch

import pytest

from nrfjprog_fetch.core.exceptions import (
    ArchiveExtractionError,
    FileInstallError,
    FilesystemError,
    InsecureArchiveError,
)
from nrfjprog_fetch.core.filesystem import (
    IS_WINDOWS,
    ensure_directory,
    extract_tar_stream,
    list_files_recursive,
    symlink_or_copy,
)


# ============================================================================
# Directories
# ============================================================================


class TestEnsureDirectory:
    """Tests for ensure_directory()."""

    def test_creates_nested(self, tmp_path):
        """Test missing parents are created."""
        target = tmp_path / "a" / "b" / "c"

        result = ensure_directory(target)

        assert result == target
        assert target.is_dir()

    def test_tolerates_existing(self, tmp_path):
        """Test an existing directory is not an error."""
        ensure_directory(tmp_path)
        assert tmp_path.is_dir()

    def test_file_in_the_way(self, tmp_path):
        """Test a file at the path raises FilesystemError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(FilesystemError, match="Unable to create directory"):
            ensure_directory(blocker)


class TestListFilesRecursive:
    """Tests for list_files_recursive()."""

    def test_lists_relative_paths(self, tmp_path, write_tree):
        """Test nested files are listed relative to the root."""
        write_tree(tmp_path, {"a.so": b"", "sub/b.h": b"", "sub/deeper/c.txt": b""})

        files = list_files_recursive(tmp_path)

        assert [f.as_posix() for f in files] == ["a.so", "sub/b.h", "sub/deeper/c.txt"]

    def test_skips_directories(self, tmp_path):
        """Test empty directories are not listed."""
        (tmp_path / "empty").mkdir()
        assert list_files_recursive(tmp_path) == []

    def test_missing_root(self, tmp_path):
        """Test a missing root raises FilesystemError."""
        with pytest.raises(FilesystemError, match="Not a directory"):
            list_files_recursive(tmp_path / "missing")


# ============================================================================
# Archive Extraction
# ============================================================================


class TestExtractTarStream:
    """Tests for extract_tar_stream()."""

    def test_extracts_plain_tar(self, tmp_path, nrfjprog_tar):
        """Test members are written under the destination."""
        archive = tmp_path / "nrfjprog.tar"
        archive.write_bytes(nrfjprog_tar)
        destination = tmp_path / "unpacked"
        destination.mkdir()

        count = extract_tar_stream(archive, destination)

        assert count == 6
        assert (destination / "nrfjprog" / "libnrfjprogdll.so").read_bytes() == (
            b"\x7fELF nrfjprog"
        )
        assert (destination / "nrfjprog" / "headers" / "nrfjprogdll.h").exists()

    def test_extracts_gzip_tar(self, tmp_path, tar_builder):
        """Test compressed archives are detected from the stream."""
        archive = tmp_path / "nrfjprog.tar"
        archive.write_bytes(tar_builder({"nrfjprog/a.so": b"so"}, mode="w:gz"))
        destination = tmp_path / "unpacked"
        destination.mkdir()

        extract_tar_stream(archive, destination)

        assert (destination / "nrfjprog" / "a.so").read_bytes() == b"so"

    def test_overwrites_previous_extraction(self, tmp_path, tar_builder):
        """Test re-extracting replaces files from an earlier run."""
        archive = tmp_path / "nrfjprog.tar"
        archive.write_bytes(tar_builder({"nrfjprog/a.so": b"new"}))
        destination = tmp_path / "unpacked"
        (destination / "nrfjprog").mkdir(parents=True)
        (destination / "nrfjprog" / "a.so").write_bytes(b"old")

        extract_tar_stream(archive, destination)

        assert (destination / "nrfjprog" / "a.so").read_bytes() == b"new"

    def test_missing_archive(self, tmp_path):
        """Test a missing archive raises ArchiveExtractionError."""
        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_tar_stream(tmp_path / "missing.tar", tmp_path)

    def test_corrupt_archive(self, tmp_path):
        """Test undecodable data raises ArchiveExtractionError."""
        archive = tmp_path / "corrupt.tar"
        archive.write_bytes(b"<html>Not Found</html>" * 40)

        with pytest.raises(ArchiveExtractionError):
            extract_tar_stream(archive, tmp_path)

    def test_rejects_directory_traversal(self, tmp_path, tar_builder):
        """Test members escaping the destination are blocked."""
        archive = tmp_path / "evil.tar"
        archive.write_bytes(tar_builder({"../escaped.txt": b"evil"}))
        destination = tmp_path / "unpacked"
        destination.mkdir()

        with pytest.raises(InsecureArchiveError, match="directory traversal"):
            extract_tar_stream(archive, destination)

        assert not (tmp_path / "escaped.txt").exists()

    def test_logs_extraction(self, tmp_path, tar_builder, caplog):
        """Test extraction is announced at INFO level."""
        archive = tmp_path / "nrfjprog.tar"
        archive.write_bytes(tar_builder({"a.txt": b"a"}))

        with caplog.at_level("INFO"):
            extract_tar_stream(archive, tmp_path)

        assert "Extracting nrfjprog from" in caplog.text


# ============================================================================
# File Installation
# ============================================================================


class TestSymlinkOrCopy:
    """Tests for symlink_or_copy()."""

    @pytest.mark.skipif(IS_WINDOWS, reason="symlinks need privileges on Windows")
    def test_creates_symlink(self, tmp_path):
        """Test a symlink pointing at the source is created."""
        source = tmp_path / "libnrfjprogdll.so"
        source.write_bytes(b"lib")
        target = tmp_path / "lib" / "libnrfjprogdll.so"

        kind = symlink_or_copy(source, target)

        assert kind == "symlink"
        assert target.is_symlink()
        assert target.resolve() == source.resolve()

    def test_falls_back_to_copy(self, tmp_path):
        """Test a copy is made when the symlink cannot be created."""
        source = tmp_path / "libnrfjprogdll.so"
        source.write_bytes(b"lib")
        target = tmp_path / "lib" / "libnrfjprogdll.so"

        with patch(
            "nrfjprog_fetch.core.filesystem.os.symlink",
            side_effect=OSError("not permitted"),
        ):
            kind = symlink_or_copy(source, target)

        assert kind == "copy"
        assert not target.is_symlink()
        assert target.read_bytes() == b"lib"

    def test_replaces_existing_target(self, tmp_path):
        """Test an earlier install is replaced."""
        source = tmp_path / "a.h"
        source.write_bytes(b"new")
        target = tmp_path / "include" / "a.h"
        target.parent.mkdir()
        target.write_bytes(b"old")

        symlink_or_copy(source, target)

        assert target.read_bytes() == b"new"

    def test_missing_source(self, tmp_path):
        """Test a missing source raises FileInstallError naming it."""
        source = tmp_path / "missing.so"

        with pytest.raises(FileInstallError, match="missing.so"):
            symlink_or_copy(source, tmp_path / "lib" / "missing.so")

        assert not (tmp_path / "lib" / "missing.so").exists()

    def test_directory_in_the_way(self, tmp_path):
        """Test a directory at the target is never removed."""
        source = tmp_path / "a.so"
        source.write_bytes(b"lib")
        target = tmp_path / "lib" / "a.so"
        target.mkdir(parents=True)

        with pytest.raises(FileInstallError, match="exists as a directory"):
            symlink_or_copy(source, target)

        assert target.is_dir()

    def test_copy_failure(self, tmp_path):
        """Test a failing copy raises FileInstallError."""
        source = tmp_path / "a.so"
        source.write_bytes(b"lib")

        with patch(
            "nrfjprog_fetch.core.filesystem.os.symlink", side_effect=OSError("no")
        ), patch(
            "nrfjprog_fetch.core.filesystem.shutil.copy2",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(FileInstallError, match="disk full"):
                symlink_or_copy(source, tmp_path / "lib" / "a.so")
