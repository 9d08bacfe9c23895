"""
Filesystem utilities for nrfjprog-fetch.

This module provides the file operations used by the fetch pipeline:
- Directory creation that tolerates existing directories
- Streaming tar extraction with directory traversal protection
- Recursive file listing
- Symlink creation with copy fallback
"""

import logging
import os
import shutil
import sys
import tarfile
from pathlib import Path
from typing import List, Union

from nrfjprog_fetch.core.exceptions import (
    ArchiveExtractionError,
    FileInstallError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Directories
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, creating it and its parents if needed.

    Args:
        path: Directory path

    Returns:
        Path object for the directory

    Raises:
        FilesystemError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Unable to create directory {path}: {e}") from e
    return path


def list_files_recursive(root: Union[str, Path]) -> List[Path]:
    """
    List every regular file below root.

    Args:
        root: Directory to walk

    Returns:
        Sorted paths relative to root

    Raises:
        FilesystemError: If root is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise FilesystemError(f"Not a directory: {root}")

    return sorted(
        path.relative_to(root)
        for path in root.rglob("*")
        if path.is_file() or path.is_symlink()
    )


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(name: str, destination: Path) -> None:
    """
    Reject archive members that would land outside destination.

    Raises:
        InsecureArchiveError: If the member path escapes destination
    """
    member_path = (destination / name).resolve()
    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{name}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_tar_stream(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> int:
    """
    Stream-decode a tar archive into destination.

    The archive is read sequentially (any compression tarfile understands),
    and each member is validated before it is written.

    Args:
        archive_path: Path to the tar archive
        destination: Existing directory to extract into

    Returns:
        Number of members extracted

    Raises:
        ArchiveExtractionError: If reading or decoding the archive fails
        InsecureArchiveError: If a member path escapes destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    logger.info(f"Extracting nrfjprog from {archive_path} to {destination}")

    count = 0
    try:
        with open(archive_path, "rb") as stream:
            with tarfile.open(fileobj=stream, mode="r|*") as tar:
                for member in tar:
                    _validate_archive_path(member.name, destination)
                    if sys.version_info >= (3, 12):
                        tar.extract(member, destination, filter="data")
                    else:
                        tar.extract(member, destination)
                    count += 1
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {count} member(s) into {destination}")
    return count


# ============================================================================
# File Installation
# ============================================================================


def symlink_or_copy(source: Union[str, Path], target: Union[str, Path]) -> str:
    """
    Place source at target as a symbolic link, or a copy where links fail.

    An existing file or link at target is replaced. On Windows a copy is
    always made since symlinks need elevated privileges.

    Args:
        source: Existing file
        target: Path to create

    Returns:
        'symlink' or 'copy', depending on what was created

    Raises:
        FileInstallError: If neither a link nor a copy could be created
    """
    source = Path(source).resolve()
    target = Path(target)

    if not source.is_file():
        raise FileInstallError(source, target, "source file does not exist")
    if target.is_dir() and not target.is_symlink():
        raise FileInstallError(source, target, "target path exists as a directory")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink() or target.exists():
            target.unlink()
    except OSError as e:
        raise FileInstallError(source, target, str(e)) from e

    if not IS_WINDOWS:
        try:
            os.symlink(source, target)
            return "symlink"
        except OSError as e:
            logger.debug(f"Symlink {target} -> {source} failed ({e}), copying")

    try:
        shutil.copy2(source, target)
    except OSError as e:
        raise FileInstallError(source, target, str(e)) from e
    return "copy"
