"""
Installation of extracted library and header files.

Files under a CopyRule's source are split into two partitions (shared
libraries and headers). Both partitions are installed concurrently, and so
is every file inside a partition; the call returns once all of them are done.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

from nrfjprog_fetch.core.filesystem import list_files_recursive, symlink_or_copy
from nrfjprog_fetch.core.platform import CopyRule

logger = logging.getLogger(__name__)

InstallFn = Callable[[Path, Path], str]

MAX_WORKERS = 16


@dataclass
class CopyResult:
    """Files installed by a copy rule, keyed by destination path."""

    libraries: Dict[Path, str] = field(default_factory=dict)
    headers: Dict[Path, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.libraries) + len(self.headers)


def partition_files(
    files: Sequence[Path], rule: CopyRule
) -> Tuple[List[Path], List[Path]]:
    """
    Split relative file paths into library files and header files.

    Files matching neither pattern are left out.
    """
    libraries = [f for f in files if rule.pattern.search(f.as_posix())]
    headers = [f for f in files if rule.header_pattern.search(f.as_posix())]
    return libraries, headers


def _install_partition(
    files: Sequence[Path],
    source: Path,
    destination: Path,
    install: InstallFn,
) -> Dict[Path, str]:
    if not files:
        return {}

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(len(files), MAX_WORKERS)
    ) as pool:
        futures = {
            pool.submit(install, source / name, destination / name): name
            for name in files
        }
        installed = {}
        for future in concurrent.futures.as_completed(futures):
            # Re-raises the first failing file's error
            installed[destination / futures[future]] = future.result()
    return installed


def install_files(
    rule: CopyRule, install: InstallFn = symlink_or_copy
) -> CopyResult:
    """
    Install library and header files selected by a copy rule.

    Args:
        rule: Copy rule of the selected platform
        install: Callable(source, target) placing one file (default: symlink_or_copy)

    Returns:
        CopyResult describing what was installed

    Raises:
        FilesystemError: If the source directory is missing
        FileInstallError: If any single file cannot be installed
    """
    files = list_files_recursive(rule.source)
    libraries, headers = partition_files(files, rule)

    logger.info(f"Copying nrfjprog libs from {rule.source} to {rule.destination}")
    logger.info(
        f"Copying nrfjprog header files from {rule.source} to {rule.header_destination}"
    )

    with concurrent.futures.ThreadPoolExecutor(max_workers=2) as pool:
        library_job = pool.submit(
            _install_partition, libraries, rule.source, rule.destination, install
        )
        header_job = pool.submit(
            _install_partition, headers, rule.source, rule.header_destination, install
        )
        result = CopyResult(
            libraries=library_job.result(),
            headers=header_job.result(),
        )

    logger.debug(
        f"Installed {len(result.libraries)} librar(y/ies) "
        f"and {len(result.headers)} header(s)"
    )
    return result
