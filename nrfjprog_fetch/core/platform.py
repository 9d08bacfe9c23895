"""
Platform detection and per-platform fetch configuration.

This module maps the running operating system to a static PlatformConfig
describing where the nRF5x command line tools are downloaded from and where
their files end up.

Usage:
    from nrfjprog_fetch.core.platform import (
        build_platform_configs,
        detect_platform,
        resolve_platform_config,
    )

    configs = build_platform_configs(Path("nrfjprog"), Path.cwd())
    config = resolve_platform_config(detect_platform(), configs)
    print(config.url)
"""

import os
import re
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Pattern

from nrfjprog_fetch.core.exceptions import UnsupportedPlatformError

LINUX = "linux"
DARWIN = "darwin"
WIN32 = "win32"

SUPPORTED_PLATFORMS = (LINUX, DARWIN, WIN32)

HEADER_PATTERN = re.compile(r"\.h$")


@dataclass(frozen=True)
class CopyRule:
    """
    Which extracted files get installed, and where.

    Attributes:
        source: Directory that is listed recursively
        destination: Directory receiving files that match ``pattern``
        header_destination: Directory receiving files that match ``header_pattern``
        pattern: Regex searched in each relative path to select library files
        header_pattern: Regex searched in each relative path to select headers
    """

    source: Path
    destination: Path
    header_destination: Path
    pattern: Pattern[str]
    header_pattern: Pattern[str] = HEADER_PATTERN


@dataclass(frozen=True)
class PlatformConfig:
    """
    Static fetch configuration for one operating system.

    Attributes:
        platform_id: Identifier as reported by ``sys.platform``
        url: Download URL of the archive or installer
        destination_file: Where the download is written
        download_dir: Working directory created before downloading
        library_name: File name of the vendor shared library
        extract_to: Directory the archive is extracted into, if any
        copy_files: Rule for installing extracted files, if any
        spawn_child: Installer launched after download, if any
        instructions: Text printed instead of re-probing, if any
        header_override: Vendor header whose presence means the tools are installed
        library_dirs: Directories searched for ``library_name``
    """

    platform_id: str
    url: str
    destination_file: Path
    download_dir: Path
    library_name: str
    extract_to: Optional[Path] = None
    copy_files: Optional[CopyRule] = None
    spawn_child: Optional[Path] = None
    instructions: Optional[str] = None
    header_override: Optional[Path] = None
    library_dirs: tuple = field(default_factory=tuple)

    def with_url(self, url: str) -> "PlatformConfig":
        """Return a copy of this configuration pointing at another URL."""
        return replace(self, url=url)

    def with_library_dirs(self, *dirs: Path) -> "PlatformConfig":
        """Return a copy with extra directories appended to the library search path."""
        extra = tuple(Path(d) for d in dirs)
        return replace(self, library_dirs=self.library_dirs + extra)


def detect_platform() -> str:
    """
    Detect the running operating system identifier.

    Returns:
        ``sys.platform`` value, e.g. 'linux', 'darwin' or 'win32'
    """
    return sys.platform


def _windows_header_path(environ: Mapping[str, str]) -> Optional[Path]:
    program_files = environ.get("ProgramFiles(x86)")
    if not program_files:
        return None
    return (
        Path(program_files)
        / "Nordic Semiconductor"
        / "nrf5x"
        / "bin"
        / "headers"
        / "nrfjprog.h"
    )


def build_platform_configs(
    download_dir: Path,
    install_root: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, PlatformConfig]:
    """
    Build the configuration table for every supported platform.

    Args:
        download_dir: Working directory for downloads and extraction
        install_root: Directory the binding is installed in (macOS libraries go here)
        environ: Environment used to locate vendor install paths (default: os.environ)

    Returns:
        Mapping of platform identifier to PlatformConfig
    """
    if environ is None:
        environ = os.environ

    download_dir = Path(download_dir)
    install_root = Path(install_root)
    unpacked = download_dir / "unpacked"
    include_dir = download_dir / "include"
    lib_dir = download_dir / "lib"
    installer = download_dir / "nrfjprog-win32.exe"
    windows_header = _windows_header_path(environ)

    return {
        LINUX: PlatformConfig(
            platform_id=LINUX,
            # nRF5x-Command-Line-Tools-Linux64, product page 51386
            url="https://www.nordicsemi.com/eng/nordic/download_resource/51386/27/17243451/94917",
            destination_file=download_dir / "nrfjprog-linux64.tar",
            download_dir=download_dir,
            library_name="libnrfjprogdll.so",
            extract_to=unpacked,
            copy_files=CopyRule(
                source=unpacked / "nrfjprog",
                destination=lib_dir,
                header_destination=include_dir,
                pattern=re.compile(r"\.so"),
            ),
            library_dirs=(lib_dir,),
        ),
        DARWIN: PlatformConfig(
            platform_id=DARWIN,
            # nRF5x-Command-Line-Tools-OSX, product page 53402
            url="https://www.nordicsemi.com/eng/nordic/download_resource/53402/19/93375824/99977",
            destination_file=download_dir / "nrfjprog-darwin.tar",
            download_dir=download_dir,
            library_name="libnrfjprogdll.dylib",
            extract_to=unpacked,
            copy_files=CopyRule(
                source=unpacked / "nrfjprog",
                destination=install_root,
                header_destination=include_dir,
                pattern=re.compile(r"\.dylib"),
            ),
            library_dirs=(install_root,),
        ),
        WIN32: PlatformConfig(
            platform_id=WIN32,
            # nRF5x-Command-Line-Tools-Win32, product page 33444
            url="https://www.nordicsemi.com/eng/nordic/download_resource/33444/47/97153666/53210",
            destination_file=installer,
            download_dir=download_dir,
            library_name="nrfjprog.dll",
            spawn_child=installer,
            header_override=windows_header,
            library_dirs=(windows_header.parent.parent,) if windows_header else (),
        ),
    }


def resolve_platform_config(
    platform_id: str, configs: Mapping[str, PlatformConfig]
) -> PlatformConfig:
    """
    Select the configuration for a platform.

    Args:
        platform_id: Identifier of the running OS
        configs: Table built by build_platform_configs()

    Returns:
        Matching PlatformConfig

    Raises:
        UnsupportedPlatformError: If no configuration exists for platform_id
    """
    try:
        return configs[platform_id]
    except KeyError:
        raise UnsupportedPlatformError(platform_id) from None


__all__ = [
    "CopyRule",
    "PlatformConfig",
    "SUPPORTED_PLATFORMS",
    "build_platform_configs",
    "detect_platform",
    "resolve_platform_config",
]
