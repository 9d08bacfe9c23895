"""
Core utilities for nrfjprog-fetch.

Platform configuration, streaming downloads, filesystem helpers, the
installer launcher and the exception hierarchy.
"""

from nrfjprog_fetch.core.exceptions import (
    ArchiveExtractionError,
    BindingError,
    BindingsNotFoundError,
    ConfigurationError,
    DownloadError,
    FileInstallError,
    FilesystemError,
    InsecureArchiveError,
    InstallerLaunchError,
    LibraryProbeError,
    NativeLibraryError,
    NrfjprogFetchError,
    PipelineError,
    UnsupportedPlatformError,
)
from nrfjprog_fetch.core.platform import (
    CopyRule,
    PlatformConfig,
    SUPPORTED_PLATFORMS,
    build_platform_configs,
    detect_platform,
    resolve_platform_config,
)

__all__ = [
    # Exceptions
    "ArchiveExtractionError",
    "BindingError",
    "BindingsNotFoundError",
    "ConfigurationError",
    "DownloadError",
    "FileInstallError",
    "FilesystemError",
    "InsecureArchiveError",
    "InstallerLaunchError",
    "LibraryProbeError",
    "NativeLibraryError",
    "NrfjprogFetchError",
    "PipelineError",
    "UnsupportedPlatformError",
    # Platform
    "CopyRule",
    "PlatformConfig",
    "SUPPORTED_PLATFORMS",
    "build_platform_configs",
    "detect_platform",
    "resolve_platform_config",
]
