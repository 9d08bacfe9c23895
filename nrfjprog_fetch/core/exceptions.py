"""
Centralized exception hierarchy for nrfjprog-fetch.

Every error raised by the package derives from NrfjprogFetchError so the
command line layer can report failures from any stage in one place.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class NrfjprogFetchError(Exception):
    """Base exception for all nrfjprog-fetch errors."""

    pass


class ConfigurationError(NrfjprogFetchError):
    """Raised when the configuration file is malformed."""

    pass


class UnsupportedPlatformError(NrfjprogFetchError):
    """Raised when no platform configuration exists for the running OS."""

    def __init__(self, platform_id: str):
        self.platform_id = platform_id
        super().__init__(
            f"Unsupported platform: '{platform_id}'. "
            "Cannot get nrfjprog command-line tools."
        )


# ============================================================================
# Binding Exceptions
# ============================================================================


class BindingError(NrfjprogFetchError):
    """
    Base exception for failures raised by the native binding.

    Attributes:
        errno: Numeric error code reported by the binding, if any
        errcode: Symbolic error name reported by the binding, if any
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        errcode: Optional[str] = None,
    ):
        self.errno = errno
        self.errcode = errcode
        super().__init__(message)


class BindingsNotFoundError(BindingError):
    """Raised when the binding module itself cannot be imported."""

    pass


class NativeLibraryError(BindingError):
    """Raised when the vendor shared library cannot be found, loaded or called."""

    pass


class LibraryProbeError(NrfjprogFetchError):
    """Raised when the library still does not work after a fetch."""

    pass


# ============================================================================
# Pipeline Exceptions
# ============================================================================


class PipelineError(NrfjprogFetchError):
    """Base exception for fetch-and-install pipeline failures."""

    pass


class DownloadError(PipelineError):
    """Raised when the artifact download fails."""

    pass


class FilesystemError(PipelineError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class FileInstallError(FilesystemError):
    """Failed to link or copy a file into its destination."""

    def __init__(self, source, target, reason: str):
        self.source = source
        self.target = target
        super().__init__(f"Failed to install {source} to {target}: {reason}")


class InstallerLaunchError(PipelineError):
    """Raised when the external installer cannot be launched."""

    pass
