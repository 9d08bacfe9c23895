"""
ctypes binding over the nrfjprog shared library.

This is the default binding probed by nrfjprog-fetch. It locates the vendor
library (libnrfjprogdll.so, libnrfjprogdll.dylib or nrfjprog.dll) in the
directories the fetch pipeline installs into, falling back to the system
loader path, and calls NRFJPROG_dll_version().

Failures are raised as NativeLibraryError carrying the same errno/errcode
pairs the compiled pc-nrfjprog-js binding reports, so the failure classifier
treats both bindings alike.
"""

import ctypes
import ctypes.util
import logging
from enum import IntEnum
from pathlib import Path
from typing import Iterable, Optional, Union

from nrfjprog_fetch.core.exceptions import NativeLibraryError
from nrfjprog_fetch.core.platform import PlatformConfig

logger = logging.getLogger(__name__)


class ErrorCode(IntEnum):
    """Error codes reported by the binding."""

    JsSuccess = 0
    CouldNotFindJlinkDLL = 1
    CouldNotFindJprogDLL = 2
    CouldNotLoadDLL = 3
    CouldNotOpenDevice = 4
    CouldNotOpenDLL = 5
    CouldNotConnectToDevice = 6
    CouldNotCallFunction = 7


def _error(code: ErrorCode, message: str) -> NativeLibraryError:
    return NativeLibraryError(message, errno=int(code), errcode=code.name)


def find_library(
    library_name: str, search_dirs: Iterable[Path] = ()
) -> Optional[Union[Path, str]]:
    """
    Locate the nrfjprog shared library.

    Args:
        library_name: Platform file name, e.g. 'libnrfjprogdll.so'
        search_dirs: Directories checked before the system loader path

    Returns:
        Path of the library, a loader name from ctypes.util.find_library(),
        or None if nothing was found
    """
    for directory in search_dirs:
        candidate = Path(directory) / library_name
        if candidate.exists():
            logger.debug(f"Found {library_name} in {directory}")
            return candidate

    # libnrfjprogdll.so -> nrfjprogdll, nrfjprog.dll -> nrfjprog
    stem = library_name.split(".", 1)[0]
    if stem.startswith("lib"):
        stem = stem[3:]
    return ctypes.util.find_library(stem)


class NativeBinding:
    """Version query against the vendor nrfjprog library."""

    def __init__(self, library_name: str, library_dirs: Iterable[Path] = ()):
        self.library_name = library_name
        self.library_dirs = tuple(Path(d) for d in library_dirs)
        self._library = None

    def _load(self):
        if self._library is not None:
            return self._library

        location = find_library(self.library_name, self.library_dirs)
        if location is None:
            searched = ", ".join(str(d) for d in self.library_dirs) or "system path"
            raise _error(
                ErrorCode.CouldNotFindJprogDLL,
                f"Could not find {self.library_name} (searched: {searched})",
            )

        try:
            self._library = ctypes.CDLL(str(location))
        except OSError as e:
            raise _error(
                ErrorCode.CouldNotLoadDLL, f"Could not load {location}: {e}"
            ) from e
        return self._library

    def get_library_version(self) -> str:
        """
        Query the nrfjprog library version.

        Returns:
            Version string 'major.minor.revision', e.g. '9.7.a'

        Raises:
            NativeLibraryError: If the library is missing, unloadable,
                or the version call fails
        """
        library = self._load()

        try:
            dll_version = library.NRFJPROG_dll_version
        except AttributeError as e:
            raise _error(
                ErrorCode.CouldNotLoadDLL,
                f"{self.library_name} does not export NRFJPROG_dll_version",
            ) from e

        dll_version.argtypes = [
            ctypes.POINTER(ctypes.c_uint32),
            ctypes.POINTER(ctypes.c_uint32),
            ctypes.POINTER(ctypes.c_char),
        ]
        dll_version.restype = ctypes.c_int

        major = ctypes.c_uint32()
        minor = ctypes.c_uint32()
        revision = ctypes.c_char()
        result = dll_version(
            ctypes.byref(major), ctypes.byref(minor), ctypes.byref(revision)
        )
        if result != 0:
            raise _error(
                ErrorCode.CouldNotCallFunction,
                f"NRFJPROG_dll_version failed with error {result}",
            )

        rev = revision.value.decode("ascii", "replace")
        return f"{major.value}.{minor.value}.{rev}"


def bind(config: PlatformConfig) -> NativeBinding:
    """Create the binding for a platform configuration."""
    return NativeBinding(config.library_name, config.library_dirs)
