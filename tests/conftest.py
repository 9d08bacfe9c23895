"""
Pytest configuration and shared fixtures for nrfjprog-fetch tests.
"""

import io
import tarfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from nrfjprog_fetch.binding.prober import ProbeFailure, ProbeResult
from nrfjprog_fetch.core.platform import build_platform_configs


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Probe Doubles
# ============================================================================


LIBRARY_MISSING = ProbeFailure(
    message="Could not find libnrfjprogdll.so (searched: lib)",
    errno=2,
    errcode="CouldNotFindJprogDLL",
)

BINDINGS_MISSING = ProbeFailure(
    message="Could not locate the bindings file. Tried: nrfjprog_binding",
)

UNRELATED = ProbeFailure(
    message="Could not find JLinkARM library",
    errno=1,
    errcode="CouldNotFindJlinkDLL",
)


class ScriptedProber:
    """Prober returning queued results, one per probe() call."""

    def __init__(self, *results: ProbeResult):
        self.results: List[ProbeResult] = list(results)
        self.calls = 0

    def probe(self) -> ProbeResult:
        self.calls += 1
        return self.results.pop(0)


@pytest.fixture
def scripted_prober():
    """Factory for ScriptedProber instances."""
    return ScriptedProber


@pytest.fixture
def library_missing() -> ProbeFailure:
    return LIBRARY_MISSING


@pytest.fixture
def bindings_missing() -> ProbeFailure:
    return BINDINGS_MISSING


@pytest.fixture
def unrelated_failure() -> ProbeFailure:
    return UNRELATED


# ============================================================================
# Platform Configurations
# ============================================================================


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """Directory standing in for the binding's install location."""
    root = tmp_path / "install"
    root.mkdir()
    return root


@pytest.fixture
def download_dir(install_root: Path) -> Path:
    """Download working directory (not created)."""
    return install_root / "nrfjprog"


@pytest.fixture
def platform_configs(download_dir: Path, install_root: Path, tmp_path: Path):
    """Platform table with a fake Program Files directory."""
    environ = {"ProgramFiles(x86)": str(tmp_path / "Program Files (x86)")}
    return build_platform_configs(download_dir, install_root, environ)


@pytest.fixture
def linux_config(platform_configs):
    return platform_configs["linux"]


@pytest.fixture
def darwin_config(platform_configs):
    return platform_configs["darwin"]


@pytest.fixture
def win32_config(platform_configs):
    return platform_configs["win32"]


# ============================================================================
# Archives
# ============================================================================


def build_tar(files: Dict[str, bytes], mode: str = "w") -> bytes:
    """Build an in-memory tar archive from a name -> content mapping."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def nrfjprog_tar() -> bytes:
    """Archive laid out like the vendor's Linux tarball."""
    return build_tar(
        {
            "nrfjprog/nrfjprog": b"#!/bin/sh\n",
            "nrfjprog/libnrfjprogdll.so": b"\x7fELF nrfjprog",
            "nrfjprog/libnrfdfu.so": b"\x7fELF dfu",
            "nrfjprog/headers/nrfjprogdll.h": b"/* nrfjprogdll */",
            "nrfjprog/headers/DllCommonDefinitions.h": b"/* defs */",
            "nrfjprog/README.txt": b"readme",
        }
    )


@pytest.fixture
def write_tree():
    """Create files under a root from a relative-path -> content mapping."""

    def _write(root: Path, files: Dict[str, Optional[bytes]]) -> Path:
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content or b"")
        return root

    return _write


@pytest.fixture
def tar_builder():
    """Factory building in-memory tar archives."""
    return build_tar
