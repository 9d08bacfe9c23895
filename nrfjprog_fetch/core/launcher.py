"""
Hand a file to the host's default handler.

Used to start the vendor installer on Windows. The launched process is
detached: nothing waits for it or observes its exit status.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

from nrfjprog_fetch.core.exceptions import InstallerLaunchError

logger = logging.getLogger(__name__)


def open_with_default_handler(
    path: Union[str, Path], platform_id: Optional[str] = None
) -> None:
    """
    Open path with the OS default handler without waiting for it.

    Args:
        path: File to open (an installer executable)
        platform_id: Platform identifier (default: sys.platform)

    Raises:
        InstallerLaunchError: If the file is missing or cannot be launched
    """
    path = Path(path)
    platform_id = platform_id or sys.platform

    if not path.exists():
        raise InstallerLaunchError(f"Installer not found: {path}")

    logger.debug(f"Launching {path} with the default handler")

    if platform_id == "win32" and not hasattr(os, "startfile"):
        raise InstallerLaunchError(
            f"Unable to launch {path}: no default handler available on this host"
        )

    try:
        if platform_id == "win32":
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif platform_id == "darwin":
            subprocess.Popen(
                ["open", str(path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        else:
            subprocess.Popen(
                ["xdg-open", str(path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except OSError as e:
        raise InstallerLaunchError(f"Unable to launch {path}: {e}") from e
