"""
Streaming HTTP download of vendor artifacts.

Downloads are a single GET request whose body is written to disk in chunks,
so installers and archives of any size never sit in memory. Any status other
than 200 is a hard failure. There is no retry and no checksum verification.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from nrfjprog_fetch.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sends no content-length

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        mb_downloaded = self.bytes_downloaded / 1024 / 1024
        if self.total_bytes > 0:
            mb_total = self.total_bytes / 1024 / 1024
            return f"{mb_downloaded:.1f}/{mb_total:.1f} MB ({self.percentage:.1f}%)"
        return f"{mb_downloaded:.1f} MB"


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download a file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save the file (overwritten if present)
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds (default: wait indefinitely)
        session: Optional requests session to issue the request with

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or the status code is not 200
        ValueError: If URL or destination is empty

    Example:
        >>> download_file(
        ...     "https://example.com/nrfjprog-linux64.tar",
        ...     Path("nrfjprog/nrfjprog-linux64.tar"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    getter = session.get if session is not None else requests.get

    try:
        response = getter(url, stream=True, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        raise DownloadError(f"Unable to download {url}: {e}") from e

    with response:
        if response.status_code != 200:
            raise DownloadError(
                f"Unable to download {url}. Got status code {response.status_code}"
            )

        content_length = response.headers.get("content-length")
        try:
            total_size = int(content_length) if content_length else 0
        except ValueError:
            logger.debug(f"Ignoring malformed content-length: {content_length!r}")
            total_size = 0

        downloaded = 0
        last_report = 0.0
        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Report progress at most twice a second
                    now = time.monotonic()
                    if progress_callback and (
                        now - last_report >= 0.5 or downloaded == total_size
                    ):
                        progress_callback(DownloadProgress(downloaded, total_size))
                        last_report = now
        except RequestException as e:
            raise DownloadError(f"Download of {url} interrupted: {e}") from e
        except OSError as e:
            raise DownloadError(f"Unable to write {destination}: {e}") from e

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def log_progress(progress: DownloadProgress) -> None:
    """Progress callback that reports through the module logger."""
    logger.debug(f"Downloaded {progress}")
