"""
Network download manager for release archives.

Streams an archive to disk with:
- HTTP/HTTPS downloads with TLS verification
- Retry logic with exponential backoff for transport failures
- Optional progress reporting (bytes, percentage)
- Timeout handling
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

import requests
from requests.exceptions import ConnectionError, HTTPError, RequestException, Timeout

from setup_inspequte.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int

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
    headers: Optional[Dict[str, str]] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        headers: Extra request headers
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries or the server
            answers with a non-success status
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://github.com/KengoTODA/inspequte/releases/download/"
        ...     "inspequte-v0.16.0/inspequte-x86_64-unknown-linux-gnu.tar.gz",
        ...     Path("/tmp/inspequte.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download_with_progress(
                url=url,
                destination=destination,
                headers=headers or {},
                progress_callback=progress_callback,
                timeout=timeout,
            )
        except HTTPError as e:
            # The server answered; retrying will not change the answer.
            _remove_partial(destination)
            raise DownloadError(f"Failed to download {url}: {e}") from e
        except (Timeout, ConnectionError, RequestException) as e:
            _remove_partial(destination)
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download failed for {url}")


def _download_with_progress(
    url: str,
    destination: Path,
    headers: Dict[str, str],
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> Path:
    """Stream one download attempt to destination."""
    logger.debug(f"Downloading from {url}")

    with requests.get(
        url, headers=headers, stream=True, timeout=timeout, allow_redirects=True
    ) as response:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        last_report = time.monotonic()
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

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _remove_partial(destination: Path):
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove partial download {destination}: {e}")
