"""
Tool cache collaborator for setup-inspequte.

The installer consumes the tool cache only through the ToolCache interface,
so it can be replaced by an in-memory fake in tests. LocalToolCache is the
filesystem implementation, laid out the way GitHub runners lay out their
hosted tool cache:

    <cache_root>/
        inspequte/
            0.16.0/
                x64/            : extracted release tree
                x64.complete    : marker written once the tree is fully copied
        .locks/                 : per-entry lock files

Entries without a .complete marker are treated as missing.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Union

from filelock import FileLock, Timeout

from setup_inspequte.core.download import DownloadProgress, download_file
from setup_inspequte.core.exceptions import ToolCacheError
from setup_inspequte.core.filesystem import (
    extract_tar,
    extract_zip,
    recursive_copy,
    safe_rmtree,
)

logger = logging.getLogger(__name__)


class ToolCache(ABC):
    """
    Interface to a persistent cache of installed tools.

    Paths returned by implementations are absolute. `find` returns an
    empty string on a miss, mirroring the runner's own tool cache.
    """

    @abstractmethod
    def find(self, tool_name: str, version: str, arch: str) -> str:
        """Return the cached install path, or '' when not cached."""
        pass

    @abstractmethod
    def download_tool(self, url: str) -> Path:
        """Download url to a fresh temporary file and return its path."""
        pass

    @abstractmethod
    def extract_tar(self, archive_path: Path) -> Path:
        """Extract a tarball into a fresh directory and return it."""
        pass

    @abstractmethod
    def extract_zip(self, archive_path: Path) -> Path:
        """Extract a zip archive into a fresh directory and return it."""
        pass

    @abstractmethod
    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str
    ) -> Path:
        """Copy source_dir into the cache and return the cached path."""
        pass


class LocalToolCache(ToolCache):
    """
    Filesystem-backed tool cache.

    Example:
        >>> cache = LocalToolCache(Path("/opt/hostedtoolcache"), Path("/tmp/runner"))
        >>> cache.find("inspequte", "0.16.0", "x64")
        ''
    """

    def __init__(
        self,
        cache_root: Path,
        temp_root: Path,
        timeout: int = 30,
        download_retries: int = 3,
        lock_timeout: int = 300,
        download_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize local tool cache.

        Args:
            cache_root: Root of the persistent tool cache
            temp_root: Directory for downloads and extraction scratch space
            timeout: Per-request download timeout in seconds
            download_retries: Attempts per download
            lock_timeout: Seconds to wait for another process caching the same entry
            download_headers: Extra headers sent with archive downloads
        """
        self.cache_root = Path(cache_root)
        self.temp_root = Path(temp_root)
        self.timeout = timeout
        self.download_retries = download_retries
        self.lock_timeout = lock_timeout
        self.download_headers = download_headers or {}

    def _entry_path(self, tool_name: str, version: str, arch: str) -> Path:
        return self.cache_root / tool_name / version / arch

    def _marker_path(self, tool_name: str, version: str, arch: str) -> Path:
        return self.cache_root / tool_name / version / f"{arch}.complete"

    def _scratch_path(self) -> Path:
        return self.temp_root / str(uuid.uuid4())

    def find(self, tool_name: str, version: str, arch: str) -> str:
        if not tool_name:
            raise ToolCacheError("Tool name cannot be empty")
        if not version:
            raise ToolCacheError("Version cannot be empty")

        entry = self._entry_path(tool_name, version, arch)
        if entry.is_dir() and self._marker_path(tool_name, version, arch).exists():
            logger.debug(f"Found {tool_name} {version} ({arch}) in tool cache: {entry}")
            return str(entry.resolve())

        logger.debug(f"{tool_name} {version} ({arch}) not found in tool cache")
        return ""

    def download_tool(self, url: str) -> Path:
        destination = self._scratch_path()
        return download_file(
            url,
            destination,
            headers=self.download_headers,
            progress_callback=self._log_progress,
            timeout=self.timeout,
            max_retries=self.download_retries,
        )

    def _log_progress(self, progress: DownloadProgress):
        logger.debug(f"Downloaded {progress}")

    def extract_tar(self, archive_path: Path) -> Path:
        destination = self._scratch_path()
        logger.debug(f"Extracting {archive_path} to {destination}")
        return extract_tar(archive_path, destination)

    def extract_zip(self, archive_path: Path) -> Path:
        destination = self._scratch_path()
        logger.debug(f"Extracting {archive_path} to {destination}")
        return extract_zip(archive_path, destination)

    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str
    ) -> Path:
        """
        Copy an extracted tree into the cache.

        Any previous (possibly partial) entry for the same key is replaced.
        The completion marker is written last, so a crash mid-copy leaves
        an entry that find() ignores.

        Raises:
            ToolCacheError: If source_dir is not a directory or the entry
                lock cannot be acquired
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise ToolCacheError(f"Source is not a directory: {source_dir}")

        entry = self._entry_path(tool_name, version, arch)
        marker = self._marker_path(tool_name, version, arch)

        with self._entry_lock(tool_name, version, arch):
            logger.debug(f"Caching {tool_name} {version} ({arch}) from {source_dir}")
            marker.unlink(missing_ok=True)
            safe_rmtree(entry, require_prefix=self.cache_root)
            entry.mkdir(parents=True, exist_ok=True)

            recursive_copy(source_dir, entry)
            marker.touch()

        return entry.resolve()

    @contextmanager
    def _entry_lock(self, tool_name: str, version: str, arch: str):
        """
        Hold an exclusive lock on one cache entry.

        Raises:
            ToolCacheError: If lock cannot be acquired within lock_timeout
        """
        lock_dir = self.cache_root / ".locks"
        lock_dir.mkdir(parents=True, exist_ok=True)
        safe_id = f"{tool_name}-{version}-{arch}".replace("/", "-").replace("\\", "-")
        lock_path = lock_dir / f"{safe_id}.lock"

        try:
            with FileLock(lock_path, timeout=self.lock_timeout):
                logger.debug(f"Acquired tool cache lock: {lock_path}")
                yield
            logger.debug(f"Released tool cache lock: {lock_path}")
        except Timeout as e:
            raise ToolCacheError(
                f"Could not acquire tool cache lock for {safe_id} after "
                f"{self.lock_timeout}s. Another process may be caching this tool."
            ) from e


def create_tool_cache(
    cache_root: Union[str, Path],
    temp_root: Union[str, Path],
    **kwargs,
) -> LocalToolCache:
    """Build a LocalToolCache, creating its directories."""
    cache_root = Path(cache_root).expanduser()
    temp_root = Path(temp_root).expanduser()
    cache_root.mkdir(parents=True, exist_ok=True)
    temp_root.mkdir(parents=True, exist_ok=True)
    return LocalToolCache(cache_root, temp_root, **kwargs)


__all__ = [
    "ToolCache",
    "LocalToolCache",
    "create_tool_cache",
]
