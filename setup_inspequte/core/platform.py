"""
Host platform detection for setup-inspequte.

Release targets are keyed by the platform and architecture names the
GitHub Actions runner uses ('linux', 'darwin', 'win32' and 'x64', 'arm64'),
so this module normalizes Python's view of the host into those names.

Usage:
    from setup_inspequte.core.platform import detect_host

    host = detect_host()
    print(f"Running on {host.platform}/{host.arch}")
"""

import functools
import platform
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class HostInfo:
    """
    Host platform information.

    Attributes:
        platform: Runner platform name ('linux', 'darwin', 'win32', ...)
        arch: Runner architecture name ('x64', 'arm64', 'ia32', 'arm', ...)
    """

    platform: str
    arch: str

    def __str__(self) -> str:
        return f"{self.platform}/{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_host() -> HostInfo:
    """
    Detect the current host platform and architecture.

    This function is cached - it only runs detection once per process.

    Returns:
        HostInfo with runner-style platform and architecture names

    Example:
        >>> detect_host()
        HostInfo(platform='linux', arch='x64')
    """
    return HostInfo(platform=_detect_platform(), arch=_detect_architecture())


def _detect_platform() -> str:
    """
    Detect operating system.

    Returns:
        Runner platform name. Unknown systems are returned as reported by
        sys.platform so the target resolver can name them in its error.
    """
    if sys.platform.startswith("linux"):
        return "linux"
    elif sys.platform == "darwin":
        return "darwin"
    elif sys.platform in ("win32", "cygwin"):
        return "win32"
    else:
        return sys.platform


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'ia32', 'arm', or the raw
        machine name for anything else
    """
    machine = platform.machine().lower()

    # Normalize architecture names
    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "ia32"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_host_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host() to re-detect. Used by tests.
    """
    detect_host.cache_clear()


__all__ = [
    "HostInfo",
    "detect_host",
    "clear_host_cache",
]
