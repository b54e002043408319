"""
Core functionality for setup-inspequte.

This package contains the foundational modules the release resolver and
installer depend on: exceptions, host detection, downloads, extraction,
and the tool cache.
"""

from .platform import (
    HostInfo,
    detect_host,
    clear_host_cache,
)

from .tool_cache import (
    ToolCache,
    LocalToolCache,
    create_tool_cache,
)

from .exceptions import (
    SetupError,
    UnsupportedPlatformError,
    ReleaseError,
    FetchError,
    AssetNotFoundError,
    NoStableReleaseError,
    ToolCacheError,
    DownloadError,
    ArchiveExtractionError,
    InsecureArchiveError,
)

__all__ = [
    "HostInfo",
    "detect_host",
    "clear_host_cache",
    "ToolCache",
    "LocalToolCache",
    "create_tool_cache",
    "SetupError",
    "UnsupportedPlatformError",
    "ReleaseError",
    "FetchError",
    "AssetNotFoundError",
    "NoStableReleaseError",
    "ToolCacheError",
    "DownloadError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
]
