"""
Centralized exception hierarchy for setup-inspequte.

Every error raised while resolving, downloading, or caching inspequte
derives from SetupError, so the installer can report any failure through
a single catch at its entry point.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupError(Exception):
    """Base exception for all setup-inspequte errors."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(SetupError):
    """Raised when no release target exists for the host platform/arch pair."""

    def __init__(self, platform: str, arch: str):
        self.platform = platform
        self.arch = arch
        super().__init__(f"Unsupported platform/arch combination: {platform}/{arch}")


# ============================================================================
# Release Resolution Exceptions
# ============================================================================


class ReleaseError(SetupError):
    """Base exception for release lookup and resolution errors."""

    pass


class FetchError(ReleaseError):
    """Raised when the release registry cannot be queried."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        tag: Optional[str] = None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.tag = tag
        super().__init__(message)


class AssetNotFoundError(ReleaseError):
    """Raised when a pinned release has no asset for the install target."""

    def __init__(self, target_triple: str, tag: str):
        self.target_triple = target_triple
        self.tag = tag
        super().__init__(
            f"No downloadable inspequte asset found for {target_triple} in {tag}"
        )


class NoStableReleaseError(ReleaseError):
    """Raised when no stable inspequte release carries an asset for the target."""

    def __init__(self, target_triple: str):
        self.target_triple = target_triple
        super().__init__(
            f"No stable inspequte release includes an asset for {target_triple}"
        )


# ============================================================================
# Tool Cache Exceptions
# ============================================================================


class ToolCacheError(SetupError):
    """Base exception for tool cache operations."""

    pass


class DownloadError(ToolCacheError):
    """Raised when an archive download fails."""

    pass


class ArchiveExtractionError(ToolCacheError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass
