"""
Release resolution for inspequte.

Maps the host to an install target, normalizes version requests, fetches
release metadata, and picks the asset to download.
"""

from .target import (
    ArchiveKind,
    InstallTarget,
    resolve_install_target,
    get_supported_targets,
)

from .version import (
    normalize_version_input,
    to_cache_version,
)

from .models import (
    Release,
    ReleaseAsset,
    ResolvedAsset,
)

from .fetcher import ReleaseFetcher

from .resolver import (
    find_release_asset,
    is_cli_release,
    resolve_release_asset,
)

__all__ = [
    "ArchiveKind",
    "InstallTarget",
    "resolve_install_target",
    "get_supported_targets",
    "normalize_version_input",
    "to_cache_version",
    "Release",
    "ReleaseAsset",
    "ResolvedAsset",
    "ReleaseFetcher",
    "find_release_asset",
    "is_cli_release",
    "resolve_release_asset",
]
