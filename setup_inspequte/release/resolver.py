"""
Release asset resolution.

Turns a version request and an install target into the tag and download
URL of the asset to install. Two modes:

- Pinned: a non-empty version request is normalized to a tag and that one
  release is fetched.
- Latest: the release list is scanned newest first, skipping drafts,
  prereleases, and releases of other artifacts hosted in the same
  repository.
"""

import logging
from typing import Optional

from setup_inspequte.core.exceptions import AssetNotFoundError, NoStableReleaseError
from setup_inspequte.release.constants import RELEASE_TAG_PREFIX
from setup_inspequte.release.fetcher import ReleaseFetcher
from setup_inspequte.release.models import Release, ReleaseAsset, ResolvedAsset
from setup_inspequte.release.target import InstallTarget
from setup_inspequte.release.version import normalize_version_input

logger = logging.getLogger(__name__)


def _has_cli_release_prefix(value: Optional[str]) -> bool:
    return value is not None and value.startswith(RELEASE_TAG_PREFIX)


def is_cli_release(release: Release) -> bool:
    """Whether a release belongs to the inspequte CLI itself."""
    return _has_cli_release_prefix(release.tag_name) or _has_cli_release_prefix(
        release.name
    )


def find_release_asset(
    release: Release, target: InstallTarget
) -> Optional[ReleaseAsset]:
    """
    Find the release asset that matches the install target.

    Assets are scanned in registry order; the first one whose name ends with
    '-<triple>.<archive>' for the primary triple or any alias, and which has
    a download URL, wins.
    """
    suffixes = [
        f"-{triple}.{target.archive_kind.value}"
        for triple in target.supported_triples()
    ]
    for asset in release.assets:
        if not asset.name or not asset.browser_download_url:
            continue
        if any(asset.name.endswith(suffix) for suffix in suffixes):
            return asset
    return None


def resolve_release_asset(
    version_input: str,
    target: InstallTarget,
    fetcher: Optional[ReleaseFetcher] = None,
) -> ResolvedAsset:
    """
    Resolve release tag and downloadable asset URL.

    Args:
        version_input: Requested version ('' for the latest stable release)
        target: Install target of the host
        fetcher: Registry client (a default ReleaseFetcher if None)

    Returns:
        ResolvedAsset with tag and download URL

    Raises:
        FetchError: If the registry cannot be queried
        AssetNotFoundError: If the pinned release has no matching asset
        NoStableReleaseError: If no stable release has a matching asset
    """
    if fetcher is None:
        fetcher = ReleaseFetcher()

    if version_input != "":
        return _resolve_pinned(version_input, target, fetcher)
    return _resolve_latest(target, fetcher)


def _resolve_pinned(
    version_input: str, target: InstallTarget, fetcher: ReleaseFetcher
) -> ResolvedAsset:
    normalized_version = normalize_version_input(version_input)
    logger.debug(f"Resolving pinned release {normalized_version}")

    release = fetcher.get_release_by_tag(normalized_version)
    asset = find_release_asset(release, target)
    if not release.tag_name or asset is None:
        raise AssetNotFoundError(target.target_triple, normalized_version)

    return ResolvedAsset(release.tag_name, asset.browser_download_url)


def _resolve_latest(target: InstallTarget, fetcher: ReleaseFetcher) -> ResolvedAsset:
    releases = fetcher.get_releases()
    logger.debug(f"Scanning {len(releases)} releases for {target.target_triple}")

    for release in releases:
        if (
            not release.tag_name
            or release.draft
            or release.prerelease
            or not is_cli_release(release)
        ):
            continue

        asset = find_release_asset(release, target)
        if asset is not None:
            return ResolvedAsset(release.tag_name, asset.browser_download_url)

        logger.debug(
            f"Release {release.tag_name} has no asset for {target.target_triple}"
        )

    raise NoStableReleaseError(target.target_triple)
