"""Conversions between user version input, release tags and cache versions."""

from setup_inspequte.release.constants import TOOL_PREFIX


def normalize_version_input(version_input: str) -> str:
    """
    Normalize a version request into a release tag.

    An empty string means "latest" and is returned unchanged.

    Example:
        >>> normalize_version_input("1.2.3")
        'inspequte-v1.2.3'
        >>> normalize_version_input("v1.2.3")
        'inspequte-v1.2.3'
        >>> normalize_version_input("inspequte-v1.2.3")
        'inspequte-v1.2.3'
    """
    if version_input == "":
        return ""

    if version_input.startswith(TOOL_PREFIX):
        return version_input

    if version_input.startswith("v"):
        return f"{TOOL_PREFIX}{version_input}"
    return f"{TOOL_PREFIX}v{version_input}"


def to_cache_version(release_tag: str) -> str:
    """
    Convert a release tag into the bare version used as a tool cache key.

    Example:
        >>> to_cache_version("inspequte-v1.2.3")
        '1.2.3'
    """
    if release_tag.startswith(TOOL_PREFIX):
        release_tag = release_tag[len(TOOL_PREFIX):]

    return release_tag[1:] if release_tag.startswith("v") else release_tag
