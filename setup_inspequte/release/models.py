"""
Release metadata models.

Registry responses are untrusted and may be partial: every field sourced
from the registry is optional, and presence is checked only where a value
is actually used (the tag and the download URL).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    return value if isinstance(value, bool) else None


@dataclass(frozen=True)
class ReleaseAsset:
    """One downloadable file attached to a release."""

    name: Optional[str] = None
    browser_download_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ReleaseAsset":
        if not isinstance(data, dict):
            return cls()
        return cls(
            name=_optional_str(data, "name"),
            browser_download_url=_optional_str(data, "browser_download_url"),
        )


@dataclass(frozen=True)
class Release:
    """
    A published release in the registry.

    Attributes:
        tag_name: Git tag of the release (e.g. 'inspequte-v0.16.0')
        name: Display name
        draft: Whether the release is an unpublished draft
        prerelease: Whether the release is marked as a prerelease
        assets: Attached files, in registry order
    """

    tag_name: Optional[str] = None
    name: Optional[str] = None
    draft: Optional[bool] = None
    prerelease: Optional[bool] = None
    assets: Tuple[ReleaseAsset, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> "Release":
        """
        Build a Release from a registry JSON object.

        Unknown fields are ignored; missing or mistyped fields become None.
        """
        if not isinstance(data, dict):
            return cls()

        raw_assets = data.get("assets")
        assets = (
            tuple(ReleaseAsset.from_dict(a) for a in raw_assets)
            if isinstance(raw_assets, list)
            else ()
        )
        return cls(
            tag_name=_optional_str(data, "tag_name"),
            name=_optional_str(data, "name"),
            draft=_optional_bool(data, "draft"),
            prerelease=_optional_bool(data, "prerelease"),
            assets=assets,
        )


@dataclass(frozen=True)
class ResolvedAsset:
    """Release tag and download URL of the asset to install."""

    tag_name: str
    download_url: str

    def __post_init__(self):
        if not self.tag_name or not self.download_url:
            raise ValueError("ResolvedAsset requires a tag and a download URL")
