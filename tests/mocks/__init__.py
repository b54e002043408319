"""
Test doubles for setup-inspequte components.

Provides an in-memory tool cache and builders for release API payloads,
so the installer can be tested without network or filesystem access.
"""

from .tool_cache import FakeToolCache
from .registry import (
    API_URL,
    RELEASES_URL,
    asset_json,
    cli_asset_name,
    release_by_tag_url,
    release_json,
)

__all__ = [
    "FakeToolCache",
    "API_URL",
    "RELEASES_URL",
    "asset_json",
    "cli_asset_name",
    "release_by_tag_url",
    "release_json",
]
