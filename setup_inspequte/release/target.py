"""
Install target resolution.

Maps a runner platform/architecture pair to the target triples used in
inspequte release asset names and to the archive format of those assets.

Usage:
    from setup_inspequte.release.target import resolve_install_target

    target = resolve_install_target("linux", "x64")
    print(target.target_triple)   # x86_64-unknown-linux-gnu
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from setup_inspequte.core.exceptions import UnsupportedPlatformError


class ArchiveKind(str, Enum):
    """Archive format of a release asset; the value is its file extension."""

    TARBALL = "tar.gz"
    ZIP = "zip"


@dataclass(frozen=True)
class InstallTarget:
    """
    Release asset target for one host.

    Attributes:
        target_triple: Canonical triple (e.g. 'x86_64-unknown-linux-gnu')
        target_triple_aliases: Alternate spellings of the same target, in
            priority order (e.g. 'amd64-unknown-linux-gnu')
        archive_kind: Format of the release archive
    """

    target_triple: str
    target_triple_aliases: Tuple[str, ...]
    archive_kind: ArchiveKind

    def supported_triples(self) -> Tuple[str, ...]:
        """Primary triple followed by its aliases."""
        return (self.target_triple, *self.target_triple_aliases)


_TARGETS: Dict[Tuple[str, str], InstallTarget] = {
    ("linux", "x64"): InstallTarget(
        "x86_64-unknown-linux-gnu", ("amd64-unknown-linux-gnu",), ArchiveKind.TARBALL
    ),
    ("linux", "arm64"): InstallTarget(
        "aarch64-unknown-linux-gnu", ("arm64-unknown-linux-gnu",), ArchiveKind.TARBALL
    ),
    ("darwin", "arm64"): InstallTarget(
        "aarch64-apple-darwin", ("arm64-apple-darwin",), ArchiveKind.TARBALL
    ),
    ("darwin", "x64"): InstallTarget(
        "x86_64-apple-darwin", ("amd64-apple-darwin",), ArchiveKind.TARBALL
    ),
    ("win32", "x64"): InstallTarget(
        "x86_64-pc-windows-msvc", ("amd64-pc-windows-msvc",), ArchiveKind.ZIP
    ),
}


def resolve_install_target(platform: str, arch: str) -> InstallTarget:
    """
    Resolve release asset details for a runner platform.

    Args:
        platform: Runner platform name ('linux', 'darwin', 'win32')
        arch: Runner architecture name ('x64', 'arm64')

    Returns:
        InstallTarget for the pair

    Raises:
        UnsupportedPlatformError: If no release is published for the pair

    Example:
        >>> resolve_install_target("win32", "x64").archive_kind
        <ArchiveKind.ZIP: 'zip'>
    """
    try:
        return _TARGETS[(platform, arch)]
    except KeyError:
        raise UnsupportedPlatformError(platform, arch) from None


def get_supported_targets() -> List[Tuple[str, str, InstallTarget]]:
    """List (platform, arch, target) for every supported pair."""
    return [(platform, arch, target) for (platform, arch), target in _TARGETS.items()]
