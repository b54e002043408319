"""
Install orchestration for inspequte.

Sequences target resolution, release resolution, the tool cache lookup and,
on a cache miss, download, extraction and caching. The installer never
touches runner state itself: it returns a SetupOutcome, and run() translates
that outcome into runner outputs, PATH changes, or a failure status.

Usage:
    from setup_inspequte.installer import InspequteInstaller

    installer = InspequteInstaller(tool_cache, ReleaseFetcher())
    outcome = installer.install("0.16.0")
    if outcome.succeeded:
        print(outcome.tool_path)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from setup_inspequte.config import SetupSettings, load_settings
from setup_inspequte.core.exceptions import SetupError
from setup_inspequte.core.platform import detect_host
from setup_inspequte.core.tool_cache import ToolCache, create_tool_cache
from setup_inspequte.release.constants import TOOL_NAME
from setup_inspequte.release.fetcher import ReleaseFetcher
from setup_inspequte.release.models import ResolvedAsset
from setup_inspequte.release.resolver import resolve_release_asset
from setup_inspequte.release.target import (
    ArchiveKind,
    InstallTarget,
    resolve_install_target,
)
from setup_inspequte.release.version import to_cache_version
from setup_inspequte.runner import ActionsRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetupOutcome:
    """
    Result of one install attempt.

    Either tag_name and tool_path are set (success) or error is set
    (failure), never both.
    """

    tag_name: Optional[str] = None
    tool_path: Optional[Path] = None
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, tag_name: str, tool_path: Path, from_cache: bool = False):
        return cls(tag_name=tag_name, tool_path=Path(tool_path), from_cache=from_cache)

    @classmethod
    def failure(cls, message: str):
        return cls(error=message)


class InspequteInstaller:
    """Resolve, download and cache inspequte for one host."""

    def __init__(
        self,
        tool_cache: ToolCache,
        fetcher: Optional[ReleaseFetcher] = None,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
    ):
        """
        Initialize installer.

        Args:
            tool_cache: Tool cache collaborator
            fetcher: Registry client (default ReleaseFetcher if None)
            platform: Runner platform name (detected if None)
            arch: Runner architecture name (detected if None)
        """
        host = detect_host() if platform is None or arch is None else None
        self.tool_cache = tool_cache
        self.fetcher = fetcher or ReleaseFetcher()
        self.platform = platform if platform is not None else host.platform
        self.arch = arch if arch is not None else host.arch

    def resolve_only(
        self, version_input: str
    ) -> Tuple[InstallTarget, ResolvedAsset, str]:
        """
        Resolve what would be installed, without touching the tool cache.

        Returns:
            (install target, resolved asset, cache version)

        Raises:
            SetupError: If the platform is unsupported or resolution fails
        """
        target = resolve_install_target(self.platform, self.arch)
        resolved = resolve_release_asset(version_input, target, self.fetcher)
        return target, resolved, to_cache_version(resolved.tag_name)

    def install(self, version_input: str) -> SetupOutcome:
        """
        Install the requested version, reusing the tool cache when possible.

        Args:
            version_input: Requested version ('' for the latest stable release)

        Returns:
            SetupOutcome; failures are reported in the outcome, not raised
        """
        try:
            return self._install(version_input)
        except Exception as e:
            logger.debug("Install failed", exc_info=True)
            return SetupOutcome.failure(str(e))

    def _install(self, version_input: str) -> SetupOutcome:
        target, resolved, cache_version = self.resolve_only(version_input)

        logger.info(
            f"Setting up {TOOL_NAME} {resolved.tag_name} for {target.target_triple}"
        )

        cached_path = self.tool_cache.find(TOOL_NAME, cache_version, self.arch)
        if cached_path:
            logger.info(f"Using cached {TOOL_NAME} at {cached_path}")
            return SetupOutcome.success(resolved.tag_name, cached_path, from_cache=True)

        logger.info(f"Downloading {TOOL_NAME} from {resolved.download_url}")
        archive_path = self.tool_cache.download_tool(resolved.download_url)

        if target.archive_kind is ArchiveKind.TARBALL:
            extracted_path = self.tool_cache.extract_tar(archive_path)
        else:
            extracted_path = self.tool_cache.extract_zip(archive_path)

        tool_path = self.tool_cache.cache_dir(
            extracted_path, TOOL_NAME, cache_version, self.arch
        )
        return SetupOutcome.success(resolved.tag_name, tool_path)


def apply_outcome(outcome: SetupOutcome, runner: ActionsRunner) -> None:
    """Translate an outcome into runner PATH/output changes or a failure."""
    if outcome.succeeded:
        runner.add_path(outcome.tool_path)
        runner.set_output("version", outcome.tag_name)
        runner.info(
            f"{TOOL_NAME} {outcome.tag_name} is available at {outcome.tool_path}"
        )
    else:
        runner.set_failed(outcome.error)


def build_installer(settings: SetupSettings) -> InspequteInstaller:
    """Create an installer wired to the local tool cache and GitHub API."""
    tool_cache = create_tool_cache(
        settings.tool_cache_dir,
        settings.temp_dir,
        timeout=settings.timeout,
        download_retries=settings.download_retries,
    )
    fetcher = ReleaseFetcher(
        api_url=settings.api_url, token=settings.token, timeout=settings.timeout
    )
    return InspequteInstaller(tool_cache, fetcher)


def run(
    version_input: Optional[str] = None,
    runner: Optional[ActionsRunner] = None,
    installer: Optional[InspequteInstaller] = None,
    settings: Optional[SetupSettings] = None,
    config_file: Optional[Path] = None,
) -> SetupOutcome:
    """
    Action entry point.

    Args:
        version_input: Requested version; read from the 'version' input if None
        runner: Runner adapter (a default ActionsRunner if None)
        installer: Installer to use (built from settings if None)
        settings: Settings used to build the installer (loaded if None)
        config_file: YAML file to load settings from when settings is None

    Returns:
        The SetupOutcome, already applied to the runner
    """
    if runner is None:
        runner = ActionsRunner()
    if version_input is None:
        version_input = runner.get_input("version")

    if installer is None:
        try:
            if settings is None:
                settings = load_settings(config_file)
            logger.debug(
                f"Tool cache: {settings.tool_cache_dir}, temp: {settings.temp_dir}"
            )
            installer = build_installer(settings)
        except (SetupError, OSError) as e:
            outcome = SetupOutcome.failure(str(e))
            apply_outcome(outcome, runner)
            return outcome

    outcome = installer.install(version_input)
    apply_outcome(outcome, runner)
    return outcome
