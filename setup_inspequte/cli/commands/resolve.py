"""
Resolve command implementation.

Prints the release asset that 'install' would use, without downloading.
"""

import logging

from setup_inspequte.config import load_settings
from setup_inspequte.core.exceptions import SetupError
from setup_inspequte.installer import build_installer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    installer = build_installer(load_settings(args.config))
    if args.platform:
        installer.platform = args.platform
    if args.arch:
        installer.arch = args.arch

    try:
        target, resolved, cache_version = installer.resolve_only(args.tool_version)
    except SetupError as e:
        logger.error(str(e))
        return 1

    print(f"Tag:           {resolved.tag_name}")
    print(f"Download URL:  {resolved.download_url}")
    print(f"Target triple: {target.target_triple}")
    print(f"Archive:       {target.archive_kind.value}")
    print(f"Cache version: {cache_version}")
    return 0
