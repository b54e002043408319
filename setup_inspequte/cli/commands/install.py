"""
Install command implementation.

Runs the action: resolves the requested inspequte release, installs it
through the tool cache, and exposes it to later workflow steps.
"""

import logging

from setup_inspequte.installer import run as run_install
from setup_inspequte.runner import ActionsRunner

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the step was marked failed)
    """
    runner = ActionsRunner()
    outcome = run_install(args.tool_version, runner=runner, config_file=args.config)

    if not outcome.succeeded:
        return 1

    source = "tool cache" if outcome.from_cache else "download"
    logger.info(f"inspequte {outcome.tag_name} ready at {outcome.tool_path} ({source})")
    return 0
