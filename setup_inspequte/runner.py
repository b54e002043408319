"""
Host-runner I/O for GitHub Actions.

Reads action inputs from INPUT_* variables, writes outputs and PATH
additions to the files named by GITHUB_OUTPUT and GITHUB_PATH, and reports
failures with workflow commands (::error::).

Outside a runner (no GITHUB_OUTPUT/GITHUB_PATH) outputs fall back to
workflow commands on stdout and PATH changes apply to this process only.
"""

import logging
import os
import sys
import uuid
from pathlib import Path
from typing import MutableMapping, Optional, TextIO, Union

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsRunner:
    """
    GitHub Actions runner adapter.

    Attributes:
        failed: True once set_failed() has been called
        failure_message: Message passed to set_failed()
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.stdout = stdout
        self.failed = False
        self.failure_message: Optional[str] = None

    def _write_command(self, line: str):
        stream = self.stdout or sys.stdout
        stream.write(line + os.linesep)
        stream.flush()

    def get_input(self, name: str) -> str:
        """Value of an action input, stripped; '' when not provided."""
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.environ.get(key, "").strip()

    def set_output(self, name: str, value: str):
        """Set an action output."""
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            self._write_command(
                f"::set-output name={_escape_property(name)}::{_escape_data(value)}"
            )
        logger.debug(f"Set output {name}={value}")

    def add_path(self, path: Union[str, Path]):
        """Prepend path to PATH for this process and later workflow steps."""
        path = str(path)
        path_file = self.environ.get("GITHUB_PATH")
        if path_file:
            with open(path_file, "a", encoding="utf-8") as f:
                f.write(f"{path}\n")

        current = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{path}{os.pathsep}{current}" if current else path
        logger.debug(f"Added {path} to PATH")

    def set_failed(self, message: str):
        """Mark the step as failed with a user-visible error message."""
        self.failed = True
        self.failure_message = message
        self._write_command(f"::error::{_escape_data(message)}")

    def info(self, message: str):
        logger.info(message)


__all__ = ["ActionsRunner"]
