"""Synchronous wrapper around the local ``snap`` command line tool.

Used only for local source artifacts, which bypass the daemon's catalog.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from .constants import Constants
from .errors import CliInvocationError, VersionParseError

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"version: (\S+)")


@dataclass
class CliResult:
    """Outcome of one snap CLI invocation."""

    command: List[str]
    exit_status: int
    stdout: str
    stderr: str

    def error(self) -> None:
        """Raise CliInvocationError when the command exited non-zero."""
        if self.exit_status != 0:
            raise CliInvocationError(self.command, self.exit_status, self.stdout, self.stderr)


def parse_version(stdout: str) -> str:
    """Extract the token following ``version:`` from ``snap info`` output."""
    match = VERSION_PATTERN.search(stdout)
    if not match:
        raise VersionParseError(stdout)
    return match.group(1)


class SnapCli:
    """Run ``snap`` subcommands and capture their output."""

    def __init__(self, binary: Optional[str] = None, timeout: Optional[int] = None):
        self.binary = binary or Constants.SNAP_BINARY
        self.timeout = timeout if timeout is not None else Constants.CLI_TIMEOUT

    def run(self, *args: str) -> CliResult:
        command = [self.binary, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CliInvocationError(
                command, -1, "", f"timed out after {self.timeout} seconds"
            ) from exc
        except OSError as exc:
            raise CliInvocationError(command, 127, "", str(exc)) from exc
        logger.debug("%s exited with %s", " ".join(command), result.returncode)
        return CliResult(command, result.returncode, result.stdout or "", result.stderr or "")

    def info(self, path: str) -> str:
        """Return the version of a local snap file."""
        result = self.run("info", path)
        result.error()
        return parse_version(result.stdout)

    def install(self, path: str) -> CliResult:
        """Install a local snap file; raise on a non-zero exit."""
        result = self.run("install", path)
        result.error()
        return result
