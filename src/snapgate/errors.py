"""Exception taxonomy for daemon, change and local CLI failures.

Every error is fatal to the single operation in progress. Nothing in the core
retries; callers decide what to do with the structured detail carried here.
"""

from __future__ import annotations

from typing import Any, List, Optional


class SnapError(Exception):
    """Base class for all snapgate failures."""


class ProtocolError(SnapError):
    """Socket unreachable, malformed response framing, or unparsable body."""


class DaemonError(SnapError):
    """The daemon answered with an error-typed response."""

    def __init__(
        self,
        status: Optional[str],
        kind: Optional[str],
        message: Optional[str],
        status_code: Optional[int] = None,
    ):
        self.status = status
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(f"status: {status}, kind: {kind}, message: {message}")


class PackageNotFound(SnapError):
    """A ``find`` query for a package returned a non-success status code."""

    def __init__(self, name: str, detail: Any):
        self.name = name
        self.detail = detail
        super().__init__(f"Package {name} not found: {detail}")


class VersionParseError(SnapError):
    """Local ``snap info`` output carried no ``version:`` label."""

    def __init__(self, output: str):
        self.output = output
        super().__init__("No version found in snap info output")


class OperationFailed(SnapError):
    """A change reached Abort, Hold or Error."""

    def __init__(self, status: str, detail: Any):
        self.status = status
        self.detail = detail
        super().__init__(f"Change finished with status {status}: {detail}")


class OperationTimeout(SnapError):
    """A change never reached a terminal status within the attempt ceiling."""

    def __init__(self, attempts: int, change_id: Optional[str] = None):
        self.attempts = attempts
        self.change_id = change_id
        super().__init__(f"Snap operation timed out after {attempts} attempts.")


class CliInvocationError(SnapError):
    """The local snap CLI exited with a non-zero status."""

    def __init__(self, command: List[str], exit_status: int, stdout: str, stderr: str):
        self.command = list(command)
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"{' '.join(self.command)} exited with status {exit_status}: {stderr.strip()}"
        )
