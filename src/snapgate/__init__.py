"""snapgate - converge snap packages through the snapd REST API.

Modules:
- daemon.transport: HTTP/1.0 framing over the snapd Unix socket
- daemon.client: one method per endpoint, typed response models
- daemon.changes: polling state machine for asynchronous changes
- versioning.resolver: memoized available/installed versions per package
- payloads: change request construction and async response handling
- operations: install/upgrade/remove coordination over daemon or local CLI
"""

from .errors import (
    CliInvocationError,
    DaemonError,
    OperationFailed,
    OperationTimeout,
    PackageNotFound,
    ProtocolError,
    SnapError,
    VersionParseError,
)
from .operations import OperationCoordinator, OperationResult
from .versioning.models import PackageSpec

__version__ = "0.1.0"

__all__ = [
    "OperationCoordinator",
    "OperationResult",
    "PackageSpec",
    "SnapError",
    "ProtocolError",
    "DaemonError",
    "PackageNotFound",
    "VersionParseError",
    "OperationFailed",
    "OperationTimeout",
    "CliInvocationError",
]
