"""Install/upgrade/remove orchestration.

An invocation moves through Resolving, Requesting and Tracking to Done or
Failed. Work is expressed as an Operation with two variants: DaemonChange
posts a change to snapd and tracks it, LocalInstall runs ``snap install`` on a
local artifact synchronously. The state machine below is written once
against that abstraction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .constants import ChangeAction
from .daemon.changes import ChangeTracker
from .daemon.client import SnapdClient
from .daemon.models import Change, InstalledSnap
from .payloads import extract_change_id
from .snap_cli import CliResult, SnapCli
from .versioning.models import PackageSpec
from .versioning.resolver import VersionResolver

logger = logging.getLogger(__name__)


class CoordinatorState(Enum):
    """Lifecycle of one coordinator invocation."""

    IDLE = "idle"
    RESOLVING = "resolving"
    REQUESTING = "requesting"
    TRACKING = "tracking"
    DONE = "done"
    FAILED = "failed"


StateCallback = Callable[[CoordinatorState], None]


@dataclass
class OperationResult:
    """Outcome of a completed operation."""

    action: str
    names: List[str]
    change: Optional[Change] = None
    cli_result: Optional[CliResult] = None


class Operation:
    """Base class for a unit of work the coordinator can run."""

    action: str = ""

    def run(self, on_state: StateCallback) -> OperationResult:
        raise NotImplementedError


class DaemonChange(Operation):
    """Post a change request to snapd and wait for it to finish.

    ``snaps`` is the list posted to the daemon; it defaults to ``names``.
    """

    def __init__(
        self,
        client: SnapdClient,
        tracker: ChangeTracker,
        names: List[str],
        action: str,
        channel: Optional[str],
        options: Optional[Mapping[str, Any]],
        revision: Optional[str] = None,
        snaps: Optional[List[Optional[str]]] = None,
    ):
        self.client = client
        self.tracker = tracker
        self.names = names
        self.action = action
        self.channel = channel
        self.options = options
        self.revision = revision
        self.snaps = list(names) if snaps is None else snaps

    def run(self, on_state: StateCallback) -> OperationResult:
        on_state(CoordinatorState.REQUESTING)
        response = self.client.post_snaps(
            self.snaps, self.action, self.channel, self.options, self.revision
        )
        change_id = extract_change_id(response)
        on_state(CoordinatorState.TRACKING)
        change = self.tracker.wait(change_id)
        return OperationResult(action=self.action, names=list(self.names), change=change)


class LocalInstall(Operation):
    """Install a local snap artifact through the snap CLI."""

    action = ChangeAction.INSTALL.value

    def __init__(self, snap_cli: SnapCli, source: str, names: List[str]):
        self.snap_cli = snap_cli
        self.source = source
        self.names = names

    def run(self, on_state: StateCallback) -> OperationResult:
        result = self.snap_cli.install(self.source)
        logger.info("Installed %s from %s", ", ".join(self.names), self.source)
        return OperationResult(action=self.action, names=list(self.names), cli_result=result)


class OperationCoordinator:
    """Drive install, upgrade, remove and purge for one PackageSpec.

    A coordinator, and the resolver it owns, is built fresh for each provider
    invocation so memoized versions never leak between runs.
    """

    def __init__(
        self,
        spec: PackageSpec,
        client: Optional[SnapdClient] = None,
        snap_cli: Optional[SnapCli] = None,
        tracker: Optional[ChangeTracker] = None,
        resolver: Optional[VersionResolver] = None,
        revision: Optional[str] = None,
    ):
        """Initialize the coordinator.

        Args:
            spec: Desired packages, channel, options and optional local source.
            client: Daemon client (defaults to one on the standard socket).
            snap_cli: Local snap CLI wrapper.
            tracker: Change tracker (defaults to one with the configured polling).
            resolver: Version resolver (defaults to a fresh one for ``spec``).
            revision: Optional revision sent with daemon change requests.
        """
        self.spec = spec
        self.client = client or SnapdClient()
        self.snap_cli = snap_cli or SnapCli()
        self.tracker = tracker or ChangeTracker(self.client)
        self.resolver = resolver or VersionResolver(spec, self.client, self.snap_cli)
        self.revision = revision
        self.state = CoordinatorState.IDLE

    def _set_state(self, state: CoordinatorState) -> None:
        logger.debug("Coordinator %s -> %s", self.state.value, state.value)
        self.state = state

    # Host-facing state queries

    def load_current_versions(self) -> List[Optional[str]]:
        """Installed version per index, None where not installed."""
        return self.resolver.installed_versions()

    def candidate_versions(self) -> List[Optional[str]]:
        """Available version per index, from the store or the local source."""
        return self.resolver.available_versions()

    # Actions

    def install(self, names: Optional[Sequence[Optional[str]]] = None) -> OperationResult:
        return self._apply(ChangeAction.INSTALL.value, names, self.resolver.available_version)

    def upgrade(self, names: Optional[Sequence[Optional[str]]] = None) -> OperationResult:
        return self._apply(ChangeAction.REFRESH.value, names, self.resolver.available_version)

    def remove(self, names: Optional[Sequence[Optional[str]]] = None) -> OperationResult:
        return self._apply(ChangeAction.REMOVE.value, names, self.resolver.installed_version)

    purge = remove

    def _apply(
        self,
        action: str,
        names: Optional[Sequence[Optional[str]]],
        resolve: Callable[[int], Optional[str]],
    ) -> OperationResult:
        targets = list(self.spec.names if names is None else names)
        if len(targets) != len(self.spec):
            raise ValueError(
                f"{len(targets)} names given for {len(self.spec)} managed packages"
            )
        try:
            operation = self._plan(action, targets, resolve)
            result = operation.run(self._set_state)
        except Exception:
            self._set_state(CoordinatorState.FAILED)
            raise
        self._set_state(CoordinatorState.DONE)
        return result

    def _plan(
        self,
        action: str,
        targets: List[Optional[str]],
        resolve: Callable[[int], Optional[str]],
    ) -> Operation:
        selected = [name for name in targets if name is not None]
        if self.spec.source and action != ChangeAction.REMOVE.value:
            return LocalInstall(self.snap_cli, self.spec.source, selected)

        self._set_state(CoordinatorState.RESOLVING)
        resolved: List[Optional[str]] = []
        for i, name in enumerate(targets):
            if name is None:
                continue
            version = resolve(i)
            # Absent versions are posted as-is; snapd rejects or no-ops them
            logger.info("%s %s (resolved version: %s)", action, name, version or "absent")
            resolved.append(version)
        return DaemonChange(
            self.client,
            self.tracker,
            selected,
            action,
            self.spec.channel,
            self.spec.options,
            self.revision,
            snaps=resolved,
        )

    # Snap configuration

    def installed_snaps(self) -> List[InstalledSnap]:
        response = self.client.list_snaps()
        response.raise_for_error()
        return self.client.decode_installed_list(response)

    def get_conf(self, name: str, keys: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        response = self.client.get_conf(name, keys)
        response.raise_for_error()
        return self.client.decode_conf(response)

    def set_conf(self, name: str, values: Mapping[str, Any]) -> Change:
        """Apply configuration and wait for the resulting change."""
        response = self.client.set_conf(name, values)
        change_id = extract_change_id(response)
        return self.tracker.wait(change_id)

