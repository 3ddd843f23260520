"""Per-package available and installed version resolution.

A resolver lives for one provider invocation. Both lookups are memoized by
package index, so computing the desired state and later confirming it never
re-queries the daemon or the snap CLI.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants
from ..daemon.client import SnapdClient
from ..errors import PackageNotFound
from ..snap_cli import SnapCli
from .models import PackageSpec

logger = logging.getLogger(__name__)


class VersionResolver:
    """Resolve versions for the packages of one PackageSpec."""

    def __init__(self, spec: PackageSpec, client: SnapdClient, snap_cli: Optional[SnapCli] = None):
        """Initialize the resolver.

        Args:
            spec: Packages being managed.
            client: Daemon client used for store and installed lookups.
            snap_cli: Local CLI used when ``spec.source`` is set.
        """
        self.spec = spec
        self.client = client
        self.snap_cli = snap_cli or SnapCli()
        self._available: Dict[int, Optional[str]] = {}
        self._installed: Dict[int, Optional[str]] = {}
        self._source_version: Optional[str] = None

    def available_version(self, index: int) -> Optional[str]:
        """Version the store (or the local source artifact) offers for package ``index``."""
        if index not in self._available:
            name = self.spec.names[index]
            if self.spec.source:
                self._available[index] = self._version_from_source()
            elif name is None:
                self._available[index] = None
            else:
                self._available[index] = self._latest_store_version(name)
        return self._available[index]

    def installed_version(self, index: int) -> Optional[str]:
        """Version currently installed for package ``index``; None when not installed."""
        if index not in self._installed:
            name = self.spec.names[index]
            self._installed[index] = (
                None if name is None else self._installed_version_by_name(name)
            )
        return self._installed[index]

    def available_versions(self) -> List[Optional[str]]:
        return [self.available_version(i) for i in range(len(self.spec))]

    def installed_versions(self) -> List[Optional[str]]:
        return [self.installed_version(i) for i in range(len(self.spec))]

    def _version_from_source(self) -> str:
        # Every index shares the single source artifact
        if self._source_version is None:
            self._source_version = self.snap_cli.info(self.spec.source)
            logger.debug("Local snap %s has version %s", self.spec.source, self._source_version)
        return self._source_version

    def _latest_store_version(self, name: str) -> Optional[str]:
        response = self.client.find(name)
        if response.status_code != 200:
            raise PackageNotFound(name, response.result)
        snaps = self.client.decode_store_snaps(response)
        if not snaps:
            return None
        version = snaps[0].channel_version(self.spec.channel, Constants.DEFAULT_TRACK)
        if is_debug_enabled(logger):
            logger.debug(
                "Store version resolved",
                extra=extra_context(
                    event="version_resolved",
                    component="version_resolver",
                    target=name,
                    channel=self.spec.channel,
                    version=version,
                ),
            )
        return version

    def _installed_version_by_name(self, name: str) -> Optional[str]:
        response = self.client.get_snap(name)
        if response.is_not_found:
            return None
        response.raise_for_error()
        return self.client.decode_installed(response).version
