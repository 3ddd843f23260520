"""snapd REST client: one method per endpoint, decoded into typed models."""
from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants
from ..payloads import build_change_request
from .models import DaemonResponse, InstalledSnap, StoreSnap, decode_find_result, decode_snap_list
from .transport import Transport

logger = logging.getLogger(__name__)


def _quote(name: str) -> str:
    return urllib.parse.quote(name, safe="")


class SnapdClient:
    """Lightweight client for the snapd ``/v2`` API.

    Methods return decoded envelopes or typed models; interpretation of
    status codes beyond decoding is left to the callers that own the policy.
    """

    def __init__(self, transport: Optional[Transport] = None):
        """Initialize the client.

        Args:
            transport: Transport to use (defaults to one bound to Constants.SNAPD_SOCKET).
        """
        self.transport = transport or Transport()
        self.prefix = Constants.SNAPD_API_PREFIX

    def request(self, method: str, path: str, body: Any = None) -> DaemonResponse:
        """Send a request under the API prefix and decode the envelope."""
        data = self.transport.call(method, f"{self.prefix}{path}", body)
        response = DaemonResponse.from_json(data)
        if is_debug_enabled(logger):
            logger.debug(
                "snapd envelope",
                extra=extra_context(
                    event="snapd_response",
                    component="client",
                    action=method,
                    target=path,
                    response_type=response.type,
                    status_code=response.status_code,
                ),
            )
        return response

    def get_change(self, change_id: str) -> DaemonResponse:
        return self.request("GET", f"/changes/{_quote(change_id)}")

    def find(self, name: str) -> DaemonResponse:
        """Query the store catalog for a snap by exact name."""
        return self.request("GET", f"/find?name={_quote(name)}")

    def list_snaps(self) -> DaemonResponse:
        return self.request("GET", "/snaps")

    def get_snap(self, name: str) -> DaemonResponse:
        return self.request("GET", f"/snaps/{_quote(name)}")

    def get_conf(self, name: str, keys: Optional[Sequence[str]] = None) -> DaemonResponse:
        path = f"/snaps/{_quote(name)}/conf"
        if keys:
            path += "?keys=" + ",".join(_quote(k) for k in keys)
        return self.request("GET", path)

    def set_conf(self, name: str, values: Mapping[str, Any]) -> DaemonResponse:
        return self.request("PUT", f"/snaps/{_quote(name)}/conf", dict(values))

    def post_snaps(
        self,
        snaps: List[Optional[str]],
        action: str,
        channel: Optional[str],
        options: Optional[Mapping[str, Any]],
        revision: Optional[str] = None,
    ) -> DaemonResponse:
        """Post a multi-snap change request."""
        body = build_change_request(snaps, action, channel, options, revision)
        logger.info("Requesting snapd %s of %s", action, ", ".join(str(s) for s in snaps) or "(none)")
        return self.request("POST", "/snaps", body)

    @staticmethod
    def decode_store_snaps(response: DaemonResponse) -> List[StoreSnap]:
        return decode_find_result(response.result or [])

    @staticmethod
    def decode_installed(response: DaemonResponse) -> InstalledSnap:
        return InstalledSnap.from_json(response.result)

    @staticmethod
    def decode_installed_list(response: DaemonResponse) -> List[InstalledSnap]:
        return decode_snap_list(response.result)

    @staticmethod
    def decode_conf(response: DaemonResponse) -> Dict[str, Any]:
        return dict(response.result or {})
