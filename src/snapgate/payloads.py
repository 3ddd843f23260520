"""Change request payloads and async response handling."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .constants import ChangeAction, Constants
from .daemon.models import DaemonResponse
from .errors import ProtocolError

VALID_ACTIONS = [action.value for action in ChangeAction]


def build_change_request(
    snaps: List[Optional[str]],
    action: str,
    channel: Optional[str],
    options: Optional[Mapping[str, Any]],
    revision: Optional[str] = None,
) -> Dict[str, Any]:
    """Construct the JSON payload posted to ``/v2/snaps``.

    Combinations are not checked here: snapd rejects invalid requests and that
    rejection is handed to the caller verbatim.

    Args:
        snaps: Identifiers to act on, passed through unchanged.
        action: One of install, refresh, remove, revert, enable, disable, switch.
        channel: Release channel, ex. stable. Only sent for install, refresh and switch.
        options: Caller supplied options; classic, devmode, jailmode and
            ignore-validation are sent when truthy.
        revision: Optional revision to target.

    Returns:
        Dict ready to be JSON encoded.
    """
    if action not in VALID_ACTIONS:
        raise ValueError(f"Unsupported snap action: {action}")
    options = options or {}
    request: Dict[str, Any] = {
        "action": action,
        "snaps": list(snaps),
    }
    if action in Constants.CHANNEL_ACTIONS:
        request["channel"] = channel
    for flag in Constants.FLAG_OPTIONS:
        if options.get(flag):
            request[flag] = True
    if revision is not None:
        request["revision"] = revision
    return request


def extract_change_id(response: DaemonResponse) -> str:
    """Return the change id of an async response.

    Raises:
        DaemonError: if the daemon answered with an error-typed response.
        ProtocolError: if a non-error response carries no change id.
    """
    response.raise_for_error()
    if not response.change:
        raise ProtocolError(
            f"snapd response of type {response.type!r} carries no change id"
        )
    return response.change
