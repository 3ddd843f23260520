"""Typed models for snapd responses.

Each endpoint's payload is decoded once, right after the transport hands it
back, so the rest of the package never indexes into raw JSON.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import DaemonError
from .schemas import (
    CHANGE_SCHEMA,
    ERROR_RESULT_SCHEMA,
    FIND_RESULT_SCHEMA,
    RESPONSE_SCHEMA,
    SNAP_LIST_SCHEMA,
    SNAP_SCHEMA,
    validate_response,
)

RESPONSE_TYPE_SYNC = "sync"
RESPONSE_TYPE_ASYNC = "async"
RESPONSE_TYPE_ERROR = "error"


@dataclass
class ErrorResult:
    """Body of an error-typed response."""
    kind: Optional[str]
    message: Optional[str]

    @classmethod
    def from_json(cls, data: Any) -> "ErrorResult":
        if not isinstance(data, dict):
            return cls(kind=None, message=None if data is None else str(data))
        validate_response(ERROR_RESULT_SCHEMA, data, "error result")
        return cls(kind=data.get("kind"), message=data.get("message"))


@dataclass
class DaemonResponse:
    """Envelope shared by every snapd response."""
    type: Optional[str]
    status_code: Optional[int]
    status: Optional[str]
    result: Any
    change: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DaemonResponse":
        validate_response(RESPONSE_SCHEMA, data, "snapd response")
        return cls(
            type=data.get("type"),
            status_code=data.get("status-code"),
            status=data.get("status"),
            result=data.get("result"),
            change=data.get("change"),
            raw=data,
        )

    @property
    def is_error(self) -> bool:
        return self.type == RESPONSE_TYPE_ERROR

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def error(self) -> ErrorResult:
        """Decode ``result`` as an error body."""
        return ErrorResult.from_json(self.result)

    def raise_for_error(self) -> None:
        """Raise DaemonError if this is an error-typed response."""
        if self.is_error:
            err = self.error()
            raise DaemonError(self.status, err.kind, err.message, self.status_code)


@dataclass
class Change:
    """State of an asynchronous daemon change."""
    id: Optional[str]
    kind: Optional[str]
    summary: Optional[str]
    status: str
    ready: bool
    err: Optional[str]
    spawn_time: Optional[str] = None
    ready_time: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Any) -> "Change":
        validate_response(CHANGE_SCHEMA, data, "change result")
        return cls(
            id=data.get("id"),
            kind=data.get("kind"),
            summary=data.get("summary"),
            status=data["status"],
            ready=bool(data.get("ready", False)),
            err=data.get("err"),
            spawn_time=data.get("spawn-time"),
            ready_time=data.get("ready-time"),
            raw=data,
        )


@dataclass
class ChannelInfo:
    """One channel entry of a store snap."""
    version: Optional[str]
    revision: Optional[str]
    confinement: Optional[str]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ChannelInfo":
        revision = data.get("revision")
        return cls(
            version=data.get("version"),
            revision=None if revision is None else str(revision),
            confinement=data.get("confinement"),
        )


@dataclass
class StoreSnap:
    """A snap as offered by the store through ``/v2/find``."""
    name: str
    channels: Dict[str, ChannelInfo]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StoreSnap":
        channels = {
            key: ChannelInfo.from_json(value)
            for key, value in (data.get("channels") or {}).items()
        }
        return cls(name=data["name"], channels=channels)

    def channel_version(self, channel: str, track: str = "latest") -> Optional[str]:
        """Version published on ``<track>/<channel>``, or None when absent."""
        info = self.channels.get(f"{track}/{channel}")
        return info.version if info else None


def decode_find_result(data: Any) -> List[StoreSnap]:
    validate_response(FIND_RESULT_SCHEMA, data, "find result")
    return [StoreSnap.from_json(item) for item in data]


@dataclass
class InstalledSnap:
    """A snap installed on this system."""
    name: str
    version: Optional[str]
    revision: Optional[str]
    channel: Optional[str]
    confinement: Optional[str]

    @classmethod
    def from_json(cls, data: Any) -> "InstalledSnap":
        validate_response(SNAP_SCHEMA, data, "snap result")
        revision = data.get("revision")
        return cls(
            name=data["name"],
            version=data.get("version"),
            revision=None if revision is None else str(revision),
            channel=data.get("channel"),
            confinement=data.get("confinement"),
        )


def decode_snap_list(data: Any) -> List[InstalledSnap]:
    validate_response(SNAP_LIST_SCHEMA, data or [], "snap list")
    return [InstalledSnap.from_json(item) for item in data or []]
