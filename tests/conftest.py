"""Shared fixtures: a scripted snapd transport and Constants isolation."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from snapgate.constants import Constants
from snapgate.daemon.client import SnapdClient


class FakeTransport:
    """Scripted stand-in for daemon.transport.Transport.

    Responses are queued per (method, path). The last queued response for a
    route is repeated once the queue is drained.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, Any]] = []

    def add(self, method: str, path: str, *responses: Dict[str, Any]) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def call(self, method: str, path: str, body: Any = None) -> Dict[str, Any]:
        self.calls.append((method, path, body))
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"unexpected request {method} {path}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.calls if (m, p) == (method, path))


def sync(result: Any, status_code: int = 200) -> Dict[str, Any]:
    return {"type": "sync", "status-code": status_code, "status": "OK", "result": result}


def async_change(change_id: str) -> Dict[str, Any]:
    return {"type": "async", "status-code": 202, "status": "Accepted", "result": None, "change": change_id}


def error(status_code: int, kind: Optional[str], message: str, status: str = "Bad Request") -> Dict[str, Any]:
    result = {"message": message}
    if kind:
        result["kind"] = kind
    return {"type": "error", "status-code": status_code, "status": status, "result": result}


def change(status: str, change_id: str = "42") -> Dict[str, Any]:
    return sync({
        "id": change_id,
        "kind": "install-snap",
        "summary": "Install snaps",
        "status": status,
        "ready": status == "Done",
    })


def find_result(name: str, channels: Dict[str, str]) -> Dict[str, Any]:
    return sync([{
        "name": name,
        "channels": {
            key: {"version": version, "revision": "7", "confinement": "strict"}
            for key, version in channels.items()
        },
    }])


def snap_result(name: str, version: str) -> Dict[str, Any]:
    return sync({"name": name, "version": version, "revision": "12", "channel": "stable"})


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return SnapdClient(transport)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants mutation made by config loading under test."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)
