"""Tests for typed snapd response decoding."""

import pytest

from conftest import find_result, snap_result, sync
from snapgate.daemon.models import (
    Change,
    DaemonResponse,
    ErrorResult,
    decode_find_result,
    decode_snap_list,
)
from snapgate.errors import ProtocolError


def test_envelope_fields():
    response = DaemonResponse.from_json({"type": "async", "status-code": 202, "status": "Accepted", "change": "5"})
    assert response.type == "async"
    assert response.status_code == 202
    assert response.change == "5"
    assert response.is_error is False


def test_envelope_rejects_wrong_types():
    with pytest.raises(ProtocolError, match="status-code"):
        DaemonResponse.from_json({"type": "sync", "status-code": "200"})


def test_error_result_tolerates_non_mapping():
    assert ErrorResult.from_json(None) == ErrorResult(kind=None, message=None)
    assert ErrorResult.from_json("boom").message == "boom"


def test_change_requires_status():
    with pytest.raises(ProtocolError):
        Change.from_json({"id": "1"})


def test_change_fields():
    result = Change.from_json({"id": "1", "status": "Doing", "spawn-time": "2024-01-01T00:00:00Z"})
    assert result.status == "Doing"
    assert result.ready is False
    assert result.spawn_time == "2024-01-01T00:00:00Z"


def test_find_result_channels():
    snaps = decode_find_result(find_result("hello", {"latest/stable": "2.10"})["result"])
    assert snaps[0].name == "hello"
    assert snaps[0].channel_version("stable") == "2.10"
    assert snaps[0].channels["latest/stable"].revision == "7"
    assert snaps[0].channel_version("candidate") is None


def test_find_result_rejects_bad_channels():
    with pytest.raises(ProtocolError):
        decode_find_result([{"name": "hello", "channels": {"latest/stable": {"version": 3}}}])


def test_snap_list():
    snaps = decode_snap_list([snap_result("a", "1")["result"], snap_result("b", "2")["result"]])
    assert [(s.name, s.version, s.revision) for s in snaps] == [("a", "1", "12"), ("b", "2", "12")]
    assert decode_snap_list(sync(None)["result"]) == []
