"""Tests for change request payloads and change id extraction."""

import pytest

from conftest import async_change, error, sync
from snapgate.daemon.models import DaemonResponse
from snapgate.errors import DaemonError, ProtocolError
from snapgate.payloads import build_change_request, extract_change_id


class TestBuildChangeRequest:
    """Payload construction."""

    def test_remove_omits_channel(self):
        request = build_change_request(["foo"], "remove", "stable", {})
        assert request == {"action": "remove", "snaps": ["foo"]}

    @pytest.mark.parametrize("action", ["install", "refresh", "switch"])
    def test_channel_actions_include_channel(self, action):
        request = build_change_request(["foo", "bar"], action, "beta", {})
        assert request == {"action": action, "snaps": ["foo", "bar"], "channel": "beta"}

    @pytest.mark.parametrize("action", ["revert", "enable", "disable"])
    def test_other_actions_omit_channel(self, action):
        assert "channel" not in build_change_request(["foo"], action, "beta", {})

    def test_flags_only_when_truthy(self):
        options = {"classic": True, "devmode": False, "jailmode": None, "ignore-validation": 1}
        request = build_change_request(["foo"], "install", "stable", options)
        assert request["classic"] is True
        assert request["ignore-validation"] is True
        assert "devmode" not in request
        assert "jailmode" not in request

    def test_unknown_options_not_forwarded(self):
        request = build_change_request(["foo"], "install", "stable", {"dangerous": True})
        assert "dangerous" not in request

    def test_revision_included_when_given(self):
        assert build_change_request(["foo"], "revert", None, None, revision="17")["revision"] == "17"
        assert "revision" not in build_change_request(["foo"], "revert", None, None)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            build_change_request(["foo"], "purge", "stable", {})


class TestExtractChangeId:
    """Async response handling."""

    def test_returns_change(self):
        assert extract_change_id(DaemonResponse.from_json(async_change("1234"))) == "1234"

    def test_error_response_raises_structured_error(self):
        response = DaemonResponse.from_json(
            error(400, "snap-already-installed", 'snap "foo" is already installed')
        )

        with pytest.raises(DaemonError) as excinfo:
            extract_change_id(response)

        assert excinfo.value.status == "Bad Request"
        assert excinfo.value.kind == "snap-already-installed"
        assert excinfo.value.message == 'snap "foo" is already installed'
        assert excinfo.value.status_code == 400

    def test_missing_change_id(self):
        with pytest.raises(ProtocolError):
            extract_change_id(DaemonResponse.from_json(sync({})))
