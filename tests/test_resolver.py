"""Tests for per-index version resolution."""

from unittest.mock import MagicMock

import pytest

from conftest import error, find_result, snap_result, sync
from snapgate.errors import DaemonError, PackageNotFound, VersionParseError
from snapgate.snap_cli import CliResult, SnapCli
from snapgate.versioning.models import PackageSpec
from snapgate.versioning.resolver import VersionResolver


def make_cli(stdout="name: x\nversion: 1.2.3\n", exit_status=0):
    runner = MagicMock(spec=SnapCli)
    result = CliResult(["snap", "info", "/tmp/x.snap"], exit_status, stdout, "")
    runner.run.return_value = result
    runner.info.side_effect = lambda path: SnapCli.info(runner, path)
    return runner


class TestAvailableVersion:
    """Store and local source lookups."""

    def test_latest_channel_version(self, client, transport):
        transport.add("GET", "/v2/find?name=foo", find_result("foo", {
            "latest/stable": "1.0",
            "latest/edge": "1.1~git",
        }))
        resolver = VersionResolver(PackageSpec.build(["foo"], channel="edge"), client)

        assert resolver.available_version(0) == "1.1~git"

    def test_not_found_raises_with_detail(self, client, transport):
        transport.add("GET", "/v2/find?name=foo", {"status-code": 404, "result": {"message": "snap not found"}})
        resolver = VersionResolver(PackageSpec.build(["foo"]), client)

        with pytest.raises(PackageNotFound) as excinfo:
            resolver.available_version(0)

        assert excinfo.value.name == "foo"
        assert excinfo.value.detail == {"message": "snap not found"}

    def test_missing_channel_is_absent(self, client, transport):
        transport.add("GET", "/v2/find?name=foo", find_result("foo", {"latest/edge": "2.0"}))
        resolver = VersionResolver(PackageSpec.build(["foo"], channel="stable"), client)

        assert resolver.available_version(0) is None

    def test_memoized_per_index(self, client, transport):
        transport.add("GET", "/v2/find?name=foo", find_result("foo", {"latest/stable": "1.0"}))
        transport.add("GET", "/v2/find?name=bar", find_result("bar", {"latest/stable": "3.4"}))
        resolver = VersionResolver(PackageSpec.build(["foo", "bar"]), client)

        assert resolver.available_version(0) == "1.0"
        assert resolver.available_version(0) == "1.0"
        assert resolver.available_versions() == ["1.0", "3.4"]
        assert transport.count("GET", "/v2/find?name=foo") == 1
        assert transport.count("GET", "/v2/find?name=bar") == 1

    def test_name_is_url_quoted(self, client, transport):
        transport.add("GET", "/v2/find?name=a%20b", find_result("a b", {"latest/stable": "1"}))
        resolver = VersionResolver(PackageSpec.build(["a b"]), client)

        assert resolver.available_version(0) == "1"

    def test_none_name_is_not_queried(self, client, transport):
        resolver = VersionResolver(PackageSpec.build([None]), client)

        assert resolver.available_version(0) is None
        assert transport.calls == []

    def test_local_source_version(self, client, transport):
        cli = make_cli()
        spec = PackageSpec.build(["x", "y"], source="/tmp/x.snap")
        resolver = VersionResolver(spec, client, cli)

        assert resolver.available_version(0) == "1.2.3"
        assert resolver.available_version(1) == "1.2.3"
        cli.run.assert_called_once_with("info", "/tmp/x.snap")
        assert transport.calls == []

    def test_local_source_without_version_label(self, client):
        cli = make_cli(stdout="name: x\nsummary: nothing here\n")
        resolver = VersionResolver(PackageSpec.build(["x"], source="/tmp/x.snap"), client, cli)

        with pytest.raises(VersionParseError):
            resolver.available_version(0)


class TestInstalledVersion:
    """Installed snap lookups."""

    def test_installed(self, client, transport):
        transport.add("GET", "/v2/snaps/bar", snap_result("bar", "2.5"))
        resolver = VersionResolver(PackageSpec.build(["bar"]), client)

        assert resolver.installed_version(0) == "2.5"

    def test_not_installed_is_absent(self, client, transport):
        transport.add("GET", "/v2/snaps/bar", {"status-code": 404})
        resolver = VersionResolver(PackageSpec.build(["bar"]), client)

        assert resolver.installed_version(0) is None
        assert resolver.installed_version(0) is None
        assert transport.count("GET", "/v2/snaps/bar") == 1

    def test_other_errors_raise(self, client, transport):
        transport.add("GET", "/v2/snaps/bar", error(500, "internal", "boom", "Internal Server Error"))
        resolver = VersionResolver(PackageSpec.build(["bar"]), client)

        with pytest.raises(DaemonError) as excinfo:
            resolver.installed_version(0)

        assert excinfo.value.kind == "internal"

    def test_installed_versions_list(self, client, transport):
        transport.add("GET", "/v2/snaps/a", snap_result("a", "1"))
        transport.add("GET", "/v2/snaps/b", sync({"message": "snap not installed"}, status_code=404))
        resolver = VersionResolver(PackageSpec.build(["a", "b", None]), client)

        assert resolver.installed_versions() == ["1", None, None]
