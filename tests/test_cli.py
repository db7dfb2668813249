"""Tests for the command line entry point."""

import json

import pytest

from dockgate.cli import build_parser, run_cli


class TestParser:
    """Argument parsing."""

    def test_serve_is_default(self) -> None:
        args = build_parser().parse_args([])
        assert args.action is None

    def test_serve_options(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "serve", "--port", "9000"])
        assert (args.action, args.port, args.log_level) == ("serve", 9000, "DEBUG")

    def test_ping_tenant(self) -> None:
        args = build_parser().parse_args(["ping", "tenant-7"])
        assert (args.action, args.tenant) == ("ping", "tenant-7")


class TestRunCli:
    """run_cli exit codes."""

    def test_ping_unknown_tenant_exits_1(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"daemons": {}, "cache_ttl": 0}))

        with pytest.raises(SystemExit) as exc_info:
            run_cli(["--settings", str(path), "ping", "nobody"])

        assert exc_info.value.code == 1

    def test_invalid_daemon_address_exits_1(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"daemons": {"t": "ftp://nope"}}))

        with pytest.raises(SystemExit) as exc_info:
            run_cli(["--settings", str(path), "ping", "t"])

        assert exc_info.value.code == 1
