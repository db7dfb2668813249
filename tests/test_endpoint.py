"""Tests for daemon endpoint parsing."""

import pytest

from dockgate.docker_api.endpoint import DaemonEndpoint


class TestDaemonEndpoint:
    """DaemonEndpoint.parse and rendering."""

    def test_tcp(self) -> None:
        endpoint = DaemonEndpoint.parse("tcp://10.0.0.5:2375")
        assert (endpoint.scheme, endpoint.host, endpoint.port) == ("tcp", "10.0.0.5", 2375)
        assert endpoint.url == "tcp://10.0.0.5:2375"

    def test_default_ports(self) -> None:
        assert DaemonEndpoint.parse("tcp://docker").url == "tcp://docker:2375"
        assert DaemonEndpoint.parse("https://docker").url == "https://docker:443"

    def test_http(self) -> None:
        assert DaemonEndpoint.parse("http://127.0.0.1:8010").url == "http://127.0.0.1:8010"

    def test_ipv6_host(self) -> None:
        endpoint = DaemonEndpoint.parse("tcp://[::1]:2375")
        assert endpoint.host == "::1"
        assert endpoint.url == "tcp://[::1]:2375"

    def test_unix_socket(self) -> None:
        endpoint = DaemonEndpoint.parse("unix:///var/run/docker.sock")
        assert endpoint.is_unix
        assert endpoint.socket_path == "/var/run/docker.sock"
        assert endpoint.url == "http+unix://%2Fvar%2Frun%2Fdocker.sock"
        assert str(endpoint) == "unix:///var/run/docker.sock"

    def test_bare_socket_path(self) -> None:
        assert DaemonEndpoint.parse("/run/docker.sock").socket_path == "/run/docker.sock"

    def test_http_unix_round_trip(self) -> None:
        endpoint = DaemonEndpoint.parse("unix:///var/run/docker.sock")
        assert DaemonEndpoint.parse(endpoint.url) == endpoint

    @pytest.mark.parametrize("address", ["", "ftp://host", "tcp://", "unix://relative.sock", "tcp://h:notaport"])
    def test_invalid(self, address: str) -> None:
        with pytest.raises(ValueError):
            DaemonEndpoint.parse(address)

    def test_from_host_port(self) -> None:
        endpoint = DaemonEndpoint.from_host_port("10.0.0.9", "2376")
        assert endpoint.url == "tcp://10.0.0.9:2376"

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DOCKER_HOST", "tcp://192.168.1.2:2375")
        assert DaemonEndpoint.from_env().host == "192.168.1.2"

    def test_from_env_defaults_to_local_socket(self, monkeypatch) -> None:
        monkeypatch.delenv("DOCKER_HOST", raising=False)
        assert DaemonEndpoint.from_env().socket_path == "/var/run/docker.sock"
