"""End-to-end tests for the tenant gateway, with the daemon replaced by httpx.MockTransport."""

import base64
import io
import json
import tarfile

import httpx
import pytest
from fastapi.testclient import TestClient

from dockgate.docker_api.options import RegistryAuth
from dockgate.gateway.app import create_app
from dockgate.gateway.directory import StaticDaemonDirectory
from dockgate.gateway.transport import DockerTransport

DAEMONS = {
    "tenant-7": "tcp://10.0.0.5:2375",
    "local": "unix:///var/run/docker.sock",
}


@pytest.fixture
def gateway(settings, recording_transport):
    """Factory: (TestClient, RecordingTransport) for a daemon handler."""
    clients = []

    def factory(handler=None):
        mock = recording_transport(handler)
        app = create_app(
            settings,
            directory=StaticDaemonDirectory(DAEMONS),
            transport=DockerTransport(transport=mock),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client, mock

    yield factory

    for client in clients:
        client.__exit__(None, None, None)


class TestResolution:
    """Tenant resolution and error mapping."""

    def test_list_containers_forwarded_to_tenant_daemon(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(200, json=[{"Id": "abc"}]))

        response = client.get("/tenant-7/containers?all=true")

        assert response.status_code == 200
        assert response.json() == [{"Id": "abc"}]
        assert len(mock.requests) == 1
        sent = mock.requests[0]
        assert sent.method == "GET"
        assert str(sent.url) == "http://10.0.0.5:2375/containers/json?all=true"

    def test_unknown_tenant_is_404_without_outbound_call(self, gateway) -> None:
        client, mock = gateway()

        response = client.get("/tenant-404/containers")

        assert response.status_code == 404
        assert response.json()["tenant"] == "tenant-404"
        assert response.json()["path"] == "/tenant-404/containers"
        assert mock.requests == []

    def test_unreachable_daemon_is_502_with_path(self, gateway) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, mock = gateway(refuse)

        response = client.get("/tenant-7/info")

        assert response.status_code == 502
        assert response.json()["path"] == "/tenant-7/info"
        assert response.json()["daemon"] == "tcp://10.0.0.5:2375/info"
        assert len(mock.requests) == 1

    def test_daemon_timeout_is_504(self, gateway) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client, _ = gateway(slow)
        assert client.get("/tenant-7/version").status_code == 504

    def test_upstream_error_relayed_unchanged(self, gateway) -> None:
        client, _ = gateway(lambda request: httpx.Response(
            404, json={"message": "No such container: abc"}, headers={"Api-Version": "1.41"},
        ))

        response = client.get("/tenant-7/containers/abc")

        assert response.status_code == 404
        assert response.json() == {"message": "No such container: abc"}
        assert response.headers["api-version"] == "1.41"

    def test_unix_socket_daemon(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(200, text="OK"))

        response = client.get("/local/ping")

        assert response.text == "OK"
        assert mock.requests[0].url.host == "docker"
        assert mock.requests[0].url.path == "/_ping"

    def test_healthz(self, gateway) -> None:
        client, mock = gateway()
        assert client.get("/healthz").json() == {"status": "ok"}
        assert mock.requests == []


class TestContainerRoutes:
    """Container routes."""

    @pytest.mark.parametrize("query", ["t=30", "wait=30"])
    def test_stop_with_wait(self, gateway, query: str) -> None:
        client, mock = gateway(lambda request: httpx.Response(204))

        response = client.post(f"/tenant-7/containers/abc/stop?{query}")

        assert response.status_code == 204
        assert mock.requests[0].method == "POST"
        assert str(mock.requests[0].url) == "http://10.0.0.5:2375/containers/abc/stop?t=30"

    def test_create(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(201, json={"Id": "abc", "Warnings": []}))

        response = client.post("/tenant-7/containers?name=web", json={"Image": "nginx", "Tty": True})

        assert response.status_code == 201
        sent = mock.requests[0]
        assert sent.url.path == "/containers/create"
        assert sent.url.params["name"] == "web"
        assert sent.headers["content-type"] == "application/json"
        assert json.loads(sent.content) == {"Image": "nginx", "Tty": True}

    def test_create_with_invalid_body_is_400(self, gateway) -> None:
        client, mock = gateway()

        response = client.post("/tenant-7/containers", content=b"[1, 2]",
                               headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert mock.requests == []

    def test_filters_are_reencoded(self, gateway) -> None:
        client, mock = gateway()

        client.get("/tenant-7/containers", params={"filters": '{"label": ["app=web"], "status": ["running"]}'})

        filters = json.loads(mock.requests[0].url.params["filters"])
        assert filters == {"label": ["app=web"], "status": ["running"]}

    def test_unsupported_filter_is_400(self, gateway) -> None:
        client, mock = gateway()

        response = client.get("/tenant-7/containers", params={"filters": '{"driver": ["local"]}'})

        assert response.status_code == 400
        assert "driver" in response.json()["detail"]
        assert mock.requests == []

    def test_remove_options(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(204))

        client.delete("/tenant-7/containers/abc?force=true&v=1")

        sent = mock.requests[0]
        assert sent.method == "DELETE"
        assert sent.url.path == "/containers/abc"
        assert dict(sent.url.params) == {"v": "true", "force": "true"}

    def test_logs_stream_relayed(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(200, content=b"line 1\nline 2\n"))

        response = client.get("/tenant-7/containers/abc/logs?stdout=true&tail=2")

        assert response.content == b"line 1\nline 2\n"
        assert dict(mock.requests[0].url.params) == {"stdout": "true", "tail": "2"}

    def test_encoded_id_stays_in_path(self, gateway) -> None:
        client, mock = gateway(lambda request: httpx.Response(204))

        client.delete("/tenant-7/containers/abc%3Fforce=true")

        sent = mock.requests[0]
        assert sent.url.raw_path == b"/containers/abc%3Fforce%3Dtrue"
        assert dict(sent.url.params) == {}

    def test_put_archive(self, gateway) -> None:
        client, mock = gateway()

        client.put("/tenant-7/containers/abc/archive?path=/tmp", content=b"tar-bytes")

        sent = mock.requests[0]
        assert sent.method == "PUT"
        assert sent.url.params["path"] == "/tmp"
        assert sent.headers["content-type"] == "application/x-tar"
        assert sent.content == b"tar-bytes"


class TestImageRoutes:
    """Image routes."""

    def test_pull_forwards_registry_auth(self, gateway) -> None:
        client, mock = gateway()
        header = RegistryAuth.token("abc").serialize()

        client.post("/tenant-7/images/create?fromImage=nginx&tag=latest",
                    headers={"X-Registry-Auth": header})

        sent = mock.requests[0]
        assert sent.url.path == "/images/create"
        assert dict(sent.url.params) == {"fromImage": "nginx", "tag": "latest"}
        assert sent.headers["x-registry-auth"] == header

    def test_malformed_registry_auth_is_400(self, gateway) -> None:
        client, mock = gateway()
        bad = base64.urlsafe_b64encode(b"not json").decode()

        response = client.post("/tenant-7/images/create?fromImage=nginx", headers={"X-Registry-Auth": bad})

        assert response.status_code == 400
        assert mock.requests == []

    def test_image_name_with_slashes(self, gateway) -> None:
        client, mock = gateway()

        client.get("/tenant-7/images/registry.io/team/app:1.0/json")

        assert mock.requests[0].url.path == "/images/registry.io/team/app:1.0/json"

    def test_delete_image(self, gateway) -> None:
        client, mock = gateway()

        client.delete("/tenant-7/images/library/nginx?force=true")

        sent = mock.requests[0]
        assert sent.method == "DELETE"
        assert sent.url.path == "/images/library/nginx"
        assert sent.url.params["force"] == "true"

    def test_build_from_tar_body(self, gateway) -> None:
        client, mock = gateway()
        archive = io.BytesIO()
        with tarfile.open(fileobj=archive, mode="w") as tar:
            info = tarfile.TarInfo("Dockerfile")
            data = b"FROM alpine\n"
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))

        client.post("/tenant-7/build", params={"t": "app:1", "buildargs": '{"V":"2"}'},
                    content=archive.getvalue())

        sent = mock.requests[0]
        assert sent.url.path == "/build"
        assert sent.url.params["t"] == "app:1"
        assert json.loads(sent.url.params["buildargs"]) == {"V": "2"}
        assert sent.headers["content-type"] == "application/tar"
        assert sent.content == archive.getvalue()

    def test_export_many(self, gateway) -> None:
        client, mock = gateway()

        client.get("/tenant-7/images/get?names=nginx&names=redis")

        assert mock.requests[0].url.params.get_list("names") == ["nginx", "redis"]


class TestOtherRoutes:
    """Volumes, networks, services and system routes."""

    def test_create_volume(self, gateway) -> None:
        client, mock = gateway()

        client.post("/tenant-7/volumes", json={"Name": "data"})

        assert mock.requests[0].url.path == "/volumes/create"
        assert json.loads(mock.requests[0].content) == {"Name": "data"}

    def test_network_connect(self, gateway) -> None:
        client, mock = gateway()

        client.post("/tenant-7/networks/backend/connect", json={"Container": "web"})

        sent = mock.requests[0]
        assert (sent.method, sent.url.path) == ("POST", "/networks/backend/connect")
        assert json.loads(sent.content) == {"Container": "web"}

    def test_service_update(self, gateway) -> None:
        client, mock = gateway()

        client.post("/tenant-7/services/svc1/update?version=12", json={"Name": "web"})

        sent = mock.requests[0]
        assert sent.url.path == "/services/svc1/update"
        assert sent.url.params["version"] == "12"

    def test_events(self, gateway) -> None:
        client, mock = gateway()

        client.get("/tenant-7/events", params={"since": "10", "filters": '{"type": ["container"]}'})

        params = mock.requests[0].url.params
        assert params["since"] == "10"
        assert json.loads(params["filters"]) == {"type": ["container"]}
