"""Tests for option builders and filters."""

import json

import pytest

from dockgate.docker_api.containers import ContainerListOptions, ContainerOptions, LogsOptions
from dockgate.docker_api.exceptions import RequestBuildError
from dockgate.docker_api.filters import (
    Dangling,
    ExitCode,
    Filter,
    Label,
    LabelName,
    NetworkType,
    Status,
    parse_filters,
)
from dockgate.docker_api.images import BuildOptions, ImageListOptions
from dockgate.docker_api.networks import ContainerConnectionOptions, NetworkListOptions
from dockgate.docker_api.options import QUERY, JSON
from dockgate.docker_api.services import ServiceListOptions
from dockgate.docker_api.volumes import VolumeCreateOptions, VolumeListOptions


class TestQueryOptions:
    """Query-string options."""

    def test_nothing_set_serializes_to_none(self) -> None:
        assert ContainerListOptions.builder().build().serialize() is None
        assert ContainerListOptions().serialize() is None

    def test_set_option_serializes(self) -> None:
        options = ContainerListOptions.builder().all().build()
        assert options.serialize() == "all=true"
        assert options.encoding == QUERY

    def test_last_write_wins(self) -> None:
        options = ContainerListOptions.builder().all(True).limit(5).all(False).build()
        assert options.get("all") == "false"
        assert options.get("limit") == "5"

    def test_spaces_are_form_encoded(self) -> None:
        options = ImageListOptions.builder().filter_name("my image").build()
        assert options.serialize() == "filter=my+image"

    def test_options_are_immutable(self) -> None:
        options = LogsOptions.builder().tail("all").build()
        with pytest.raises(AttributeError):
            options.params = ()

    def test_builder_keeps_building_after_build(self) -> None:
        builder = LogsOptions.builder().stdout(True)
        first = builder.build()
        builder.stderr(True)
        assert first.get("stderr") is None
        assert builder.build().get("stderr") == "true"

    def test_build_args_are_json(self) -> None:
        options = BuildOptions.builder("/ctx").tag("app:1").build_args({"VERSION": "2"}).build()
        assert options.path == "/ctx"
        assert options.get("t") == "app:1"
        assert json.loads(options.get("buildargs")) == {"VERSION": "2"}


class TestFilters:
    """The filters parameter."""

    def test_filters_accumulate_across_calls(self) -> None:
        builder = ContainerListOptions.builder()
        builder.filter([Label("a", "1")])
        builder.filter([LabelName("b"), Status("running")])

        filters = json.loads(builder.build().get("filters"))
        assert filters == {"label": ["a=1", "b"], "status": ["running"]}

    def test_filters_are_compact_json(self) -> None:
        options = VolumeListOptions.builder().filter([Dangling()]).build()
        assert options.get("filters") == '{"dangling":["true"]}'

    def test_unsupported_filter_kind_raises(self) -> None:
        with pytest.raises(RequestBuildError, match="status"):
            VolumeListOptions.builder().filter([Status("running")])

    def test_filter_kinds_per_endpoint(self) -> None:
        NetworkListOptions.builder().filter([NetworkType("custom")])
        ServiceListOptions.builder().filter([Filter("mode", "global")])
        with pytest.raises(RequestBuildError):
            ServiceListOptions.builder().filter([ExitCode(0)])

    def test_exit_code_kind(self) -> None:
        code = ExitCode(137)
        assert (code.kind, code.value) == ("exited", "137")

    def test_parse_filters_list_form(self) -> None:
        parsed = parse_filters('{"label": ["a=1", "b"], "dangling": ["true"]}')
        assert [(f.kind, f.value) for f in parsed] == [
            ("label", "a=1"),
            ("label", "b"),
            ("dangling", "true"),
        ]

    def test_parse_filters_legacy_map_form(self) -> None:
        parsed = parse_filters('{"status": {"running": true, "exited": false}}')
        assert [(f.kind, f.value) for f in parsed] == [("status", "running")]

    def test_parse_filters_empty(self) -> None:
        assert parse_filters(None) == []
        assert parse_filters("") == []

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"label": 3.5}'])
    def test_parse_filters_rejects_garbage(self, raw: str) -> None:
        with pytest.raises(RequestBuildError):
            parse_filters(raw)


class TestJsonOptions:
    """JSON body options."""

    def test_dotted_keys_nest(self) -> None:
        options = (
            ContainerOptions.builder("nginx")
            .volumes(["/srv:/usr/share/nginx/html:ro"])
            .memory(256 * 1024 * 1024)
            .env({"A": "1"})
            .build()
        )
        assert options.encoding == JSON
        assert options.body == {
            "Image": "nginx",
            "Env": ["A=1"],
            "HostConfig": {
                "Binds": ["/srv:/usr/share/nginx/html:ro"],
                "Memory": 268435456,
            },
        }

    def test_publish_sets_exposed_ports_and_bindings(self) -> None:
        body = ContainerOptions.builder("nginx").publish(80, 8080).build().body
        assert body["ExposedPorts"] == {"80/tcp": {}}
        assert body["HostConfig"]["PortBindings"] == {"80/tcp": [{"HostPort": "8080"}]}

    def test_name_and_platform_stay_out_of_body(self) -> None:
        options = ContainerOptions.builder("alpine").name("web").platform("linux/amd64").build()
        assert options.name == "web"
        assert options.platform == "linux/amd64"
        assert options.body == {"Image": "alpine"}

    def test_body_is_copied_on_build(self) -> None:
        builder = VolumeCreateOptions.builder().name("data")
        options = builder.build()
        builder.labels({"x": "y"})
        assert options.body == {"Name": "data"}

    def test_serialize_round_trips_json(self) -> None:
        options = ContainerConnectionOptions.builder("web").aliases(["api"]).build()
        assert json.loads(options.serialize()) == {
            "Container": "web",
            "EndpointConfig": {"Aliases": ["api"]},
        }
