"""pytest configuration and fixtures."""

from typing import Callable, List

import httpx
import pytest

from dockgate.docker_api.client import Docker
from dockgate.settings_manager import SettingsManager
from tests.streams import ChunkedStream


@pytest.fixture
def settings(tmp_path) -> SettingsManager:
    """Settings backed by a throwaway file."""
    return SettingsManager(str(tmp_path / "settings.json"))


@pytest.fixture
def docker() -> Docker:
    return Docker.host("tcp://10.0.0.5:2375")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it saw.

    Handler responses built from content= or json= are already read by httpx;
    they are re-issued over an unread ChunkedStream so they can be streamed.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            response = handler(request)
            if not response.is_stream_consumed:
                return response
            return httpx.Response(
                response.status_code,
                headers=response.headers,
                stream=ChunkedStream([response.content]),
            )

        super().__init__(record)


@pytest.fixture
def recording_transport():
    """Factory for RecordingTransport, default answer is 200 {}."""

    def factory(handler=None) -> RecordingTransport:
        return RecordingTransport(handler or (lambda request: httpx.Response(200, json={})))

    return factory
