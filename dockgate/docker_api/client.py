"""
Docker Client - Main API entry point

API Reference: https://docs.docker.com/engine/api/v1.41/
"""

from dataclasses import dataclass
from typing import Optional, Union

from .containers import Containers
from .endpoint import DaemonEndpoint
from .images import Images
from .networks import Networks
from .options import QueryOptions, QueryOptionsBuilder, with_query
from .request import RequestDescriptor, build_request, Headers
from .services import Services
from .volumes import Volumes


API_VERSION = '1.41'


@dataclass(frozen=True)
class Docker:
    """
    Docker API Client bound to one daemon endpoint

    Every operation returns a RequestDescriptor; nothing is sent from here.
    """

    endpoint: DaemonEndpoint

    @classmethod
    def host(cls, address: Union[str, DaemonEndpoint]) -> 'Docker':
        """
        Client for a daemon address

        Args:
            address: Endpoint or address string (tcp://host:port, unix:///path)
        """
        if isinstance(address, DaemonEndpoint):
            return cls(address)
        return cls(DaemonEndpoint.parse(address))

    @classmethod
    def from_env(cls) -> 'Docker':
        """Client for DOCKER_HOST, or the local socket"""
        return cls(DaemonEndpoint.from_env())

    def images(self) -> Images:
        return Images(self)

    def containers(self) -> Containers:
        return Containers(self)

    def volumes(self) -> Volumes:
        return Volumes(self)

    def networks(self) -> Networks:
        return Networks(self)

    def services(self) -> Services:
        return Services(self)

    def version(self) -> RequestDescriptor:
        """Get Docker version info"""
        return self.get('/version')

    def info(self) -> RequestDescriptor:
        """Get Docker system info"""
        return self.get('/info')

    def ping(self) -> RequestDescriptor:
        """Ping Docker daemon"""
        return self.get('/_ping')

    def df(self) -> RequestDescriptor:
        """Get data usage information"""
        return self.get('/system/df')

    def events(self, options: Optional['EventsOptions'] = None) -> RequestDescriptor:
        """
        Stream of daemon events

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/SystemEvents
        """
        return self.get(with_query('/events', options))

    def request(self, method: str, path: str, body: Optional[bytes] = None,
                content_type: Optional[str] = None, headers: Headers = None) -> RequestDescriptor:
        return build_request(self.endpoint.url, method, path, body=body,
                             content_type=content_type, headers=headers)

    def get(self, path: str, headers: Headers = None) -> RequestDescriptor:
        return self.request('GET', path, headers=headers)

    def post(self, path: str, body: Optional[bytes] = None, content_type: Optional[str] = None,
             headers: Headers = None) -> RequestDescriptor:
        return self.request('POST', path, body=body, content_type=content_type, headers=headers)

    def put(self, path: str, body: Optional[bytes] = None, content_type: Optional[str] = None,
            headers: Headers = None) -> RequestDescriptor:
        return self.request('PUT', path, body=body, content_type=content_type, headers=headers)

    def delete(self, path: str, headers: Headers = None) -> RequestDescriptor:
        return self.request('DELETE', path, headers=headers)


@dataclass(frozen=True)
class EventsOptions(QueryOptions):
    """Options for GET /events"""

    @classmethod
    def builder(cls) -> 'EventsOptionsBuilder':
        return EventsOptionsBuilder()


class EventsOptionsBuilder(QueryOptionsBuilder):
    options_class = EventsOptions
    filter_kinds = frozenset({
        'config', 'container', 'daemon', 'event', 'image', 'label', 'network',
        'node', 'plugin', 'scope', 'secret', 'service', 'type', 'volume',
    })

    def since(self, timestamp):
        """Events since a timestamp (unix seconds or RFC 3339)"""
        return self._set('since', timestamp)

    def until(self, timestamp):
        """Events until a timestamp (unix seconds or RFC 3339)"""
        return self._set('until', timestamp)
