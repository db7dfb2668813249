"""
Docker Networks API

API Reference: https://docs.docker.com/engine/api/v1.41/#tag/Network
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .options import (
    JsonOptions,
    JsonOptionsBuilder,
    QueryOptions,
    QueryOptionsBuilder,
    with_query,
)
from .request import RequestDescriptor, JSON_CONTENT_TYPE, path_segment


@dataclass(frozen=True)
class Network:
    """Operations on one network"""

    docker: Any
    id: str

    @property
    def _path(self) -> str:
        return f'/networks/{path_segment(self.id)}'

    def inspect(self) -> RequestDescriptor:
        return self.docker.get(self._path)

    def delete(self) -> RequestDescriptor:
        return self.docker.delete(self._path)

    def connect(self, options: 'ContainerConnectionOptions') -> RequestDescriptor:
        """
        Connect a container to this network

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/NetworkConnect
        """
        return self.docker.post(f'{self._path}/connect', body=options.to_bytes(),
                                content_type=JSON_CONTENT_TYPE)

    def disconnect(self, options: 'ContainerConnectionOptions') -> RequestDescriptor:
        """
        Disconnect a container from this network

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/NetworkDisconnect
        """
        return self.docker.post(f'{self._path}/disconnect', body=options.to_bytes(),
                                content_type=JSON_CONTENT_TYPE)


@dataclass(frozen=True)
class Networks:
    """Docker Networks collection"""

    docker: Any

    def get(self, network_id: str) -> Network:
        return Network(self.docker, network_id)

    def list(self, options: Optional['NetworkListOptions'] = None) -> RequestDescriptor:
        """
        List networks

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/NetworkList
        """
        return self.docker.get(with_query('/networks', options))

    def create(self, options: 'NetworkCreateOptions') -> RequestDescriptor:
        """
        Create a network

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/NetworkCreate
        """
        return self.docker.post('/networks/create', body=options.to_bytes(),
                                content_type=JSON_CONTENT_TYPE)

    def prune(self, options: Optional['NetworkPruneOptions'] = None) -> RequestDescriptor:
        """Remove unused networks"""
        return self.docker.post(with_query('/networks/prune', options))


@dataclass(frozen=True)
class NetworkListOptions(QueryOptions):
    """Options for GET /networks"""

    @classmethod
    def builder(cls) -> 'NetworkListOptionsBuilder':
        return NetworkListOptionsBuilder()


class NetworkListOptionsBuilder(QueryOptionsBuilder):
    options_class = NetworkListOptions
    filter_kinds = frozenset({'dangling', 'driver', 'id', 'label', 'name', 'scope', 'type'})


@dataclass(frozen=True)
class NetworkPruneOptions(QueryOptions):
    """Options for POST /networks/prune"""

    @classmethod
    def builder(cls) -> 'NetworkPruneOptionsBuilder':
        return NetworkPruneOptionsBuilder()


class NetworkPruneOptionsBuilder(QueryOptionsBuilder):
    options_class = NetworkPruneOptions
    filter_kinds = frozenset({'label', 'until'})


@dataclass(frozen=True)
class NetworkCreateOptions(JsonOptions):
    """Body of POST /networks/create"""

    @classmethod
    def builder(cls, name: Optional[str] = None) -> 'NetworkCreateOptionsBuilder':
        return NetworkCreateOptionsBuilder(name)


class NetworkCreateOptionsBuilder(JsonOptionsBuilder):
    options_class = NetworkCreateOptions

    def __init__(self, name: Optional[str] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(body)
        if name is not None:
            self._set('Name', name)

    def name(self, name: str):
        return self._set('Name', name)

    def driver(self, driver: str):
        """bridge, overlay, macvlan, ..."""
        return self._set('Driver', driver)

    def check_duplicate(self, value: bool):
        return self._set('CheckDuplicate', value)

    def internal(self, value: bool):
        return self._set('Internal', value)

    def attachable(self, value: bool):
        return self._set('Attachable', value)

    def enable_ipv6(self, value: bool):
        return self._set('EnableIPv6', value)

    def options(self, options: Dict[str, str]):
        """Driver specific options"""
        return self._set('Options', dict(options))

    def labels(self, labels: Dict[str, str]):
        return self._set('Labels', dict(labels))

    def ipam(self, driver: str = 'default', config: Optional[List[Dict[str, str]]] = None):
        """IP address management: driver plus a list of Subnet/IPRange/Gateway configs"""
        return self._set('IPAM', {'Driver': driver, 'Config': list(config or [])})


@dataclass(frozen=True)
class ContainerConnectionOptions(JsonOptions):
    """Body of POST /networks/{id}/connect and /disconnect"""

    @classmethod
    def builder(cls, container: str) -> 'ContainerConnectionOptionsBuilder':
        return ContainerConnectionOptionsBuilder(container)


class ContainerConnectionOptionsBuilder(JsonOptionsBuilder):
    options_class = ContainerConnectionOptions

    def __init__(self, container: Optional[str] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(body)
        if container is not None:
            self._set('Container', container)

    def aliases(self, aliases: List[str]):
        return self._set('EndpointConfig.Aliases', list(aliases))

    def links(self, links: List[str]):
        return self._set('EndpointConfig.Links', list(links))

    def ipv4_address(self, address: str):
        return self._set('EndpointConfig.IPAMConfig.IPv4Address', address)

    def force(self, value: bool):
        """Disconnect only: force the container off the network"""
        return self._set('Force', value)
