"""
Docker Services API (swarm mode)

API Reference: https://docs.docker.com/engine/api/v1.41/#tag/Service
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .containers import LogsOptions
from .options import (
    JsonOptions,
    JsonOptionsBuilder,
    QueryOptions,
    QueryOptionsBuilder,
    RegistryAuth,
    registry_auth_headers,
    with_query,
)
from .request import RequestDescriptor, JSON_CONTENT_TYPE, path_segment


@dataclass(frozen=True)
class Service:
    """Operations on one service"""

    docker: Any
    id: str

    @property
    def _path(self) -> str:
        return f'/services/{path_segment(self.id)}'

    def inspect(self) -> RequestDescriptor:
        return self.docker.get(self._path)

    def delete(self) -> RequestDescriptor:
        return self.docker.delete(self._path)

    def update(self, version: int, options: 'ServiceOptions') -> RequestDescriptor:
        """
        Update the service

        Args:
            version: Current Version.Index of the service object
            options: Complete new service spec

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ServiceUpdate
        """
        return self.docker.post(f'{self._path}/update?version={int(version)}',
                                body=options.to_bytes(), content_type=JSON_CONTENT_TYPE,
                                headers=registry_auth_headers(options.auth))

    def logs(self, options: Optional[LogsOptions] = None) -> RequestDescriptor:
        return self.docker.get(with_query(f'{self._path}/logs', options))


@dataclass(frozen=True)
class Services:
    """Docker Services collection"""

    docker: Any

    def get(self, service_id: str) -> Service:
        return Service(self.docker, service_id)

    def list(self, options: Optional['ServiceListOptions'] = None) -> RequestDescriptor:
        """
        List services

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ServiceList
        """
        return self.docker.get(with_query('/services', options))

    def create(self, options: 'ServiceOptions') -> RequestDescriptor:
        """
        Create a service

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ServiceCreate
        """
        return self.docker.post('/services/create', body=options.to_bytes(),
                                content_type=JSON_CONTENT_TYPE,
                                headers=registry_auth_headers(options.auth))


@dataclass(frozen=True)
class ServiceListOptions(QueryOptions):
    """Options for GET /services"""

    @classmethod
    def builder(cls) -> 'ServiceListOptionsBuilder':
        return ServiceListOptionsBuilder()


class ServiceListOptionsBuilder(QueryOptionsBuilder):
    options_class = ServiceListOptions
    filter_kinds = frozenset({'id', 'label', 'mode', 'name'})

    def status(self, value: bool):
        """Include ServiceStatus (running/desired task counts)"""
        return self._set('status', value)


@dataclass(frozen=True)
class ServiceOptions(JsonOptions):
    """Service spec for create and update"""

    auth: Optional[RegistryAuth] = None

    @classmethod
    def builder(cls) -> 'ServiceOptionsBuilder':
        return ServiceOptionsBuilder()


class ServiceOptionsBuilder(JsonOptionsBuilder):
    options_class = ServiceOptions

    def __init__(self, body: Optional[Dict[str, Any]] = None):
        super().__init__(body)
        self._auth: Optional[RegistryAuth] = None

    def name(self, name: str):
        return self._set('Name', name)

    def labels(self, labels: Dict[str, str]):
        return self._set('Labels', dict(labels))

    def image(self, image: str):
        return self._set('TaskTemplate.ContainerSpec.Image', image)

    def command(self, command: List[str]):
        return self._set('TaskTemplate.ContainerSpec.Command', list(command))

    def args(self, args: List[str]):
        return self._set('TaskTemplate.ContainerSpec.Args', list(args))

    def env(self, env: List[str]):
        return self._set('TaskTemplate.ContainerSpec.Env', list(env))

    def replicas(self, replicas: int):
        return self._set('Mode', {'Replicated': {'Replicas': int(replicas)}})

    def global_mode(self):
        return self._set('Mode', {'Global': {}})

    def networks(self, targets: List[str]):
        return self._set('TaskTemplate.Networks', [{'Target': target} for target in targets])

    def endpoint_spec(self, spec: Dict[str, Any]):
        """Ports and resolution mode, as the Engine API EndpointSpec object"""
        return self._set('EndpointSpec', dict(spec))

    def auth(self, auth: RegistryAuth):
        self._auth = auth
        return self

    def _options_kwargs(self) -> Dict[str, Any]:
        return {'auth': self._auth}
