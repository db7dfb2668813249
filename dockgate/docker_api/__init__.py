"""
Typed request builders for the Docker Engine API

Every operation produces a RequestDescriptor; sending it is left to the
caller (see dockgate.gateway.transport).
"""

from .client import API_VERSION, Docker, EventsOptions
from .containers import (
    Container,
    ContainerListOptions,
    ContainerOptions,
    ContainerPruneOptions,
    Containers,
    LogsOptions,
    RmContainerOptions,
)
from .endpoint import DaemonEndpoint
from .exceptions import (
    DockerException,
    RequestBuildError,
    ResolutionError,
    TransportError,
    UpstreamError,
)
from .images import (
    BuildOptions,
    Image,
    ImageListOptions,
    ImagePruneOptions,
    Images,
    PullOptions,
    PushOptions,
    RmImageOptions,
    TagOptions,
)
from .networks import (
    ContainerConnectionOptions,
    Network,
    NetworkCreateOptions,
    NetworkListOptions,
    NetworkPruneOptions,
    Networks,
)
from .options import RegistryAuth
from .request import RequestDescriptor, build_request
from .services import Service, ServiceListOptions, ServiceOptions, Services
from .volumes import (
    Volume,
    VolumeCreateOptions,
    VolumeListOptions,
    VolumePruneOptions,
    Volumes,
)

__all__ = [
    'API_VERSION',
    'Docker',
    'DaemonEndpoint',
    'RequestDescriptor',
    'build_request',
    'RegistryAuth',
    'DockerException',
    'ResolutionError',
    'RequestBuildError',
    'TransportError',
    'UpstreamError',
    'EventsOptions',
    'Containers',
    'Container',
    'ContainerListOptions',
    'ContainerOptions',
    'ContainerPruneOptions',
    'LogsOptions',
    'RmContainerOptions',
    'Images',
    'Image',
    'BuildOptions',
    'ImageListOptions',
    'ImagePruneOptions',
    'PullOptions',
    'PushOptions',
    'RmImageOptions',
    'TagOptions',
    'Volumes',
    'Volume',
    'VolumeCreateOptions',
    'VolumeListOptions',
    'VolumePruneOptions',
    'Networks',
    'Network',
    'ContainerConnectionOptions',
    'NetworkCreateOptions',
    'NetworkListOptions',
    'NetworkPruneOptions',
    'Services',
    'Service',
    'ServiceListOptions',
    'ServiceOptions',
]
