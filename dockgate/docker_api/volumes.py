"""
Docker Volumes API

API Reference: https://docs.docker.com/engine/api/v1.41/#tag/Volume
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .options import (
    JsonOptions,
    JsonOptionsBuilder,
    QueryOptions,
    QueryOptionsBuilder,
    with_query,
)
from .request import RequestDescriptor, JSON_CONTENT_TYPE, path_segment


@dataclass(frozen=True)
class Volume:
    """Operations on one named volume"""

    docker: Any
    name: str

    @property
    def _path(self) -> str:
        return f'/volumes/{path_segment(self.name)}'

    def inspect(self) -> RequestDescriptor:
        return self.docker.get(self._path)

    def delete(self, force: Optional[bool] = None) -> RequestDescriptor:
        """
        Delete the volume

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/VolumeDelete
        """
        path = self._path
        if force is not None:
            path += '?force=' + ('true' if force else 'false')
        return self.docker.delete(path)


@dataclass(frozen=True)
class Volumes:
    """Docker Volumes collection"""

    docker: Any

    def get(self, name: str) -> Volume:
        return Volume(self.docker, name)

    def list(self, options: Optional['VolumeListOptions'] = None) -> RequestDescriptor:
        """
        List volumes

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/VolumeList
        """
        return self.docker.get(with_query('/volumes', options))

    def create(self, options: 'VolumeCreateOptions') -> RequestDescriptor:
        """
        Create a volume

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/VolumeCreate
        """
        return self.docker.post('/volumes/create', body=options.to_bytes(),
                                content_type=JSON_CONTENT_TYPE)

    def prune(self, options: Optional['VolumePruneOptions'] = None) -> RequestDescriptor:
        """Delete unused volumes"""
        return self.docker.post(with_query('/volumes/prune', options))


@dataclass(frozen=True)
class VolumeListOptions(QueryOptions):
    """Options for GET /volumes"""

    @classmethod
    def builder(cls) -> 'VolumeListOptionsBuilder':
        return VolumeListOptionsBuilder()


class VolumeListOptionsBuilder(QueryOptionsBuilder):
    options_class = VolumeListOptions
    filter_kinds = frozenset({'dangling', 'driver', 'label', 'name'})


@dataclass(frozen=True)
class VolumePruneOptions(QueryOptions):
    """Options for POST /volumes/prune"""

    @classmethod
    def builder(cls) -> 'VolumePruneOptionsBuilder':
        return VolumePruneOptionsBuilder()


class VolumePruneOptionsBuilder(QueryOptionsBuilder):
    options_class = VolumePruneOptions
    filter_kinds = frozenset({'label'})


@dataclass(frozen=True)
class VolumeCreateOptions(JsonOptions):
    """Body of POST /volumes/create"""

    @classmethod
    def builder(cls) -> 'VolumeCreateOptionsBuilder':
        return VolumeCreateOptionsBuilder()


class VolumeCreateOptionsBuilder(JsonOptionsBuilder):
    options_class = VolumeCreateOptions

    def name(self, name: str):
        return self._set('Name', name)

    def driver(self, driver: str):
        return self._set('Driver', driver)

    def driver_opts(self, opts: Dict[str, str]):
        return self._set('DriverOpts', dict(opts))

    def labels(self, labels: Dict[str, str]):
        return self._set('Labels', dict(labels))
