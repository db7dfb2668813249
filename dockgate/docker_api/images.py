"""
Docker Images API

API Reference: https://docs.docker.com/engine/api/v1.41/#tag/Image
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from .options import (
    QueryOptions,
    QueryOptionsBuilder,
    RegistryAuth,
    registry_auth_headers,
    encode_json,
    with_query,
)
from .request import RequestDescriptor, TAR_CONTENT_TYPE, path_segment
from .tar_utils import create_tar_from_directory


@dataclass(frozen=True)
class Image:
    """Operations on one named image"""

    docker: Any
    name: str

    @property
    def _path(self) -> str:
        # repository names keep their slashes, tags and digests
        return f'/images/{path_segment(self.name, safe="/:@")}'

    def inspect(self) -> RequestDescriptor:
        return self.docker.get(f'{self._path}/json')

    def history(self) -> RequestDescriptor:
        return self.docker.get(f'{self._path}/history')

    def delete(self, options: Optional['RmImageOptions'] = None) -> RequestDescriptor:
        """Remove this image"""
        return self.docker.delete(with_query(self._path, options))

    def export(self) -> RequestDescriptor:
        """
        Export this image to a tarball

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageGet
        """
        return self.docker.get(f'{self._path}/get')

    def tag(self, options: 'TagOptions') -> RequestDescriptor:
        """
        Add a tag to this image

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageTag
        """
        return self.docker.post(with_query(f'{self._path}/tag', options))

    def push(self, options: Optional['PushOptions'] = None) -> RequestDescriptor:
        """
        Push this image to its registry

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImagePush
        """
        auth = options.auth if options is not None else None
        return self.docker.post(with_query(f'{self._path}/push', options),
                                headers=registry_auth_headers(auth))


@dataclass(frozen=True)
class Images:
    """Docker Images collection"""

    docker: Any

    def get(self, name: str) -> Image:
        """Operations available for a named image"""
        return Image(self.docker, name)

    def list(self, options: Optional['ImageListOptions'] = None) -> RequestDescriptor:
        """
        List images

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageList
        """
        return self.docker.get(with_query('/images/json', options))

    def search(self, term: str, limit: Optional[int] = None) -> RequestDescriptor:
        """
        Search Docker Hub for images

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageSearch
        """
        params = [('term', term)]
        if limit is not None:
            params.append(('limit', str(limit)))
        return self.docker.get(f'/images/search?{urlencode(params)}')

    def pull(self, options: 'PullOptions') -> RequestDescriptor:
        """
        Pull an image, or import one from a URL

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageCreate
        """
        return self.docker.post(with_query('/images/create', options),
                                headers=registry_auth_headers(options.auth))

    def build(self, options: 'BuildOptions') -> RequestDescriptor:
        """
        Build an image from the directory named by options.path

        The directory is packed into a tar archive and sent as the build
        context.

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageBuild
        """
        archive = create_tar_from_directory(options.path)
        return self.build_context(archive, options)

    def build_context(self, archive: bytes, options: Optional['BuildOptions'] = None) -> RequestDescriptor:
        """Build an image from an already packed build context"""
        return self.docker.post(with_query('/build', options), body=archive,
                                content_type=TAR_CONTENT_TYPE)

    def export(self, names: List[str]) -> RequestDescriptor:
        """
        Export several images (name, name:tag or id) into one tarball

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageGetAll
        """
        query = urlencode([('names', name) for name in names])
        return self.docker.get(f'/images/get?{query}')

    def import_(self, tarball: bytes, quiet: Optional[bool] = None) -> RequestDescriptor:
        """
        Load images from a tarball (plain, gzip, bzip2 or xz)

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ImageLoad
        """
        path = '/images/load'
        if quiet is not None:
            path += '?quiet=' + ('true' if quiet else 'false')
        return self.docker.post(path, body=tarball, content_type=TAR_CONTENT_TYPE)

    def prune(self, options: Optional['ImagePruneOptions'] = None) -> RequestDescriptor:
        """Delete unused images"""
        return self.docker.post(with_query('/images/prune', options))


# Options

@dataclass(frozen=True)
class ImageListOptions(QueryOptions):
    """Options for GET /images/json"""

    @classmethod
    def builder(cls) -> 'ImageListOptionsBuilder':
        return ImageListOptionsBuilder()


class ImageListOptionsBuilder(QueryOptionsBuilder):
    options_class = ImageListOptions
    filter_kinds = frozenset({'before', 'dangling', 'label', 'reference', 'since'})

    def all(self, value: bool = True):
        """Show intermediate images too"""
        return self._set('all', value)

    def digests(self, value: bool):
        return self._set('digests', value)

    def filter_name(self, name: str):
        """Legacy name match (`filter` parameter)"""
        return self._set('filter', name)


@dataclass(frozen=True)
class ImagePruneOptions(QueryOptions):
    """Options for POST /images/prune"""

    @classmethod
    def builder(cls) -> 'ImagePruneOptionsBuilder':
        return ImagePruneOptionsBuilder()


class ImagePruneOptionsBuilder(QueryOptionsBuilder):
    options_class = ImagePruneOptions
    filter_kinds = frozenset({'dangling', 'label', 'until'})


@dataclass(frozen=True)
class RmImageOptions(QueryOptions):
    """Options for DELETE /images/{name}"""

    @classmethod
    def builder(cls) -> 'RmImageOptionsBuilder':
        return RmImageOptionsBuilder()


class RmImageOptionsBuilder(QueryOptionsBuilder):
    options_class = RmImageOptions

    def force(self, value: bool):
        return self._set('force', value)

    def noprune(self, value: bool):
        """Do not delete untagged parents"""
        return self._set('noprune', value)


@dataclass(frozen=True)
class TagOptions(QueryOptions):
    """Options for POST /images/{name}/tag"""

    @classmethod
    def builder(cls) -> 'TagOptionsBuilder':
        return TagOptionsBuilder()


class TagOptionsBuilder(QueryOptionsBuilder):
    options_class = TagOptions

    def repo(self, repo: str):
        return self._set('repo', repo)

    def tag(self, tag: str):
        return self._set('tag', tag)


@dataclass(frozen=True)
class PullOptions(QueryOptions):
    """Options for POST /images/create"""

    auth: Optional[RegistryAuth] = None

    @classmethod
    def builder(cls) -> 'PullOptionsBuilder':
        return PullOptionsBuilder()


class PullOptionsBuilder(QueryOptionsBuilder):
    options_class = PullOptions

    def __init__(self):
        super().__init__()
        self._auth: Optional[RegistryAuth] = None

    def image(self, image: str):
        """
        Name of the image to pull; may include a tag or digest.
        Without a tag and without tag() every tag is pulled.
        """
        return self._set('fromImage', image)

    def src(self, src: str):
        """Source URL to import from, or '-' to read the request body"""
        return self._set('fromSrc', src)

    def repo(self, repo: str):
        """Repository name given to an imported image"""
        return self._set('repo', repo)

    def tag(self, tag: str):
        return self._set('tag', tag)

    def platform(self, platform: str):
        return self._set('platform', platform)

    def auth(self, auth: RegistryAuth):
        self._auth = auth
        return self

    def _options_kwargs(self) -> Dict[str, Any]:
        return {'auth': self._auth}


@dataclass(frozen=True)
class PushOptions(QueryOptions):
    """Options for POST /images/{name}/push"""

    auth: Optional[RegistryAuth] = None

    @classmethod
    def builder(cls) -> 'PushOptionsBuilder':
        return PushOptionsBuilder()


class PushOptionsBuilder(QueryOptionsBuilder):
    options_class = PushOptions

    def __init__(self):
        super().__init__()
        self._auth: Optional[RegistryAuth] = None

    def tag(self, tag: str):
        return self._set('tag', tag)

    def auth(self, auth: RegistryAuth):
        self._auth = auth
        return self

    def _options_kwargs(self) -> Dict[str, Any]:
        return {'auth': self._auth}


@dataclass(frozen=True)
class BuildOptions(QueryOptions):
    """
    Options for POST /build

    path is the directory holding the Dockerfile; it is not sent as a
    parameter.
    """

    path: str = ''

    @classmethod
    def builder(cls, path: str = '') -> 'BuildOptionsBuilder':
        return BuildOptionsBuilder(path)


class BuildOptionsBuilder(QueryOptionsBuilder):
    options_class = BuildOptions

    def __init__(self, path: str = ''):
        super().__init__()
        self._path = path

    def dockerfile(self, path: str):
        """Path of the Dockerfile inside the context, defaults to Dockerfile"""
        return self._set('dockerfile', path)

    def tag(self, tag: str):
        """name:tag to apply to the built image"""
        return self._set('t', tag)

    def remote(self, remote: str):
        return self._set('remote', remote)

    def quiet(self, value: bool):
        return self._set('q', value)

    def nocache(self, value: bool):
        """Do not use the cache when building"""
        return self._set('nocache', value)

    def pull(self, value: bool):
        return self._set('pull', value)

    def rm(self, value: bool):
        return self._set('rm', value)

    def forcerm(self, value: bool):
        return self._set('forcerm', value)

    def network_mode(self, mode: str):
        """bridge, host, none, container:<name|id> or a network name"""
        return self._set('networkmode', mode)

    def memory(self, memory: int):
        return self._set('memory', memory)

    def memswap(self, memswap: int):
        return self._set('memswap', memswap)

    def cpu_shares(self, shares: int):
        return self._set('cpushares', shares)

    def cpu_set_cpus(self, cpus: str):
        return self._set('cpusetcpus', cpus)

    def cpu_period(self, period: int):
        return self._set('cpuperiod', period)

    def cpu_quota(self, quota: int):
        return self._set('cpuquota', quota)

    def build_args(self, args: Dict[str, str]):
        return self._set('buildargs', encode_json(args))

    def labels(self, labels: Dict[str, str]):
        return self._set('labels', encode_json(labels))

    def platform(self, platform: str):
        return self._set('platform', platform)

    def target(self, target: str):
        return self._set('target', target)

    def _options_kwargs(self) -> Dict[str, Any]:
        return {'path': self._path}
