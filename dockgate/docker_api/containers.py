"""
Docker Containers API

API Reference: https://docs.docker.com/engine/api/v1.41/#tag/Container
"""

import posixpath
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

from .options import (
    JsonOptions,
    JsonOptionsBuilder,
    QueryOptions,
    QueryOptionsBuilder,
    with_query,
)
from .request import RequestDescriptor, JSON_CONTENT_TYPE, X_TAR_CONTENT_TYPE, path_segment
from .tar_utils import create_tar_from_bytes


Wait = Union[int, float, timedelta]


def _seconds(wait: Wait) -> int:
    if isinstance(wait, timedelta):
        return int(wait.total_seconds())
    return int(wait)


@dataclass(frozen=True)
class Container:
    """Operations on one container"""

    docker: Any
    id: str

    @property
    def _path(self) -> str:
        return f'/containers/{path_segment(self.id)}'

    def inspect(self) -> RequestDescriptor:
        return self.docker.get(f'{self._path}/json')

    def top(self, ps_args: Optional[str] = None) -> RequestDescriptor:
        """List processes running inside the container"""
        path = f'{self._path}/top'
        if ps_args:
            path += '?' + urlencode([('ps_args', ps_args)])
        return self.docker.get(path)

    def logs(self, options: Optional['LogsOptions'] = None) -> RequestDescriptor:
        return self.docker.get(with_query(f'{self._path}/logs', options))

    def changes(self) -> RequestDescriptor:
        """Filesystem changes relative to the image"""
        return self.docker.get(f'{self._path}/changes')

    def export(self) -> RequestDescriptor:
        """Export the filesystem as a tarball"""
        return self.docker.get(f'{self._path}/export')

    def stats(self, stream: Optional[bool] = None) -> RequestDescriptor:
        """Resource usage statistics; streamed unless stream is False"""
        path = f'{self._path}/stats'
        if stream is not None:
            path += '?stream=' + ('true' if stream else 'false')
        return self.docker.get(path)

    def start(self) -> RequestDescriptor:
        return self.docker.post(f'{self._path}/start')

    def stop(self, wait: Optional[Wait] = None) -> RequestDescriptor:
        """
        Stop the container

        Args:
            wait: Seconds (or timedelta) to wait before killing the container
        """
        path = f'{self._path}/stop'
        if wait is not None:
            path += f'?t={_seconds(wait)}'
        return self.docker.post(path)

    def restart(self, wait: Optional[Wait] = None) -> RequestDescriptor:
        path = f'{self._path}/restart'
        if wait is not None:
            path += f'?t={_seconds(wait)}'
        return self.docker.post(path)

    def kill(self, signal: Optional[str] = None) -> RequestDescriptor:
        """Send a signal, SIGKILL unless given"""
        path = f'{self._path}/kill'
        if signal:
            path += '?' + urlencode([('signal', signal)])
        return self.docker.post(path)

    def rename(self, name: str) -> RequestDescriptor:
        return self.docker.post(f'{self._path}/rename?' + urlencode([('name', name)]))

    def pause(self) -> RequestDescriptor:
        return self.docker.post(f'{self._path}/pause')

    def unpause(self) -> RequestDescriptor:
        return self.docker.post(f'{self._path}/unpause')

    def attach(self) -> RequestDescriptor:
        """Attach to stdout/stderr as a stream"""
        return self.docker.post(f'{self._path}/attach?stream=1&stdout=1&stderr=1')

    def wait(self) -> RequestDescriptor:
        """Block until the container stops"""
        return self.docker.post(f'{self._path}/wait')

    def delete(self) -> RequestDescriptor:
        return self.docker.delete(self._path)

    def remove(self, options: Optional['RmContainerOptions'] = None) -> RequestDescriptor:
        """Remove the container, with force/volume/link options"""
        return self.docker.delete(with_query(self._path, options))

    def archive(self, path: str) -> RequestDescriptor:
        """Download a path from the container as a tar archive"""
        return self.docker.get(f'{self._path}/archive?' + urlencode([('path', path)]))

    def put_archive(self, path: str, archive: bytes) -> RequestDescriptor:
        """Extract a tar archive into a directory of the container"""
        return self.docker.put(f'{self._path}/archive?' + urlencode([('path', path)]),
                               body=archive, content_type=X_TAR_CONTENT_TYPE)

    def copy_file_into(self, path: str, data: bytes) -> RequestDescriptor:
        """
        Write one file into the container

        Args:
            path: Absolute destination path of the file
            data: File content
        """
        directory, name = posixpath.split(path)
        return self.put_archive(directory or '/', create_tar_from_bytes(name, data))


@dataclass(frozen=True)
class Containers:
    """Docker Containers collection"""

    docker: Any

    def get(self, container_id: str) -> Container:
        """Operations available for a container (id or name)"""
        return Container(self.docker, container_id)

    def list(self, options: Optional['ContainerListOptions'] = None) -> RequestDescriptor:
        """
        List containers

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ContainerList
        """
        return self.docker.get(with_query('/containers/json', options))

    def create(self, options: 'ContainerOptions') -> RequestDescriptor:
        """
        Create a container

        API Reference: https://docs.docker.com/engine/api/v1.41/#operation/ContainerCreate
        """
        params = []
        if options.name:
            params.append(('name', options.name))
        if options.platform:
            params.append(('platform', options.platform))

        path = '/containers/create'
        if params:
            path += '?' + urlencode(params)
        return self.docker.post(path, body=options.to_bytes(), content_type=JSON_CONTENT_TYPE)

    def prune(self, options: Optional['ContainerPruneOptions'] = None) -> RequestDescriptor:
        """Delete stopped containers"""
        return self.docker.post(with_query('/containers/prune', options))


# Options

@dataclass(frozen=True)
class ContainerListOptions(QueryOptions):
    """Options for GET /containers/json"""

    @classmethod
    def builder(cls) -> 'ContainerListOptionsBuilder':
        return ContainerListOptionsBuilder()


class ContainerListOptionsBuilder(QueryOptionsBuilder):
    options_class = ContainerListOptions
    filter_kinds = frozenset({
        'ancestor', 'before', 'expose', 'exited', 'health', 'id', 'isolation',
        'is-task', 'label', 'name', 'network', 'publish', 'since', 'status', 'volume',
    })

    def all(self, value: bool = True):
        """Include stopped containers"""
        return self._set('all', value)

    def limit(self, limit: int):
        return self._set('limit', limit)

    def size(self, value: bool):
        return self._set('size', value)

    def since(self, container: str):
        return self._set('since', container)

    def before(self, container: str):
        return self._set('before', container)


@dataclass(frozen=True)
class ContainerPruneOptions(QueryOptions):
    """Options for POST /containers/prune"""

    @classmethod
    def builder(cls) -> 'ContainerPruneOptionsBuilder':
        return ContainerPruneOptionsBuilder()


class ContainerPruneOptionsBuilder(QueryOptionsBuilder):
    options_class = ContainerPruneOptions
    filter_kinds = frozenset({'label', 'until'})


@dataclass(frozen=True)
class LogsOptions(QueryOptions):
    """Options for container and service logs"""

    @classmethod
    def builder(cls) -> 'LogsOptionsBuilder':
        return LogsOptionsBuilder()


class LogsOptionsBuilder(QueryOptionsBuilder):
    options_class = LogsOptions

    def follow(self, value: bool):
        return self._set('follow', value)

    def stdout(self, value: bool):
        return self._set('stdout', value)

    def stderr(self, value: bool):
        return self._set('stderr', value)

    def since(self, timestamp: int):
        return self._set('since', timestamp)

    def until(self, timestamp: int):
        return self._set('until', timestamp)

    def timestamps(self, value: bool):
        return self._set('timestamps', value)

    def details(self, value: bool):
        return self._set('details', value)

    def tail(self, tail: Union[int, str]):
        """Number of lines from the end, or 'all'"""
        return self._set('tail', tail)


@dataclass(frozen=True)
class RmContainerOptions(QueryOptions):
    """Options for DELETE /containers/{id}"""

    @classmethod
    def builder(cls) -> 'RmContainerOptionsBuilder':
        return RmContainerOptionsBuilder()


class RmContainerOptionsBuilder(QueryOptionsBuilder):
    options_class = RmContainerOptions

    def force(self, value: bool):
        return self._set('force', value)

    def volumes(self, value: bool):
        """Remove anonymous volumes too"""
        return self._set('v', value)

    def link(self, value: bool):
        return self._set('link', value)


@dataclass(frozen=True)
class ContainerOptions(JsonOptions):
    """
    Body of POST /containers/create

    name and platform travel in the query string.
    """

    name: Optional[str] = None
    platform: Optional[str] = None

    @classmethod
    def builder(cls, image: Optional[str] = None) -> 'ContainerOptionsBuilder':
        return ContainerOptionsBuilder(image)


class ContainerOptionsBuilder(JsonOptionsBuilder):
    options_class = ContainerOptions

    def __init__(self, image: Optional[str] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(body)
        self._name: Optional[str] = None
        self._platform: Optional[str] = None
        if image is not None:
            self._set('Image', image)

    def name(self, name: str):
        self._name = name
        return self

    def platform(self, platform: str):
        self._platform = platform
        return self

    def image(self, image: str):
        return self._set('Image', image)

    def cmd(self, cmd: List[str]):
        return self._set('Cmd', list(cmd))

    def entrypoint(self, entrypoint: List[str]):
        return self._set('Entrypoint', list(entrypoint))

    def env(self, env: Union[List[str], Dict[str, str]]):
        """Environment as ["K=V", ...] or a mapping"""
        if isinstance(env, dict):
            env = [f"{key}={value}" for key, value in env.items()]
        return self._set('Env', list(env))

    def labels(self, labels: Dict[str, str]):
        return self._set('Labels', dict(labels))

    def working_dir(self, path: str):
        return self._set('WorkingDir', path)

    def user(self, user: str):
        return self._set('User', user)

    def hostname(self, hostname: str):
        return self._set('Hostname', hostname)

    def domainname(self, domainname: str):
        return self._set('Domainname', domainname)

    def tty(self, value: bool):
        return self._set('Tty', value)

    def open_stdin(self, value: bool):
        return self._set('OpenStdin', value)

    def attach_stdin(self, value: bool):
        return self._set('AttachStdin', value)

    def attach_stdout(self, value: bool):
        return self._set('AttachStdout', value)

    def attach_stderr(self, value: bool):
        return self._set('AttachStderr', value)

    def stop_signal(self, signal: str):
        return self._set('StopSignal', signal)

    def stop_timeout(self, wait: Wait):
        return self._set('StopTimeout', _seconds(wait))

    def expose(self, port: int, protocol: str = 'tcp'):
        """Expose a container port without publishing it"""
        exposed = dict(self._body.get('ExposedPorts') or {})
        exposed[f"{port}/{protocol}"] = {}
        return self._set('ExposedPorts', exposed)

    def publish(self, port: int, host_port: Optional[int] = None, protocol: str = 'tcp',
                host_ip: Optional[str] = None):
        """Expose a container port and bind it on the host"""
        self.expose(port, protocol)
        binding = {'HostPort': '' if host_port is None else str(host_port)}
        if host_ip:
            binding['HostIp'] = host_ip
        bindings = dict((self._body.get('HostConfig') or {}).get('PortBindings') or {})
        bindings.setdefault(f"{port}/{protocol}", []).append(binding)
        return self._set('HostConfig.PortBindings', bindings)

    def volumes(self, binds: List[str]):
        """Bind mounts as host:container[:mode]"""
        return self._set('HostConfig.Binds', list(binds))

    def links(self, links: List[str]):
        return self._set('HostConfig.Links', list(links))

    def extra_hosts(self, hosts: List[str]):
        return self._set('HostConfig.ExtraHosts', list(hosts))

    def network_mode(self, mode: str):
        return self._set('HostConfig.NetworkMode', mode)

    def memory(self, memory: int):
        return self._set('HostConfig.Memory', memory)

    def memory_swap(self, memory_swap: int):
        return self._set('HostConfig.MemorySwap', memory_swap)

    def cpu_shares(self, shares: int):
        return self._set('HostConfig.CpuShares', shares)

    def privileged(self, value: bool):
        return self._set('HostConfig.Privileged', value)

    def auto_remove(self, value: bool):
        return self._set('HostConfig.AutoRemove', value)

    def capabilities(self, capabilities: List[str]):
        return self._set('HostConfig.CapAdd', list(capabilities))

    def userns_mode(self, mode: str):
        return self._set('HostConfig.UsernsMode', mode)

    def log_driver(self, driver: str):
        return self._set('HostConfig.LogConfig.Type', driver)

    def restart_policy(self, name: str, maximum_retry_count: int = 0):
        """no, always, unless-stopped or on-failure (with a retry count)"""
        policy = {'Name': name}
        if name == 'on-failure':
            policy['MaximumRetryCount'] = maximum_retry_count
        return self._set('HostConfig.RestartPolicy', policy)

    def _options_kwargs(self) -> Dict[str, Any]:
        return {'name': self._name, 'platform': self._platform}
