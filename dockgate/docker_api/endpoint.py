"""
Docker daemon endpoint addresses
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, unquote, urlsplit


DEFAULT_SOCKET_PATH = '/var/run/docker.sock'
UNIX_URL_SCHEME = 'http+unix'

_DEFAULT_PORTS = {
    'tcp': 2375,
    'http': 80,
    'https': 443,
}


@dataclass(frozen=True)
class DaemonEndpoint:
    """
    Address of one Docker daemon

    Either a network address (scheme, host, port) or a local unix socket path.
    """

    scheme: str
    host: str = ''
    port: Optional[int] = None
    socket_path: Optional[str] = None

    @classmethod
    def parse(cls, address: str) -> 'DaemonEndpoint':
        """
        Parse a daemon address

        Args:
            address: e.g. tcp://10.0.0.5:2375, http://127.0.0.1:8010,
                unix:///var/run/docker.sock or a bare socket path

        Returns:
            DaemonEndpoint

        Raises:
            ValueError: If the address is not understood
        """
        address = (address or '').strip()
        if not address:
            raise ValueError("Empty daemon address")

        if address.startswith('/'):
            return cls(scheme='unix', socket_path=address)

        if address.startswith('unix://'):
            path = address[len('unix://'):]
            if not path.startswith('/'):
                raise ValueError(f"Unix socket path must be absolute: {address}")
            return cls(scheme='unix', socket_path=path)

        if address.startswith(UNIX_URL_SCHEME + '://'):
            parts = urlsplit(address)
            return cls(scheme='unix', socket_path=unquote(parts.netloc))

        parts = urlsplit(address)
        scheme = parts.scheme.lower()
        if scheme not in _DEFAULT_PORTS:
            raise ValueError(f"Unsupported daemon scheme: {address}")
        if not parts.hostname:
            raise ValueError(f"Daemon address has no host: {address}")
        try:
            port = parts.port
        except ValueError as e:
            raise ValueError(f"Invalid daemon port: {address}") from e

        return cls(scheme=scheme, host=parts.hostname, port=port)

    @classmethod
    def from_host_port(cls, host: str, port: int, scheme: str = 'tcp') -> 'DaemonEndpoint':
        """Endpoint from a host/port pair as stored in a daemon directory"""
        if not host:
            raise ValueError("Daemon host is empty")
        return cls(scheme=scheme, host=host, port=int(port))

    @classmethod
    def from_env(cls) -> 'DaemonEndpoint':
        """Endpoint from DOCKER_HOST, falling back to the local socket"""
        return cls.parse(os.environ.get('DOCKER_HOST') or f'unix://{DEFAULT_SOCKET_PATH}')

    @property
    def is_unix(self) -> bool:
        return self.scheme == 'unix'

    @property
    def effective_port(self) -> Optional[int]:
        if self.is_unix:
            return None
        return self.port if self.port is not None else _DEFAULT_PORTS[self.scheme]

    @property
    def url(self) -> str:
        """Base URL that request paths are joined onto"""
        if self.is_unix:
            return f"{UNIX_URL_SCHEME}://{quote(self.socket_path or '', safe='')}"

        host = self.host
        if ':' in host:
            host = f'[{host}]'
        return f"{self.scheme}://{host}:{self.effective_port}"

    def __str__(self):
        if self.is_unix:
            return f"unix://{self.socket_path}"
        return self.url
