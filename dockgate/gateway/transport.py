"""
HTTP transport for RequestDescriptors

One shared httpx client serves every TCP daemon; unix socket daemons get one
client per socket path.
"""

import logging
from typing import Dict, Optional, Tuple
from urllib.parse import unquote, urlsplit, urlunsplit

import httpx
from starlette.responses import StreamingResponse

from ..docker_api.endpoint import UNIX_URL_SCHEME
from ..docker_api.exceptions import TransportError, UpstreamError
from ..docker_api.request import RequestDescriptor

logger = logging.getLogger(__name__)


HOP_BY_HOP_HEADERS = frozenset({
    'connection',
    'keep-alive',
    'proxy-authenticate',
    'proxy-authorization',
    'proxy-connection',
    'te',
    'trailer',
    'trailers',
    'transfer-encoding',
    'upgrade',
})

# Host header sent over unix sockets; the daemon ignores it
UNIX_HOST = 'docker'


def filter_headers(headers: httpx.Headers):
    """Drop hop-by-hop headers, including any named in Connection"""
    dropped = set(HOP_BY_HOP_HEADERS)
    for value in headers.get_list('connection'):
        dropped.update(token.strip().lower() for token in value.split(',') if token.strip())
    return [(name, value) for name, value in headers.multi_items() if name.lower() not in dropped]


class RelayResponse(StreamingResponse):
    """StreamingResponse over an upstream httpx response, closed however the relay ends"""

    def __init__(self, upstream: httpx.Response):
        super().__init__(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            headers=dict(filter_headers(upstream.headers)),
        )
        self.upstream = upstream

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        finally:
            # caller disconnects cancel the relay or fail in send
            await self.upstream.aclose()


class DockerTransport:
    """Sends RequestDescriptors to Docker daemons"""

    def __init__(self, connect_timeout: Optional[float] = 10.0, read_timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            connect_timeout: Seconds allowed to establish a connection
            read_timeout: Seconds allowed between received chunks, None for no limit
            transport: httpx transport used instead of real connections (tests)
        """
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._transport = transport
        self._tcp_client: Optional[httpx.AsyncClient] = None
        self._unix_clients: Dict[str, httpx.AsyncClient] = {}

    @classmethod
    def from_settings(cls, settings) -> 'DockerTransport':
        return cls(connect_timeout=settings.get('connect_timeout'),
                   read_timeout=settings.get('read_timeout'))

    def _new_client(self, uds: Optional[str] = None) -> httpx.AsyncClient:
        transport = self._transport
        if transport is None and uds is not None:
            transport = httpx.AsyncHTTPTransport(uds=uds)
        return httpx.AsyncClient(timeout=self.timeout, transport=transport)

    def _route(self, url: str) -> Tuple[httpx.AsyncClient, str]:
        """Client and httpx-compatible URL for a descriptor URL"""
        parts = urlsplit(url)
        if parts.scheme == UNIX_URL_SCHEME:
            socket_path = unquote(parts.netloc)
            client = self._unix_clients.get(socket_path)
            if client is None:
                client = self._new_client(uds=socket_path)
                self._unix_clients[socket_path] = client
            return client, urlunsplit(('http', UNIX_HOST, parts.path, parts.query, ''))

        if self._tcp_client is None:
            self._tcp_client = self._new_client()
        scheme = 'http' if parts.scheme == 'tcp' else parts.scheme
        return self._tcp_client, urlunsplit((scheme, parts.netloc, parts.path, parts.query, ''))

    async def _send(self, descriptor: RequestDescriptor, stream: bool) -> httpx.Response:
        client, url = self._route(descriptor.url)
        request = client.build_request(
            descriptor.method,
            url,
            headers=list(descriptor.headers),
            content=descriptor.body,
        )
        logger.debug(f"-> {descriptor.method} {descriptor.url}")

        try:
            response = await client.send(request, stream=stream)
        except httpx.TimeoutException as e:
            logger.error(f"Timed out: {descriptor.method} {descriptor.url}: {e!r}")
            raise TransportError(f"Docker daemon timed out: {descriptor.url}",
                                 url=descriptor.url, timeout=True) from e
        except httpx.TransportError as e:
            logger.error(f"Daemon unreachable: {descriptor.method} {descriptor.url}: {e!r}")
            raise TransportError(f"Docker daemon unreachable: {descriptor.url}: {e}",
                                 url=descriptor.url) from e

        logger.debug(f"<- {response.status_code} {descriptor.method} {descriptor.url}")
        return response

    async def forward(self, descriptor: RequestDescriptor) -> RelayResponse:
        """
        Send a request and relay the daemon's answer as it arrives

        Status, headers and body bytes are passed through unchanged, except
        for hop-by-hop headers. The upstream response is closed when the relay
        finishes or the caller goes away.

        Raises:
            TransportError: If the daemon cannot be reached or times out
        """
        response = await self._send(descriptor, stream=True)
        return RelayResponse(response)

    async def fetch(self, descriptor: RequestDescriptor) -> httpx.Response:
        """
        Send a request and read the whole answer

        Raises:
            TransportError: If the daemon cannot be reached or times out
            UpstreamError: On a non-2xx answer
        """
        response = await self._send(descriptor, stream=False)
        if not response.is_success:
            message = response.text
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get('message'):
                message = data['message']
            raise UpstreamError(f"Docker daemon returned {response.status_code}: {message}",
                                response.status_code, response)
        return response

    async def close(self):
        if self._tcp_client is not None:
            await self._tcp_client.aclose()
            self._tcp_client = None
        for client in self._unix_clients.values():
            await client.aclose()
        self._unix_clients.clear()
