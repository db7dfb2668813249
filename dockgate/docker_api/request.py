"""
Request descriptors for the Docker Engine API

Building a request is pure: nothing here touches the network. The transport
takes a RequestDescriptor and sends it.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

from .exceptions import RequestBuildError


JSON_CONTENT_TYPE = 'application/json'
TAR_CONTENT_TYPE = 'application/tar'
X_TAR_CONTENT_TYPE = 'application/x-tar'

# RFC 3986 unreserved + reserved (minus fragment/IP-literal delimiters) + '%'
_URL_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?@!$&'()*+,;=%]*")
_BAD_PERCENT = re.compile(r'%(?![0-9A-Fa-f]{2})')
# RFC 7230 token
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

Headers = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully assembled, not yet sent HTTP request"""

    method: str
    url: str
    headers: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    content_type: Optional[str] = None

    @property
    def path(self) -> str:
        """Path plus query string, as sent on the request line"""
        parts = urlsplit(self.url)
        if parts.query:
            return f"{parts.path}?{parts.query}"
        return parts.path

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup"""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def __repr__(self):
        # header values may carry registry credentials
        names = ', '.join(name for name, _ in self.headers)
        size = len(self.body) if self.body is not None else 0
        return f"<RequestDescriptor {self.method} {self.url} headers=[{names}] body={size}b>"


def path_segment(value: str, safe: str = '') -> str:
    """
    Percent-encode an identifier for use inside a request path

    Args:
        value: Container id, volume name, image reference, ...
        safe: Characters left as they are (image names keep '/:@')
    """
    encoded = quote(str(value), safe=safe)
    # dot segments would be collapsed by join_url
    return '/'.join(
        part.replace('.', '%2E') if part in ('.', '..') else part
        for part in encoded.split('/')
    )


def _check_reference(reference: str):
    if not _URL_CHARS.fullmatch(reference):
        bad = sorted({ch for ch in reference if not _URL_CHARS.fullmatch(ch)})
        raise RequestBuildError(f"Invalid characters in request path {reference!r}: {bad!r}")
    if _BAD_PERCENT.search(reference):
        raise RequestBuildError(f"Malformed percent-encoding in request path {reference!r}")


def _remove_dot_segments(path: str) -> str:
    output = []
    for segment in path.split('/'):
        if segment == '..':
            if len(output) > 1:
                output.pop()
        elif segment != '.':
            output.append(segment)
    result = '/'.join(output)
    if path.endswith(('/.', '/..')):
        result += '/'
    return result


def join_url(base: str, reference: str) -> str:
    """
    Join a relative request path onto an endpoint base URL

    Args:
        base: Absolute endpoint URL (e.g. tcp://10.0.0.5:2375)
        reference: Relative reference, normally an absolute path with optional query

    Returns:
        Absolute URL

    Raises:
        RequestBuildError: If the reference cannot be joined
    """
    _check_reference(reference)

    base_parts = urlsplit(base)
    if not base_parts.scheme or not base_parts.netloc:
        raise RequestBuildError(f"Endpoint URL is not absolute: {base!r}")

    ref = urlsplit(reference)
    if ref.scheme or ref.netloc:
        raise RequestBuildError(f"Request path must be relative to the endpoint: {reference!r}")

    query = ref.query
    if ref.path.startswith('/'):
        path = ref.path
    elif not ref.path:
        path = base_parts.path or '/'
        if not query:
            query = base_parts.query
    else:
        directory = base_parts.path.rsplit('/', 1)[0] if '/' in base_parts.path else ''
        path = f"{directory}/{ref.path}"

    return urlunsplit((base_parts.scheme, base_parts.netloc, _remove_dot_segments(path), query, ''))


def build_request(endpoint_url: str, method: str, path: str,
                  body: Optional[bytes] = None, content_type: Optional[str] = None,
                  headers: Headers = None) -> RequestDescriptor:
    """
    Assemble a transport-ready request

    Args:
        endpoint_url: Daemon base URL
        method: HTTP method, used exactly as given
        path: Request path with optional query string
        body: Raw request body
        content_type: Content type of the body (ignored without a body)
        headers: Extra headers, copied verbatim; last write wins on duplicates

    Returns:
        RequestDescriptor

    Raises:
        RequestBuildError: On an invalid method or a path that cannot be joined
    """
    if not method or not _METHOD_TOKEN.fullmatch(method):
        raise RequestBuildError(f"Invalid HTTP method: {method!r}")

    url = join_url(endpoint_url, path)

    merged: Dict[str, Tuple[str, str]] = {}
    if headers:
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            merged[name.lower()] = (name, str(value))

    if body is not None:
        if isinstance(body, str):
            body = body.encode('utf-8')
        if content_type:
            merged.pop('content-type', None)
            merged['content-type'] = ('Content-Type', content_type)
    else:
        content_type = None

    return RequestDescriptor(
        method=method,
        url=url,
        headers=tuple(merged.values()),
        body=body,
        content_type=content_type,
    )
