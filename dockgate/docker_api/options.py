"""
Option builders for Docker API operations

Every operation that takes parameters has an immutable options value and a
builder with fluent setters. Options are encoded one of two ways:

    QUERY - form-urlencoded query string (list, logs, pull, tag, ...)
    JSON  - JSON request body (volume create, network create, ...)

Unset parameters never appear in the encoded output.
"""

import base64
import binascii
import copy
import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Optional, Tuple
from urllib.parse import urlencode

from .exceptions import RequestBuildError
from .filters import Filter, encode_value


QUERY = 'query'
JSON = 'json'


def encode_json(value: Any) -> str:
    """Compact JSON, as used for filters and registry auth"""
    return json.dumps(value, separators=(',', ':'))


# Query options

@dataclass(frozen=True)
class QueryOptions:
    """Options encoded as a query string"""

    encoding: ClassVar[str] = QUERY

    params: Tuple[Tuple[str, str], ...] = ()

    def get(self, key: str) -> Optional[str]:
        for name, value in self.params:
            if name == key:
                return value
        return None

    def serialize(self) -> Optional[str]:
        """Query string, or None when no option is set"""
        if not self.params:
            return None
        return urlencode(self.params)


class QueryOptionsBuilder:
    """Base builder for query options"""

    options_class = QueryOptions
    filter_kinds: FrozenSet[str] = frozenset()

    def __init__(self):
        self._params: Dict[str, str] = {}
        self._filters: Dict[str, List[str]] = {}

    def _set(self, key: str, value: Any):
        self._params[key] = encode_value(value)
        return self

    def filter(self, filters: Iterable[Filter]):
        """
        Add filters

        Filters accumulate per kind across calls; the `filters` parameter is
        rewritten each time with everything seen so far.

        Raises:
            RequestBuildError: If this operation does not support a filter kind
        """
        for item in filters:
            if item.kind not in self.filter_kinds:
                supported = ', '.join(sorted(self.filter_kinds)) or 'none'
                raise RequestBuildError(
                    f"Filter '{item.kind}' is not supported here (supported: {supported})"
                )
            self._filters.setdefault(item.kind, []).append(item.value)

        if self._filters:
            self._params['filters'] = encode_json(self._filters)
        return self

    def _options_kwargs(self) -> Dict[str, Any]:
        return {}

    def build(self):
        return self.options_class(params=tuple(self._params.items()), **self._options_kwargs())


# JSON options

@dataclass(frozen=True)
class JsonOptions:
    """Options encoded as a JSON request body"""

    encoding: ClassVar[str] = JSON

    body: Dict[str, Any] = field(default_factory=dict)

    def serialize(self) -> str:
        return json.dumps(self.body)

    def to_bytes(self) -> bytes:
        return self.serialize().encode('utf-8')


class JsonOptionsBuilder:
    """
    Base builder for JSON body options

    Keys may be dotted paths ("HostConfig.Binds") which become nested objects.
    """

    options_class = JsonOptions

    def __init__(self, body: Optional[Dict[str, Any]] = None):
        self._body: Dict[str, Any] = copy.deepcopy(body) if body else {}

    def _set(self, key: str, value: Any):
        target = self._body
        *parents, leaf = key.split('.')
        for parent in parents:
            child = target.get(parent)
            if not isinstance(child, dict):
                child = {}
                target[parent] = child
            target = child
        target[leaf] = value
        return self

    def _options_kwargs(self) -> Dict[str, Any]:
        return {}

    def build(self):
        return self.options_class(body=copy.deepcopy(self._body), **self._options_kwargs())


# Registry authentication

@dataclass(frozen=True, repr=False)
class RegistryAuth:
    """
    Registry credential sent base64-encoded in X-Registry-Auth

    Either username/password (with optional email and server address) or an
    identity token.
    """

    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    server_address: Optional[str] = None
    identity_token: Optional[str] = None

    HEADER: ClassVar[str] = 'X-Registry-Auth'

    @classmethod
    def token(cls, token: str) -> 'RegistryAuth':
        return cls(identity_token=token)

    @classmethod
    def builder(cls) -> 'RegistryAuthBuilder':
        return RegistryAuthBuilder()

    @classmethod
    def from_header(cls, value: str) -> 'RegistryAuth':
        """
        Decode an X-Registry-Auth header value

        Raises:
            RequestBuildError: If the value is not base64-encoded JSON
        """
        text = value.strip()
        text += '=' * (-len(text) % 4)
        try:
            data = json.loads(base64.urlsafe_b64decode(text.encode('ascii')).decode('utf-8'))
        except (ValueError, binascii.Error, UnicodeError) as e:
            raise RequestBuildError("X-Registry-Auth is not base64-encoded JSON") from e
        if not isinstance(data, dict):
            raise RequestBuildError("X-Registry-Auth must encode a JSON object")

        if data.get('identitytoken'):
            return cls.token(str(data['identitytoken']))
        return cls(
            username=data.get('username') or '',
            password=data.get('password') or '',
            email=data.get('email') or None,
            server_address=data.get('serveraddress') or None,
        )

    @property
    def is_token(self) -> bool:
        return self.identity_token is not None

    def to_dict(self) -> Dict[str, str]:
        if self.is_token:
            return {'identitytoken': self.identity_token}

        data = {
            'username': self.username or '',
            'password': self.password or '',
        }
        if self.email is not None:
            data['email'] = self.email
        if self.server_address is not None:
            data['serveraddress'] = self.server_address
        return data

    def serialize(self) -> str:
        """JSON, then URL-safe base64"""
        return base64.urlsafe_b64encode(encode_json(self.to_dict()).encode('utf-8')).decode('ascii')

    def __repr__(self):
        if self.is_token:
            return "RegistryAuth(identity_token='***')"
        return f"RegistryAuth(username={self.username!r}, password='***', server_address={self.server_address!r})"



def registry_auth_headers(auth: Optional[RegistryAuth]) -> Dict[str, str]:
    """X-Registry-Auth header for a request, empty without credentials"""
    if auth is None:
        return {}
    return {RegistryAuth.HEADER: auth.serialize()}

class RegistryAuthBuilder:
    """Builder for password credentials"""

    def __init__(self):
        self._username: Optional[str] = None
        self._password: Optional[str] = None
        self._email: Optional[str] = None
        self._server_address: Optional[str] = None

    def username(self, username: str):
        self._username = username
        return self

    def password(self, password: str):
        self._password = password
        return self

    def email(self, email: str):
        self._email = email
        return self

    def server_address(self, server_address: str):
        self._server_address = server_address
        return self

    def build(self) -> RegistryAuth:
        return RegistryAuth(
            username=self._username or '',
            password=self._password or '',
            email=self._email,
            server_address=self._server_address,
        )


def with_query(path: str, options: Optional[QueryOptions] = None) -> str:
    """Append serialized query options to a path"""
    if options is None:
        return path
    query = options.serialize()
    if query is None:
        return path
    return f"{path}?{query}"
