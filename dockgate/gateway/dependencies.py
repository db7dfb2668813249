"""
FastAPI dependencies shared by the gateway routers
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from ..docker_api.client import Docker
from ..docker_api.endpoint import DaemonEndpoint
from ..docker_api.exceptions import RequestBuildError, ResolutionError
from ..docker_api.filters import parse_filters
from ..docker_api.options import QueryOptionsBuilder, RegistryAuth
from .transport import DockerTransport

logger = logging.getLogger(__name__)


async def daemon_endpoint(tenant: str, request: Request) -> DaemonEndpoint:
    """
    Resolve the {tenant} path segment to a daemon endpoint

    Raises:
        ResolutionError: If the tenant has no daemon
    """
    try:
        endpoint = await request.app.state.directory.resolve(tenant)
    except ResolutionError as e:
        logger.warning(f"No daemon for tenant {tenant!r} ({request.url.path}): {e}")
        raise
    logger.debug(f"Tenant {tenant!r} -> {endpoint}")
    return endpoint


def docker_client(endpoint: DaemonEndpoint = Depends(daemon_endpoint)) -> Docker:
    return Docker(endpoint)


def docker_transport(request: Request) -> DockerTransport:
    return request.app.state.transport


def registry_auth(x_registry_auth: Optional[str] = Header(None)) -> Optional[RegistryAuth]:
    """Credential from an inbound X-Registry-Auth header"""
    if not x_registry_auth:
        return None
    return RegistryAuth.from_header(x_registry_auth)


def apply_filters(builder: QueryOptionsBuilder, filters: Optional[str]):
    """Add the inbound JSON `filters` parameter to a builder"""
    parsed = parse_filters(filters)
    if parsed:
        builder.filter(parsed)
    return builder


def parse_json_param(name: str, raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode a query parameter carrying a JSON object (buildargs, labels)"""
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise RequestBuildError(f"{name} is not valid JSON: {e}") from e
    if not isinstance(value, dict):
        raise RequestBuildError(f"{name} must be a JSON object")
    return value


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Inbound JSON object body, empty when no body was sent

    Raises:
        RequestBuildError: If the body is not a JSON object
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise RequestBuildError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise RequestBuildError("Request body must be a JSON object")
    return body
