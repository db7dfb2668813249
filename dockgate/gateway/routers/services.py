"""Swarm service endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ...docker_api.client import Docker
from ...docker_api.options import RegistryAuth
from ...docker_api.services import ServiceListOptions, ServiceOptionsBuilder
from ..dependencies import (
    apply_filters,
    docker_client,
    docker_transport,
    read_json_body,
    registry_auth,
)
from ..transport import DockerTransport
from .containers import logs_options

router = APIRouter(prefix="/services", tags=["services"])


async def _service_options(request: Request, auth: Optional[RegistryAuth]):
    builder = ServiceOptionsBuilder(await read_json_body(request))
    if auth is not None:
        builder.auth(auth)
    return builder.build()


@router.get("")
async def list_services(filters: Optional[str] = None, status: Optional[bool] = None,
                        docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(ServiceListOptions.builder(), filters)
    if status is not None:
        builder.status(status)
    return await transport.forward(docker.services().list(builder.build()))


@router.post("")
async def create_service(request: Request,
                         auth: Optional[RegistryAuth] = Depends(registry_auth),
                         docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    options = await _service_options(request, auth)
    return await transport.forward(docker.services().create(options))


@router.get("/{service_id}")
async def inspect_service(service_id: str, docker: Docker = Depends(docker_client),
                          transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.services().get(service_id).inspect())


@router.delete("/{service_id}")
async def delete_service(service_id: str, docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.services().get(service_id).delete())


@router.post("/{service_id}/update")
async def update_service(service_id: str, version: int, request: Request,
                         auth: Optional[RegistryAuth] = Depends(registry_auth),
                         docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    options = await _service_options(request, auth)
    return await transport.forward(docker.services().get(service_id).update(version, options))


@router.get("/{service_id}/logs")
async def service_logs(
    service_id: str,
    follow: Optional[bool] = None,
    stdout: Optional[bool] = None,
    stderr: Optional[bool] = None,
    since: Optional[int] = None,
    until: Optional[int] = None,
    timestamps: Optional[bool] = None,
    details: Optional[bool] = None,
    tail: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    options = logs_options(follow, stdout, stderr, since, until, timestamps, details, tail)
    return await transport.forward(docker.services().get(service_id).logs(options))
