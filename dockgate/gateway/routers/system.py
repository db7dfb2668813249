"""System endpoints: info, ping, version, events, disk usage."""

from typing import Optional

from fastapi import APIRouter, Depends

from ...docker_api.client import Docker, EventsOptions
from ..dependencies import apply_filters, docker_client, docker_transport
from ..transport import DockerTransport

router = APIRouter(tags=["system"])


@router.get("/info")
async def info(docker: Docker = Depends(docker_client),
               transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.info())


@router.get("/ping")
async def ping(docker: Docker = Depends(docker_client),
               transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.ping())


@router.get("/version")
async def version(docker: Docker = Depends(docker_client),
                  transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.version())


@router.get("/system/df")
async def disk_usage(docker: Docker = Depends(docker_client),
                     transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.df())


@router.get("/events")
async def events(
    since: Optional[str] = None,
    until: Optional[str] = None,
    filters: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = EventsOptions.builder()
    if since is not None:
        builder.since(since)
    if until is not None:
        builder.until(until)
    apply_filters(builder, filters)
    return await transport.forward(docker.events(builder.build()))
