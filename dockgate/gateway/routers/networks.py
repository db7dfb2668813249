"""Network endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ...docker_api.client import Docker
from ...docker_api.networks import (
    ContainerConnectionOptionsBuilder,
    NetworkCreateOptionsBuilder,
    NetworkListOptions,
    NetworkPruneOptions,
)
from ..dependencies import apply_filters, docker_client, docker_transport, read_json_body
from ..transport import DockerTransport

router = APIRouter(prefix="/networks", tags=["networks"])


@router.get("")
async def list_networks(filters: Optional[str] = None,
                        docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(NetworkListOptions.builder(), filters)
    return await transport.forward(docker.networks().list(builder.build()))


@router.post("")
async def create_network(request: Request, docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    options = NetworkCreateOptionsBuilder(body=await read_json_body(request)).build()
    return await transport.forward(docker.networks().create(options))


@router.post("/prune")
async def prune_networks(filters: Optional[str] = None,
                         docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(NetworkPruneOptions.builder(), filters)
    return await transport.forward(docker.networks().prune(builder.build()))


@router.get("/{network_id}")
async def inspect_network(network_id: str, docker: Docker = Depends(docker_client),
                          transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.networks().get(network_id).inspect())


@router.delete("/{network_id}")
async def delete_network(network_id: str, docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.networks().get(network_id).delete())


@router.post("/{network_id}/connect")
async def connect(network_id: str, request: Request,
                  docker: Docker = Depends(docker_client),
                  transport: DockerTransport = Depends(docker_transport)):
    options = ContainerConnectionOptionsBuilder(body=await read_json_body(request)).build()
    return await transport.forward(docker.networks().get(network_id).connect(options))


@router.post("/{network_id}/disconnect")
async def disconnect(network_id: str, request: Request,
                     docker: Docker = Depends(docker_client),
                     transport: DockerTransport = Depends(docker_transport)):
    options = ContainerConnectionOptionsBuilder(body=await read_json_body(request)).build()
    return await transport.forward(docker.networks().get(network_id).disconnect(options))
