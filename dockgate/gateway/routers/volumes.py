"""Volume endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ...docker_api.client import Docker
from ...docker_api.volumes import VolumeCreateOptionsBuilder, VolumeListOptions, VolumePruneOptions
from ..dependencies import apply_filters, docker_client, docker_transport, read_json_body
from ..transport import DockerTransport

router = APIRouter(prefix="/volumes", tags=["volumes"])


@router.get("")
async def list_volumes(filters: Optional[str] = None,
                       docker: Docker = Depends(docker_client),
                       transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(VolumeListOptions.builder(), filters)
    return await transport.forward(docker.volumes().list(builder.build()))


@router.post("")
async def create_volume(request: Request, docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    options = VolumeCreateOptionsBuilder(await read_json_body(request)).build()
    return await transport.forward(docker.volumes().create(options))


@router.post("/prune")
async def prune_volumes(filters: Optional[str] = None,
                        docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(VolumePruneOptions.builder(), filters)
    return await transport.forward(docker.volumes().prune(builder.build()))


@router.get("/{name}")
async def inspect_volume(name: str, docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.volumes().get(name).inspect())


@router.delete("/{name}")
async def delete_volume(name: str, force: Optional[bool] = None,
                        docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.volumes().get(name).delete(force))
