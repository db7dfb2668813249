"""Container endpoints, forwarded to /containers on the tenant's daemon."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...docker_api.client import Docker
from ...docker_api.containers import (
    ContainerListOptions,
    ContainerOptionsBuilder,
    ContainerPruneOptions,
    LogsOptions,
    RmContainerOptions,
)
from ..dependencies import apply_filters, docker_client, docker_transport, read_json_body
from ..transport import DockerTransport

router = APIRouter(prefix="/containers", tags=["containers"])


def logs_options(follow, stdout, stderr, since, until, timestamps, details, tail) -> LogsOptions:
    builder = LogsOptions.builder()
    if follow is not None:
        builder.follow(follow)
    if stdout is not None:
        builder.stdout(stdout)
    if stderr is not None:
        builder.stderr(stderr)
    if since is not None:
        builder.since(since)
    if until is not None:
        builder.until(until)
    if timestamps is not None:
        builder.timestamps(timestamps)
    if details is not None:
        builder.details(details)
    if tail is not None:
        builder.tail(tail)
    return builder.build()


def _rm_options(v, force, link) -> RmContainerOptions:
    builder = RmContainerOptions.builder()
    if v is not None:
        builder.volumes(v)
    if force is not None:
        builder.force(force)
    if link is not None:
        builder.link(link)
    return builder.build()


@router.get("")
async def list_containers(
    all_: Optional[bool] = Query(None, alias="all"),
    limit: Optional[int] = None,
    size: Optional[bool] = None,
    since: Optional[str] = None,
    before: Optional[str] = None,
    filters: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = ContainerListOptions.builder()
    if all_ is not None:
        builder.all(all_)
    if limit is not None:
        builder.limit(limit)
    if size is not None:
        builder.size(size)
    if since is not None:
        builder.since(since)
    if before is not None:
        builder.before(before)
    apply_filters(builder, filters)
    return await transport.forward(docker.containers().list(builder.build()))


@router.post("")
async def create_container(
    request: Request,
    name: Optional[str] = None,
    platform: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = ContainerOptionsBuilder(body=await read_json_body(request))
    if name:
        builder.name(name)
    if platform:
        builder.platform(platform)
    return await transport.forward(docker.containers().create(builder.build()))


@router.post("/prune")
async def prune_containers(
    filters: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = apply_filters(ContainerPruneOptions.builder(), filters)
    return await transport.forward(docker.containers().prune(builder.build()))


@router.get("/{container_id}")
async def inspect_container(container_id: str, docker: Docker = Depends(docker_client),
                            transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).inspect())


@router.get("/{container_id}/top")
async def top(container_id: str, ps_args: Optional[str] = None,
              docker: Docker = Depends(docker_client),
              transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).top(ps_args))


@router.get("/{container_id}/logs")
async def logs(
    container_id: str,
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
    return await transport.forward(docker.containers().get(container_id).logs(options))


@router.get("/{container_id}/changes")
async def changes(container_id: str, docker: Docker = Depends(docker_client),
                  transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).changes())


@router.get("/{container_id}/export")
async def export(container_id: str, docker: Docker = Depends(docker_client),
                 transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).export())


@router.get("/{container_id}/stats")
async def stats(container_id: str, stream: Optional[bool] = None,
                docker: Docker = Depends(docker_client),
                transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).stats(stream))


@router.post("/{container_id}/start")
async def start(container_id: str, docker: Docker = Depends(docker_client),
                transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).start())


@router.post("/{container_id}/stop")
async def stop(
    container_id: str,
    t: Optional[int] = None,
    wait: Optional[int] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    # t is the Engine API name, wait the gateway's own
    seconds = t if t is not None else wait
    return await transport.forward(docker.containers().get(container_id).stop(seconds))


@router.post("/{container_id}/restart")
async def restart(
    container_id: str,
    t: Optional[int] = None,
    wait: Optional[int] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    seconds = t if t is not None else wait
    return await transport.forward(docker.containers().get(container_id).restart(seconds))


@router.post("/{container_id}/kill")
async def kill(container_id: str, signal: Optional[str] = None,
               docker: Docker = Depends(docker_client),
               transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).kill(signal))


@router.post("/{container_id}/rename")
async def rename(container_id: str, name: str,
                 docker: Docker = Depends(docker_client),
                 transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).rename(name))


@router.post("/{container_id}/pause")
async def pause(container_id: str, docker: Docker = Depends(docker_client),
                transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).pause())


@router.post("/{container_id}/unpause")
async def unpause(container_id: str, docker: Docker = Depends(docker_client),
                  transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).unpause())


@router.post("/{container_id}/attach")
async def attach(container_id: str, docker: Docker = Depends(docker_client),
                 transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).attach())


@router.post("/{container_id}/wait")
async def wait_container(container_id: str, docker: Docker = Depends(docker_client),
                         transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).wait())


@router.post("/{container_id}/remove")
async def remove(
    container_id: str,
    v: Optional[bool] = None,
    force: Optional[bool] = None,
    link: Optional[bool] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    options = _rm_options(v, force, link)
    return await transport.forward(docker.containers().get(container_id).remove(options))


@router.delete("/{container_id}")
async def delete_container(
    container_id: str,
    v: Optional[bool] = None,
    force: Optional[bool] = None,
    link: Optional[bool] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    options = _rm_options(v, force, link)
    return await transport.forward(docker.containers().get(container_id).remove(options))


@router.get("/{container_id}/archive")
async def get_archive(container_id: str, path: str,
                      docker: Docker = Depends(docker_client),
                      transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.containers().get(container_id).archive(path))


@router.put("/{container_id}/archive")
async def put_archive(container_id: str, path: str, request: Request,
                      docker: Docker = Depends(docker_client),
                      transport: DockerTransport = Depends(docker_transport)):
    archive = await request.body()
    return await transport.forward(docker.containers().get(container_id).put_archive(path, archive))
