"""Image endpoints. Image names may contain '/', so they use path routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from ...docker_api.client import Docker
from ...docker_api.images import (
    BuildOptions,
    ImageListOptions,
    ImagePruneOptions,
    PullOptions,
    PushOptions,
    RmImageOptions,
    TagOptions,
)
from ...docker_api.options import RegistryAuth
from ..dependencies import (
    apply_filters,
    docker_client,
    docker_transport,
    parse_json_param,
    registry_auth,
)
from ..transport import DockerTransport

router = APIRouter(tags=["images"])


@router.get("/images")
async def list_images(
    all_: Optional[bool] = Query(None, alias="all"),
    digests: Optional[bool] = None,
    filter_: Optional[str] = Query(None, alias="filter"),
    filters: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = ImageListOptions.builder()
    if all_ is not None:
        builder.all(all_)
    if digests is not None:
        builder.digests(digests)
    if filter_:
        builder.filter_name(filter_)
    apply_filters(builder, filters)
    return await transport.forward(docker.images().list(builder.build()))


@router.get("/images/search")
async def search(term: str, limit: Optional[int] = None,
                 docker: Docker = Depends(docker_client),
                 transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.images().search(term, limit))


@router.post("/images/create")
async def pull(
    from_image: Optional[str] = Query(None, alias="fromImage"),
    from_src: Optional[str] = Query(None, alias="fromSrc"),
    repo: Optional[str] = None,
    tag: Optional[str] = None,
    platform: Optional[str] = None,
    auth: Optional[RegistryAuth] = Depends(registry_auth),
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    builder = PullOptions.builder()
    if from_image:
        builder.image(from_image)
    if from_src:
        builder.src(from_src)
    if repo:
        builder.repo(repo)
    if tag:
        builder.tag(tag)
    if platform:
        builder.platform(platform)
    if auth is not None:
        builder.auth(auth)
    return await transport.forward(docker.images().pull(builder.build()))


@router.post("/build")
async def build(
    request: Request,
    dockerfile: Optional[str] = None,
    t: Optional[str] = None,
    remote: Optional[str] = None,
    q: Optional[bool] = None,
    nocache: Optional[bool] = None,
    pull: Optional[bool] = None,
    rm: Optional[bool] = None,
    forcerm: Optional[bool] = None,
    networkmode: Optional[str] = None,
    memory: Optional[int] = None,
    memswap: Optional[int] = None,
    cpushares: Optional[int] = None,
    cpusetcpus: Optional[str] = None,
    cpuperiod: Optional[int] = None,
    cpuquota: Optional[int] = None,
    buildargs: Optional[str] = None,
    labels: Optional[str] = None,
    platform: Optional[str] = None,
    target: Optional[str] = None,
    docker: Docker = Depends(docker_client),
    transport: DockerTransport = Depends(docker_transport),
):
    """Build from a tar build context sent as the request body"""
    builder = BuildOptions.builder()
    setters = [
        (builder.dockerfile, dockerfile),
        (builder.tag, t),
        (builder.remote, remote),
        (builder.quiet, q),
        (builder.nocache, nocache),
        (builder.pull, pull),
        (builder.rm, rm),
        (builder.forcerm, forcerm),
        (builder.network_mode, networkmode),
        (builder.memory, memory),
        (builder.memswap, memswap),
        (builder.cpu_shares, cpushares),
        (builder.cpu_set_cpus, cpusetcpus),
        (builder.cpu_period, cpuperiod),
        (builder.cpu_quota, cpuquota),
        (builder.build_args, parse_json_param('buildargs', buildargs)),
        (builder.labels, parse_json_param('labels', labels)),
        (builder.platform, platform),
        (builder.target, target),
    ]
    for setter, value in setters:
        if value is not None:
            setter(value)

    archive = await request.body()
    return await transport.forward(docker.images().build_context(archive, builder.build()))


@router.get("/images/get")
async def export_images(names: List[str] = Query([]),
                        docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.images().export(names))


@router.post("/images/load")
async def load(request: Request, quiet: Optional[bool] = None,
               docker: Docker = Depends(docker_client),
               transport: DockerTransport = Depends(docker_transport)):
    tarball = await request.body()
    return await transport.forward(docker.images().import_(tarball, quiet))


@router.post("/images/prune")
async def prune_images(filters: Optional[str] = None,
                       docker: Docker = Depends(docker_client),
                       transport: DockerTransport = Depends(docker_transport)):
    builder = apply_filters(ImagePruneOptions.builder(), filters)
    return await transport.forward(docker.images().prune(builder.build()))


@router.get("/images/{name:path}/json")
async def inspect_image(name: str, docker: Docker = Depends(docker_client),
                        transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.images().get(name).inspect())


@router.get("/images/{name:path}/history")
async def history(name: str, docker: Docker = Depends(docker_client),
                  transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.images().get(name).history())


@router.get("/images/{name:path}/get")
async def export_image(name: str, docker: Docker = Depends(docker_client),
                       transport: DockerTransport = Depends(docker_transport)):
    return await transport.forward(docker.images().get(name).export())


@router.post("/images/{name:path}/tag")
async def tag_image(name: str, repo: Optional[str] = None, tag: Optional[str] = None,
                    docker: Docker = Depends(docker_client),
                    transport: DockerTransport = Depends(docker_transport)):
    builder = TagOptions.builder()
    if repo:
        builder.repo(repo)
    if tag:
        builder.tag(tag)
    return await transport.forward(docker.images().get(name).tag(builder.build()))


@router.post("/images/{name:path}/push")
async def push(name: str, tag: Optional[str] = None,
               auth: Optional[RegistryAuth] = Depends(registry_auth),
               docker: Docker = Depends(docker_client),
               transport: DockerTransport = Depends(docker_transport)):
    builder = PushOptions.builder()
    if tag:
        builder.tag(tag)
    if auth is not None:
        builder.auth(auth)
    return await transport.forward(docker.images().get(name).push(builder.build()))


@router.delete("/images/{name:path}")
async def delete_image(name: str, force: Optional[bool] = None, noprune: Optional[bool] = None,
                       docker: Docker = Depends(docker_client),
                       transport: DockerTransport = Depends(docker_transport)):
    builder = RmImageOptions.builder()
    if force is not None:
        builder.force(force)
    if noprune is not None:
        builder.noprune(noprune)
    return await transport.forward(docker.images().get(name).delete(builder.build()))
