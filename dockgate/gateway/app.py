"""
FastAPI application for the tenant gateway

Every Docker route lives under /{tenant}; the tenant selects the daemon the
request is forwarded to.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..docker_api.exceptions import (
    RequestBuildError,
    ResolutionError,
    TransportError,
    UpstreamError,
)
from ..settings_manager import SettingsManager
from .directory import DaemonDirectory, create_directory
from .routers import ROUTERS
from .transport import DockerTransport

logger = logging.getLogger(__name__)


async def resolution_error_handler(request: Request, exc: ResolutionError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "tenant": exc.tenant, "path": request.url.path},
    )


async def request_build_error_handler(request: Request, exc: RequestBuildError) -> JSONResponse:
    logger.warning(f"Bad request {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "path": request.url.path},
    )


async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    code = status.HTTP_504_GATEWAY_TIMEOUT if exc.timeout else status.HTTP_502_BAD_GATEWAY
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "daemon": exc.url, "path": request.url.path},
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "path": request.url.path},
    )


def create_app(settings: Optional[SettingsManager] = None,
               directory: Optional[DaemonDirectory] = None,
               transport: Optional[DockerTransport] = None) -> FastAPI:
    """
    Build the gateway application

    Args:
        settings: Settings; defaults are used when omitted
        directory: Daemon directory; built from settings when omitted
        transport: Daemon transport; built from settings when omitted
    """
    if settings is None:
        settings = SettingsManager(create=False)
    if directory is None:
        directory = create_directory(settings)
    if transport is None:
        transport = DockerTransport.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.transport.close()

    app = FastAPI(title="dockgate", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.directory = directory
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get('cors_origins') or ["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ResolutionError, resolution_error_handler)
    app.add_exception_handler(RequestBuildError, request_build_error_handler)
    app.add_exception_handler(TransportError, transport_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)

    @app.get("/healthz")
    async def healthcheck() -> dict:
        return {"status": "ok"}

    for router in ROUTERS:
        app.include_router(router, prefix="/{tenant}")

    return app
