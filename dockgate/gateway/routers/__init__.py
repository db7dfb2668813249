from . import containers, images, networks, services, system, volumes

ROUTERS = [
    system.router,
    containers.router,
    images.router,
    volumes.router,
    networks.router,
    services.router,
]
