"""
CLI - command line interface
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from .docker_api.client import Docker
from .docker_api.exceptions import DockerException
from .settings_manager import SettingsManager

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


async def ping_daemon(settings: SettingsManager, tenant: Optional[str] = None) -> dict:
    """
    Fetch /version from a tenant's daemon, or from DOCKER_HOST without a tenant

    Raises:
        DockerException: On resolution, transport or daemon errors
    """
    from .gateway.directory import create_directory
    from .gateway.transport import DockerTransport

    if tenant:
        endpoint = await create_directory(settings).resolve(tenant)
        docker = Docker(endpoint)
    else:
        docker = Docker.from_env()

    transport = DockerTransport.from_settings(settings)
    try:
        response = await transport.fetch(docker.version())
    finally:
        await transport.close()

    logger.info(f"Daemon {docker.endpoint} answered")
    return response.json()


def serve(settings: SettingsManager):
    """Run the gateway with uvicorn"""
    import uvicorn

    from .gateway.app import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.get('host'),
        port=int(settings.get('port')),
        log_level=str(settings.get('log_level')).lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dockgate',
        description='dockgate - multi-tenant Docker Engine API gateway',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s serve --port 8030                       # Run the gateway
  %(prog)s ping                                    # Check DOCKER_HOST
  %(prog)s ping tenant-7                           # Check a tenant's daemon
"""
    )
    parser.add_argument('--settings', help='Settings file (default: $DOCKGATE_SETTINGS or XDG config)')
    parser.add_argument('--log-level', help='Override log level')

    subparsers = parser.add_subparsers(dest='action')

    serve_parser = subparsers.add_parser('serve', help='Run the gateway (default)')
    serve_parser.add_argument('--host', help='Bind address')
    serve_parser.add_argument('--port', type=int, help='Bind port')

    ping_parser = subparsers.add_parser('ping', help='Print a daemon\'s version')
    ping_parser.add_argument('tenant', nargs='?', help='Tenant whose daemon to ping')

    return parser


def run_cli(argv=None):
    """Start CLI application"""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = SettingsManager(args.settings)
    if args.log_level:
        settings.set('log_level', args.log_level, save=False)
    configure_logging(settings.get('log_level'))

    action = args.action or 'serve'
    try:
        if action == 'serve':
            if getattr(args, 'host', None):
                settings.set('host', args.host, save=False)
            if getattr(args, 'port', None):
                settings.set('port', args.port, save=False)
            serve(settings)

        elif action == 'ping':
            version = asyncio.run(ping_daemon(settings, args.tenant))
            print(json.dumps(version, indent=2))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except DockerException as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run_cli()
