"""
Tenant gateway: resolves a daemon per request and relays Docker API calls
"""

from .app import create_app
from .directory import (
    CachedDaemonDirectory,
    DaemonDirectory,
    SqliteDaemonDirectory,
    StaticDaemonDirectory,
    create_directory,
)
from .transport import DockerTransport

__all__ = [
    'create_app',
    'DaemonDirectory',
    'StaticDaemonDirectory',
    'SqliteDaemonDirectory',
    'CachedDaemonDirectory',
    'create_directory',
    'DockerTransport',
]
