"""
Daemon directory - maps a tenant identifier to a Docker daemon endpoint
"""

import asyncio
import logging
import os
import sqlite3
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Mapping, Optional, Tuple

from ..docker_api.endpoint import DaemonEndpoint
from ..docker_api.exceptions import ResolutionError

logger = logging.getLogger(__name__)


class DaemonDirectory(ABC):
    """Lookup service for daemon endpoints"""

    @abstractmethod
    async def lookup(self, tenant: str) -> Optional[DaemonEndpoint]:
        """
        Find the daemon serving a tenant

        Returns:
            DaemonEndpoint, or None when the tenant is unknown

        Raises:
            ResolutionError: If the stored address is unusable
        """

    async def resolve(self, tenant: str) -> DaemonEndpoint:
        """Like lookup() but a miss raises ResolutionError"""
        endpoint = await self.lookup(tenant)
        if endpoint is None:
            raise ResolutionError(tenant)
        return endpoint


class StaticDaemonDirectory(DaemonDirectory):
    """Fixed tenant -> address mapping, typically from settings"""

    def __init__(self, daemons: Optional[Mapping[str, str]] = None, default: Optional[str] = None):
        """
        Args:
            daemons: tenant -> daemon address (tcp://host:port, unix:///path, ...)
            default: Address used for tenants missing from the mapping

        Raises:
            ValueError: If an address cannot be parsed
        """
        self._daemons: Dict[str, DaemonEndpoint] = {
            str(tenant): DaemonEndpoint.parse(address)
            for tenant, address in (daemons or {}).items()
        }
        self._default = DaemonEndpoint.parse(default) if default else None

    async def lookup(self, tenant: str) -> Optional[DaemonEndpoint]:
        return self._daemons.get(tenant, self._default)


class SqliteDaemonDirectory(DaemonDirectory):
    """
    Daemon addresses from the host_docker_info table

    Schema: host_docker_info(host_id TEXT PRIMARY KEY, host_ip TEXT, docker_port INTEGER)
    """

    def __init__(self, db_path: Optional[str] = None, scheme: str = 'tcp'):
        """
        Args:
            db_path: Path to SQLite database file. Defaults to $XDG_DATA_HOME/dockgate/daemons.db
            scheme: Scheme used to reach the stored host/port pairs
        """
        if not db_path:
            data_home = os.environ.get('XDG_DATA_HOME')
            if not data_home:
                data_home = os.path.expanduser('~/.local/share')

            app_dir = os.path.join(data_home, 'dockgate')
            os.makedirs(app_dir, exist_ok=True)

            db_path = os.path.join(app_dir, 'daemons.db')

        self.db_path = db_path
        self.scheme = scheme
        self._init_database()
        logger.info(f"Daemon directory database at {self.db_path}")

    def _get_connection(self):
        return sqlite3.connect(self.db_path, check_same_thread=False)

    def _init_database(self):
        conn = self._get_connection()
        try:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS host_docker_info (
                    host_id TEXT PRIMARY KEY,
                    host_ip TEXT NOT NULL,
                    docker_port INTEGER NOT NULL
                )
            ''')
            conn.commit()
        finally:
            conn.close()

    def add_host(self, host_id: str, host_ip: str, docker_port: int):
        """Insert or replace a tenant's daemon address"""
        conn = self._get_connection()
        try:
            conn.execute(
                'INSERT OR REPLACE INTO host_docker_info (host_id, host_ip, docker_port) VALUES (?, ?, ?)',
                (host_id, host_ip, int(docker_port))
            )
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Registered daemon {host_ip}:{docker_port} for {host_id}")

    def remove_host(self, host_id: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute('DELETE FROM host_docker_info WHERE host_id = ?', (host_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _fetch(self, tenant: str) -> Optional[Tuple[str, int]]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                'SELECT host_ip, docker_port FROM host_docker_info WHERE host_id = ?',
                (tenant,)
            ).fetchone()
        finally:
            conn.close()
        return row

    async def lookup(self, tenant: str) -> Optional[DaemonEndpoint]:
        try:
            row = await asyncio.to_thread(self._fetch, tenant)
        except sqlite3.Error as e:
            logger.error(f"Daemon lookup for {tenant} failed: {e}")
            raise ResolutionError(tenant, f"Daemon directory unavailable: {e}") from e

        if row is None:
            return None

        host_ip, docker_port = row
        try:
            return DaemonEndpoint.from_host_port(host_ip, docker_port, scheme=self.scheme)
        except (TypeError, ValueError) as e:
            raise ResolutionError(tenant, f"Invalid daemon address for {tenant}: {e}") from e


class CachedDaemonDirectory(DaemonDirectory):
    """
    TTL cache in front of another directory

    Misses are never cached. Concurrent misses for one tenant may each hit
    the inner directory; the last answer wins.
    """

    def __init__(self, inner: DaemonDirectory, ttl: float = 30.0,
                 clock: Callable[[], float] = time.monotonic):
        self.inner = inner
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, DaemonEndpoint]] = {}

    async def lookup(self, tenant: str) -> Optional[DaemonEndpoint]:
        now = self._clock()
        entry = self._entries.get(tenant)
        if entry is not None:
            expires, endpoint = entry
            if now < expires:
                return endpoint
            self._entries.pop(tenant, None)

        endpoint = await self.inner.lookup(tenant)
        if endpoint is not None:
            self._prune(now)
            self._entries[tenant] = (now + self.ttl, endpoint)
        return endpoint

    def _prune(self, now: float):
        expired = [tenant for tenant, (expires, _) in self._entries.items() if now >= expires]
        for tenant in expired:
            del self._entries[tenant]

    def invalidate(self, tenant: Optional[str] = None):
        """Drop one cached entry, or all of them"""
        if tenant is None:
            self._entries.clear()
        else:
            self._entries.pop(tenant, None)


def create_directory(settings) -> DaemonDirectory:
    """
    Build the directory described by settings

    Args:
        settings: SettingsManager (or anything with get())
    """
    kind = settings.get('directory', 'static')
    if kind == 'sqlite':
        directory: DaemonDirectory = SqliteDaemonDirectory(settings.get('database_path') or None)
    elif kind == 'static':
        directory = StaticDaemonDirectory(settings.get('daemons') or {},
                                          settings.get('default_daemon') or None)
    else:
        raise ValueError(f"Unknown daemon directory type: {kind}")

    ttl = settings.get('cache_ttl') or 0
    if ttl > 0:
        directory = CachedDaemonDirectory(directory, ttl=float(ttl))
    logger.info(f"Daemon directory: {kind} (cache ttl {ttl}s)")
    return directory
