"""Tests for daemon directories."""

from typing import Dict, List, Optional

import pytest

from dockgate.docker_api.endpoint import DaemonEndpoint
from dockgate.docker_api.exceptions import ResolutionError
from dockgate.gateway.directory import (
    CachedDaemonDirectory,
    DaemonDirectory,
    SqliteDaemonDirectory,
    StaticDaemonDirectory,
    create_directory,
)


class CountingDirectory(DaemonDirectory):
    """Directory that records every lookup."""

    def __init__(self, entries: Dict[str, str]):
        self.entries = entries
        self.calls: List[str] = []

    async def lookup(self, tenant: str) -> Optional[DaemonEndpoint]:
        self.calls.append(tenant)
        address = self.entries.get(tenant)
        return DaemonEndpoint.parse(address) if address else None


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestStaticDaemonDirectory:
    """StaticDaemonDirectory."""

    @pytest.mark.asyncio
    async def test_lookup_hit(self) -> None:
        directory = StaticDaemonDirectory({"tenant-7": "tcp://10.0.0.5:2375"})
        endpoint = await directory.lookup("tenant-7")
        assert endpoint.url == "tcp://10.0.0.5:2375"

    @pytest.mark.asyncio
    async def test_lookup_miss(self) -> None:
        directory = StaticDaemonDirectory({"tenant-7": "tcp://10.0.0.5:2375"})
        assert await directory.lookup("tenant-8") is None
        with pytest.raises(ResolutionError) as exc_info:
            await directory.resolve("tenant-8")
        assert exc_info.value.tenant == "tenant-8"

    @pytest.mark.asyncio
    async def test_default_daemon(self) -> None:
        directory = StaticDaemonDirectory({}, default="http://127.0.0.1:8010")
        endpoint = await directory.lookup("anyone")
        assert endpoint.url == "http://127.0.0.1:8010"

    def test_invalid_address(self) -> None:
        with pytest.raises(ValueError):
            StaticDaemonDirectory({"t": "ftp://nope"})


class TestSqliteDaemonDirectory:
    """SqliteDaemonDirectory."""

    @pytest.mark.asyncio
    async def test_lookup(self, tmp_path) -> None:
        directory = SqliteDaemonDirectory(str(tmp_path / "daemons.db"))
        directory.add_host("tenant-7", "10.0.0.5", 2375)

        endpoint = await directory.lookup("tenant-7")
        assert endpoint == DaemonEndpoint("tcp", "10.0.0.5", 2375)
        assert await directory.lookup("tenant-8") is None

    @pytest.mark.asyncio
    async def test_replace_and_remove(self, tmp_path) -> None:
        directory = SqliteDaemonDirectory(str(tmp_path / "daemons.db"))
        directory.add_host("tenant-7", "10.0.0.5", 2375)
        directory.add_host("tenant-7", "10.0.0.6", 2376)
        assert (await directory.lookup("tenant-7")).url == "tcp://10.0.0.6:2376"

        assert directory.remove_host("tenant-7") is True
        assert directory.remove_host("tenant-7") is False
        assert await directory.lookup("tenant-7") is None

    @pytest.mark.asyncio
    async def test_unusable_row(self, tmp_path) -> None:
        directory = SqliteDaemonDirectory(str(tmp_path / "daemons.db"))
        directory.add_host("tenant-7", "", 2375)
        with pytest.raises(ResolutionError):
            await directory.lookup("tenant-7")


class TestCachedDaemonDirectory:
    """CachedDaemonDirectory."""

    @pytest.mark.asyncio
    async def test_hits_are_cached_until_ttl(self) -> None:
        inner = CountingDirectory({"t": "tcp://10.0.0.5:2375"})
        clock = FakeClock()
        directory = CachedDaemonDirectory(inner, ttl=30, clock=clock)

        await directory.lookup("t")
        clock.now += 29
        await directory.lookup("t")
        assert inner.calls == ["t"]

        clock.now += 2
        await directory.lookup("t")
        assert inner.calls == ["t", "t"]

    @pytest.mark.asyncio
    async def test_misses_are_not_cached(self) -> None:
        inner = CountingDirectory({})
        directory = CachedDaemonDirectory(inner, ttl=30, clock=FakeClock())

        assert await directory.lookup("t") is None
        inner.entries["t"] = "tcp://10.0.0.5:2375"
        assert (await directory.lookup("t")).host == "10.0.0.5"
        assert inner.calls == ["t", "t"]

    @pytest.mark.asyncio
    async def test_invalidate(self) -> None:
        inner = CountingDirectory({"t": "tcp://10.0.0.5:2375"})
        directory = CachedDaemonDirectory(inner, ttl=30, clock=FakeClock())
        await directory.lookup("t")
        directory.invalidate("t")
        await directory.lookup("t")
        assert len(inner.calls) == 2

    @pytest.mark.asyncio
    async def test_expired_entries_pruned_on_insert(self) -> None:
        inner = CountingDirectory({"a": "tcp://10.0.0.5:2375", "b": "tcp://10.0.0.6:2375"})
        clock = FakeClock()
        directory = CachedDaemonDirectory(inner, ttl=30, clock=clock)

        await directory.lookup("a")
        clock.now += 31
        await directory.lookup("b")

        assert set(directory._entries) == {"b"}

    @pytest.mark.asyncio
    async def test_resolve_goes_through_cache(self) -> None:
        inner = CountingDirectory({"t": "tcp://10.0.0.5:2375"})
        directory = CachedDaemonDirectory(inner, ttl=30, clock=FakeClock())

        await directory.resolve("t")
        await directory.resolve("t")
        with pytest.raises(ResolutionError):
            await directory.resolve("nobody")

        assert inner.calls == ["t", "nobody"]


class TestCreateDirectory:
    """create_directory from settings."""

    def test_static_with_cache(self, settings) -> None:
        settings.update({"daemons": {"t": "tcp://10.0.0.5:2375"}, "cache_ttl": 30}, save=False)
        directory = create_directory(settings)
        assert isinstance(directory, CachedDaemonDirectory)
        assert isinstance(directory.inner, StaticDaemonDirectory)

    def test_sqlite_without_cache(self, settings, tmp_path) -> None:
        settings.update({
            "directory": "sqlite",
            "database_path": str(tmp_path / "d.db"),
            "cache_ttl": 0,
        }, save=False)
        assert isinstance(create_directory(settings), SqliteDaemonDirectory)

    def test_unknown_kind(self, settings) -> None:
        settings.set("directory", "ldap", save=False)
        with pytest.raises(ValueError):
            create_directory(settings)
