"""
Unit tests for the cache-aside accessor.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from shared.errors import StoreError
from shared.test_helpers import SpyCacher
from service_soccer.app.models import Player
from skue.cache import CacheAside, cache_key

PLAYER_ID = "5f1b2c3d4e5f6a7b8c9d0e1f"
KEY = cache_key("players", PLAYER_ID)


@pytest.fixture
def player():
    return Player(id=PLAYER_ID, first_name="Leo", last_name="Messi", age=37)


@pytest.fixture
def events():
    return []


@pytest.fixture
def cacher(events):
    return SpyCacher(events)


class TestCacheAside:
    """Test cases for CacheAside."""

    def test_cache_key(self):
        assert cache_key("players", "abc") == "players-abc"

    @pytest.mark.asyncio
    async def test_cold_read_fetches_and_populates(self, cacher, player):
        cache = CacheAside(cacher, ttl=60)
        fetch = AsyncMock(return_value=player)

        result = await cache.read(KEY, fetch, Player)

        assert result == player
        fetch.assert_awaited_once()
        assert cacher.entries[KEY]["FirstName"] == "Leo"
        assert cacher.ttls[KEY] == 60

    @pytest.mark.asyncio
    async def test_warm_read_skips_the_store(self, cacher, player):
        cache = CacheAside(cacher)
        await cache.read(KEY, AsyncMock(return_value=player), Player)
        fetch = AsyncMock(return_value=player)

        result = await cache.read(KEY, fetch, Player)

        assert result == player
        fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_read_failure_leaves_cache_untouched(self, cacher):
        cache = CacheAside(cacher)
        fetch = AsyncMock(side_effect=StoreError("connection refused"))

        with pytest.raises(StoreError):
            await cache.read(KEY, fetch, Player)

        assert cacher.calls("set") == []

    @pytest.mark.asyncio
    async def test_write_runs_store_before_cache(self, events, cacher, player):
        cache = CacheAside(cacher)

        async def write():
            events.append(("store", "replace", KEY))
            return player

        await cache.write(KEY, write)

        assert events == [("store", "replace", KEY), ("cache", "set", KEY)]

    @pytest.mark.asyncio
    async def test_failed_write_does_not_touch_cache(self, cacher):
        cache = CacheAside(cacher)

        with pytest.raises(StoreError):
            await cache.write(KEY, AsyncMock(side_effect=StoreError("write failed")))

        assert cacher.events == []

    @pytest.mark.asyncio
    async def test_invalidate_runs_store_before_cache(self, events, cacher, player):
        cache = CacheAside(cacher)
        cacher.entries[KEY] = player.model_dump(mode="json", by_alias=True)

        async def delete():
            events.append(("store", "remove", KEY))

        await cache.invalidate(KEY, delete)

        assert events == [("store", "remove", KEY), ("cache", "delete", KEY)]
        assert KEY not in cacher.entries

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_cache_entry(self, cacher, player):
        cache = CacheAside(cacher)
        cacher.entries[KEY] = player.model_dump(mode="json", by_alias=True)

        with pytest.raises(StoreError):
            await cache.invalidate(KEY, AsyncMock(side_effect=StoreError("delete failed")))

        assert KEY in cacher.entries

    @pytest.mark.asyncio
    async def test_without_cacher_calls_the_store_only(self, player):
        cache = CacheAside(None)
        fetch = AsyncMock(return_value=player)

        assert cache.enabled is False
        assert await cache.read(KEY, fetch, Player) == player
        assert await cache.write(KEY, AsyncMock(return_value=player)) == player
        await cache.invalidate(KEY, AsyncMock())
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_errors_are_swallowed(self, player):
        cacher = SpyCacher(fail_on={"get", "set", "delete"})
        metrics = MagicMock()
        cache = CacheAside(cacher, metrics=metrics)

        assert await cache.read(KEY, AsyncMock(return_value=player), Player) == player
        assert await cache.write(KEY, AsyncMock(return_value=player)) == player
        await cache.invalidate(KEY, AsyncMock())

        operations = [call.args[0] for call in metrics.record_cache_error.call_args_list]
        assert operations == ["get", "set", "set", "delete"]

    @pytest.mark.asyncio
    async def test_unreadable_entry_counts_as_miss(self, cacher, player):
        cacher.entries[KEY] = {"Age": "not a number"}
        cache = CacheAside(cacher)
        fetch = AsyncMock(return_value=player)

        result = await cache.read(KEY, fetch, Player)

        assert result == player
        fetch.assert_awaited_once()
        assert cacher.entries[KEY]["FirstName"] == "Leo"

    @pytest.mark.asyncio
    async def test_hits_and_misses_are_recorded(self, cacher, player):
        metrics = MagicMock()
        cache = CacheAside(cacher, metrics=metrics)

        await cache.read(KEY, AsyncMock(return_value=player), Player)
        await cache.read(KEY, AsyncMock(return_value=player), Player)

        calls = [call.args for call in metrics.record_cache_access.call_args_list]
        assert calls == [("players", False), ("players", True)]
