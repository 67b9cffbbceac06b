"""Unit tests for the TTL cache backends."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cm_common.cache import InMemoryTtlCache, RedisTtlCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryTtlCache:
    @pytest.mark.asyncio
    async def test_get_before_and_after_expiry(self) -> None:
        clock = FakeClock()
        cache = InMemoryTtlCache(clock=clock)

        await cache.set("k", {"a": 1}, ttl_seconds=10)
        assert await cache.get("k") == {"a": 1}

        clock.now += 10
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_delete_and_clear(self) -> None:
        cache = InMemoryTtlCache()
        await cache.set("a", 1, 60)
        await cache.set("b", 2, 60)

        await cache.delete("a")
        assert await cache.get("a") is None
        assert await cache.get("b") == 2

        await cache.clear()
        assert await cache.get("b") is None

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        assert await InMemoryTtlCache().get("nope") is None


class TestRedisTtlCache:
    @pytest.mark.asyncio
    async def test_values_stored_as_json_under_namespace(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock()
        redis.get = AsyncMock(return_value='{"orders.view_internal": true}')
        cache = RedisTtlCache("permissions", client_factory=AsyncMock(return_value=redis))

        await cache.set("member", {"orders.view_internal": True}, ttl_seconds=300)
        value = await cache.get("member")

        redis.set.assert_awaited_once_with(
            "permissions:member", '{"orders.view_internal": true}', ex=300
        )
        redis.get.assert_awaited_once_with("permissions:member")
        assert value == {"orders.view_internal": True}

    @pytest.mark.asyncio
    async def test_clear_removes_only_namespace(self) -> None:
        async def scan_iter(match: str):
            assert match == "jumpcount:*"
            for key in ("jumpcount:A:B", "jumpcount:C:D"):
                yield key

        redis = MagicMock()
        redis.scan_iter = scan_iter
        redis.delete = AsyncMock()
        cache = RedisTtlCache("jumpcount", client_factory=AsyncMock(return_value=redis))

        await cache.clear()

        redis.delete.assert_awaited_once_with("jumpcount:A:B", "jumpcount:C:D")
