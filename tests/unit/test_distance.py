"""Unit tests for jump-count resolution and the FIO distance client."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.cm_common.cache import InMemoryTtlCache
from src.cm_market.domain.distance import jump_sort_key, resolve_jump_counts
from src.cm_market.infrastructure.distance_client import FioApiError, FioDistanceClient


class TestResolveJumpCounts:
    @pytest.mark.asyncio
    async def test_one_lookup_per_distinct_location(self) -> None:
        oracle = MagicMock()
        oracle.get_distance = AsyncMock(return_value=4)

        result = await resolve_jump_counts(oracle, ["BEN", "MOR", "BEN", "BEN"], "ANT")

        assert result == {"BEN": 4, "MOR": 4}
        assert oracle.get_distance.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_degrades_to_none(self) -> None:
        async def get_distance(src: str, dst: str) -> int | None:
            if src == "BAD":
                raise RuntimeError("upstream timeout")
            return 3

        oracle = MagicMock()
        oracle.get_distance = AsyncMock(side_effect=get_distance)

        result = await resolve_jump_counts(oracle, ["BAD", "BEN"], "ANT")

        assert result == {"BAD": None, "BEN": 3}

    @pytest.mark.asyncio
    async def test_empty_locations(self) -> None:
        oracle = MagicMock()
        oracle.get_distance = AsyncMock()
        assert await resolve_jump_counts(oracle, [], "ANT") == {}
        oracle.get_distance.assert_not_called()

    def test_unknown_sorts_last(self) -> None:
        values = [None, 3, 0, None, 12]
        assert sorted(values, key=jump_sort_key) == [0, 3, 12, None, None]


def _client(handler) -> tuple[FioDistanceClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(record))
    client = FioDistanceClient(
        base_url="https://fio.test", client=http, cache=InMemoryTtlCache(), ttl_seconds=60
    )
    return client, seen


class TestFioDistanceClient:
    @pytest.mark.asyncio
    async def test_fetches_jump_count(self) -> None:
        client, seen = _client(lambda req: httpx.Response(200, json=5))

        assert await client.get_distance("BEN", "MOR") == 5
        assert seen[0].url.path == "/systemstars/jumpcount/BEN/MOR"
        await client.close()

    @pytest.mark.asyncio
    async def test_cache_is_direction_independent(self) -> None:
        client, seen = _client(lambda req: httpx.Response(200, json=3))

        await client.get_distance("BEN", "MOR")
        await client.get_distance("MOR", "BEN")

        assert len(seen) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_unknown_route_is_none_and_cached(self) -> None:
        client, seen = _client(lambda req: httpx.Response(404, text="Route not found"))

        assert await client.get_distance("UNKNOWN1", "UNKNOWN2") is None
        assert await client.get_distance("UNKNOWN1", "UNKNOWN2") is None
        assert len(seen) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_raises(self) -> None:
        client, seen = _client(lambda req: httpx.Response(500, text="boom"))

        with pytest.raises(FioApiError) as exc_info:
            await client.get_distance("A", "B")
        assert exc_info.value.status_code == 500
        await client.close()

    @pytest.mark.asyncio
    async def test_same_location_is_zero_without_request(self) -> None:
        client, seen = _client(lambda req: httpx.Response(200, json=9))

        assert await client.get_distance("BEN", "ben") == 0
        assert seen == []
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl,expected", [(0, 0), (None, "default")])
    async def test_explicit_ttl_is_honoured(self, ttl, expected) -> None:
        from config.settings import settings

        cache = MagicMock()
        cache.get = AsyncMock(return_value=None)
        cache.set = AsyncMock()
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda req: httpx.Response(200, json=4))
        )
        client = FioDistanceClient(
            base_url="https://fio.test", client=http, cache=cache, ttl_seconds=ttl
        )

        await client.get_distance("BEN", "MOR")

        if expected == "default":
            expected = settings.JUMP_COUNT_CACHE_TTL_SECONDS
        cache.set.assert_awaited_once_with("BEN:MOR", 4, expected)
        await client.close()
