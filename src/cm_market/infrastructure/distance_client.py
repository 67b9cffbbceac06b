"""FIO jump-count client.

GET {FIO_API_URL}/systemstars/jumpcount/{from}/{to} returns a bare integer.
404 means FIO knows no route between the two; that answer is cached too.
Any other non-2xx status raises FioApiError and is not cached.

Jump counts are symmetric, so the cache key uses the sorted pair.
"""
import logging

import httpx

from config.settings import settings
from src.cm_common.cache import TtlCache, build_cache

logger = logging.getLogger(__name__)

_NO_ROUTE = -1  # cached marker for a 404 answer


class FioApiError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        super().__init__(f"FIO API error {status_code}: {detail}")


class FioDistanceClient:
    """DistanceOracle backed by the FIO REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        cache: TtlCache | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self.base_url = (base_url or settings.FIO_API_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=settings.FIO_API_TIMEOUT_SECONDS)
        self._cache: TtlCache = cache or build_cache("jumpcount")
        self._ttl = (
            ttl_seconds if ttl_seconds is not None else settings.JUMP_COUNT_CACHE_TTL_SECONDS
        )

    async def close(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _cache_key(a: str, b: str) -> str:
        first, second = sorted((a.upper(), b.upper()))
        return f"{first}:{second}"

    async def get_distance(self, from_location: str, to_location: str) -> int | None:
        if from_location.upper() == to_location.upper():
            return 0
        key = self._cache_key(from_location, to_location)
        cached = await self._cache.get(key)
        if cached is not None:
            return None if cached == _NO_ROUTE else int(cached)

        url = f"{self.base_url}/systemstars/jumpcount/{from_location}/{to_location}"
        response = await self.client.get(url)
        if response.status_code == 404:
            logger.debug("No route %s -> %s", from_location, to_location)
            await self._cache.set(key, _NO_ROUTE, self._ttl)
            return None
        if response.is_error:
            raise FioApiError(response.status_code, response.text)

        jumps = int(response.json())
        await self._cache.set(key, jumps, self._ttl)
        return jumps
