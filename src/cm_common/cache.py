"""TTL cache abstraction with manual invalidation.

Services take a TtlCache in their constructor instead of holding module-level
dicts, so tests can inject a fresh InMemoryTtlCache and production can share
entries across workers through Redis.

Values must be JSON-serializable (the Redis backend stores JSON text).
"""

import json
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import redis.asyncio as aioredis

from config.settings import settings
from src.cm_common.redis_client import get_redis


class TtlCache(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def clear(self) -> None: ...


class InMemoryTtlCache:
    """Per-process cache. Expired entries are evicted lazily on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()


class RedisTtlCache:
    """Redis-backed cache; every key is prefixed with the namespace.

    Key pattern: "{namespace}:{key}"
    """

    def __init__(
        self,
        namespace: str,
        client_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        self._namespace = namespace
        self._client_factory = client_factory

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get(self, key: str) -> Any | None:
        client = await self._client_factory()
        raw = await client.get(self._key(key))
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        client = await self._client_factory()
        await client.set(self._key(key), json.dumps(value), ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        client = await self._client_factory()
        await client.delete(self._key(key))

    async def clear(self) -> None:
        client = await self._client_factory()
        keys = [k async for k in client.scan_iter(match=f"{self._namespace}:*")]
        if keys:
            await client.delete(*keys)


def build_cache(namespace: str) -> TtlCache:
    """Pick the backend from settings.CACHE_BACKEND ("redis" or "memory")."""
    if settings.CACHE_BACKEND == "memory":
        return InMemoryTtlCache()
    return RedisTtlCache(namespace)
