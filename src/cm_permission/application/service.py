"""PermissionService — the permission oracle consumed by market and reservations.

Resolved permission maps are cached per role set (sorted, comma-joined) in
an injected TtlCache. Call invalidate() after editing role_permissions.
"""

import logging
from enum import Enum
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cm_common.cache import TtlCache, build_cache
from src.cm_permission.domain.models import resolve_permissions
from src.cm_permission.domain.repository import PermissionRepositoryProtocol
from src.cm_permission.infrastructure.persistence import PermissionRepository

logger = logging.getLogger(__name__)


class PermissionOracle(Protocol):
    async def has_permission(
        self, db: AsyncSession, roles: list[str], capability: str
    ) -> bool: ...


def _cache_key(roles: list[str]) -> str:
    return ",".join(sorted(roles))


class PermissionService:
    def __init__(
        self,
        repo: PermissionRepositoryProtocol | None = None,
        cache: TtlCache | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self._repo: PermissionRepositoryProtocol = repo or PermissionRepository()
        self._cache: TtlCache = cache or build_cache("permissions")
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.PERMISSION_CACHE_TTL_SECONDS

    async def get_permissions(self, db: AsyncSession, roles: list[str]) -> dict[str, bool]:
        if not roles:
            return {}
        key = _cache_key(roles)
        cached = await self._cache.get(key)
        if cached is not None:
            return dict(cached)

        grants = await self._repo.list_for_roles(db, sorted(set(roles)))
        permissions = resolve_permissions(grants)
        await self._cache.set(key, permissions, self._ttl)
        return permissions

    async def has_permission(
        self, db: AsyncSession, roles: list[str], capability: str
    ) -> bool:
        permissions = await self.get_permissions(db, roles)
        key = capability.value if isinstance(capability, Enum) else capability
        return permissions.get(key) is True

    async def invalidate(self) -> None:
        logger.info("Permission cache invalidated")
        await self._cache.clear()
