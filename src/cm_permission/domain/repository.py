# src/cm_permission/domain/repository.py
"""PermissionRepository Protocol — lets unit tests inject a mock."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_permission.domain.models import RolePermission


class PermissionRepositoryProtocol(Protocol):
    async def list_for_roles(
        self, db: AsyncSession, role_ids: list[str]
    ) -> list[RolePermission]: ...
