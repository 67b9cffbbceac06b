# src/cm_permission/infrastructure/persistence.py
"""PermissionRepository — raw SQL over role_permissions."""
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_permission.domain.models import RolePermission

_LIST_FOR_ROLES_SQL = text("""
    SELECT role_id, permission_id, allowed
    FROM role_permissions
    WHERE role_id IN :role_ids
""").bindparams(bindparam("role_ids", expanding=True))


def _row_to_grant(row: Any) -> RolePermission:
    return RolePermission(
        role_id=row.role_id,
        permission_id=row.permission_id,
        allowed=bool(row.allowed),
    )


class PermissionRepository:
    async def list_for_roles(
        self, db: AsyncSession, role_ids: list[str]
    ) -> list[RolePermission]:
        if not role_ids:
            return []
        result = await db.execute(_LIST_FOR_ROLES_SQL, {"role_ids": list(role_ids)})
        return [_row_to_grant(row) for row in result.fetchall()]
