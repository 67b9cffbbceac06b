"""Permission domain — role grants and their aggregation."""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class RolePermission:
    role_id: str
    permission_id: str
    allowed: bool


def resolve_permissions(grants: Iterable[RolePermission]) -> dict[str, bool]:
    """Fold grants from several roles into one permission map.

    A permission is granted if any role allows it, unless another role
    explicitly denies it: an explicit deny always wins.
    """
    resolved: dict[str, bool] = {}
    for grant in grants:
        current = resolved.get(grant.permission_id)
        if current is None or not grant.allowed:
            resolved[grant.permission_id] = grant.allowed
    return resolved
