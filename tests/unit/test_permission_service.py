"""Unit tests for PermissionService and grant resolution."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cm_common.cache import InMemoryTtlCache
from src.cm_common.enums import Capability
from src.cm_permission.application.service import PermissionService
from src.cm_permission.domain.models import RolePermission, resolve_permissions
from src.cm_permission.infrastructure.persistence import PermissionRepository


class TestResolvePermissions:
    def test_any_role_grants(self) -> None:
        grants = [
            RolePermission("member", "orders.view_internal", True),
            RolePermission("trade-partner", "orders.view_partner", True),
        ]
        assert resolve_permissions(grants) == {
            "orders.view_internal": True,
            "orders.view_partner": True,
        }

    @pytest.mark.parametrize("deny_first", [True, False])
    def test_explicit_deny_wins(self, deny_first: bool) -> None:
        allow = RolePermission("lead", "orders.post_partner", True)
        deny = RolePermission("probation", "orders.post_partner", False)
        grants = [deny, allow] if deny_first else [allow, deny]
        assert resolve_permissions(grants) == {"orders.post_partner": False}


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def repo():
    r = MagicMock()
    r.list_for_roles = AsyncMock(return_value=[
        RolePermission("member", "orders.view_internal", True),
        RolePermission("member", "reservations.place_internal", True),
    ])
    return r


class TestPermissionService:
    @pytest.mark.asyncio
    async def test_has_permission_accepts_enum_and_str(self, db, repo) -> None:
        svc = PermissionService(repo=repo, cache=InMemoryTtlCache(), ttl_seconds=60)

        assert await svc.has_permission(db, ["member"], Capability.VIEW_INTERNAL) is True
        assert await svc.has_permission(db, ["member"], "reservations.place_internal") is True
        assert await svc.has_permission(db, ["member"], Capability.VIEW_PARTNER) is False

    @pytest.mark.asyncio
    async def test_results_cached_per_role_set(self, db, repo) -> None:
        svc = PermissionService(repo=repo, cache=InMemoryTtlCache(), ttl_seconds=60)

        await svc.has_permission(db, ["member", "lead"], Capability.VIEW_INTERNAL)
        await svc.has_permission(db, ["lead", "member"], Capability.VIEW_PARTNER)

        repo.list_for_roles.assert_awaited_once_with(db, ["lead", "member"])

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, db, repo) -> None:
        svc = PermissionService(repo=repo, cache=InMemoryTtlCache(), ttl_seconds=60)

        await svc.has_permission(db, ["member"], Capability.VIEW_INTERNAL)
        await svc.invalidate()
        await svc.has_permission(db, ["member"], Capability.VIEW_INTERNAL)

        assert repo.list_for_roles.await_count == 2

    @pytest.mark.asyncio
    async def test_no_roles_has_nothing(self, db, repo) -> None:
        svc = PermissionService(repo=repo, cache=InMemoryTtlCache(), ttl_seconds=60)

        assert await svc.has_permission(db, [], Capability.VIEW_INTERNAL) is False
        repo.list_for_roles.assert_not_called()


class TestPermissionRepository:
    @pytest.mark.asyncio
    async def test_empty_roles_issue_no_query(self, db) -> None:
        db.execute = AsyncMock()
        assert await PermissionRepository().list_for_roles(db, []) == []
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_maps_rows(self, db) -> None:
        row = MagicMock()
        row.role_id = "member"
        row.permission_id = "orders.view_internal"
        row.allowed = True
        result_mock = MagicMock()
        result_mock.fetchall.return_value = [row]
        db.execute = AsyncMock(return_value=result_mock)

        grants = await PermissionRepository().list_for_roles(db, ["member"])

        assert grants == [RolePermission("member", "orders.view_internal", True)]
