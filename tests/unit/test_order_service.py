"""Unit tests for OrderApplicationService (owner-side order management)."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cm_common.enums import Capability
from src.cm_common.errors import (
    InvalidOrderError,
    OrderNotFoundError,
    OrderPermissionDeniedError,
)
from src.cm_gateway.auth.identity import Identity
from src.cm_inventory.domain.models import InventoryInfo, inventory_key
from src.cm_order.application.schemas import UpsertBuyOrderRequest, UpsertSellOrderRequest
from src.cm_order.application.service import OrderApplicationService
from src.cm_order.domain.models import BuyOrder, SellOrder

SELLER = Identity(user_id=1, roles=["member"])


class _Grants:
    def __init__(self, *capabilities: Capability) -> None:
        self.granted = {c.value for c in capabilities}

    async def has_permission(self, db, roles, capability) -> bool:
        return getattr(capability, "value", capability) in self.granted


def _sell(**kwargs) -> SellOrder:
    defaults = dict(
        id=10, owner_id=1, commodity="H2O", location="BEN", price=Decimal("12.50"),
        currency="NCC", limit_mode="max_sell", limit_quantity=300,
    )
    defaults.update(kwargs)
    return SellOrder(**defaults)


@pytest.fixture
def db():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


def _service(repo=None, inventory=None, grants=None) -> OrderApplicationService:
    if inventory is None:
        inventory = MagicMock()
        inventory.get_quantity = AsyncMock(return_value=InventoryInfo(quantity=1000))
        inventory.get_inventory_for_owners = AsyncMock(return_value={})
    return OrderApplicationService(
        repo=repo or MagicMock(),
        inventory_repo=inventory,
        permissions=grants or _Grants(Capability.POST_INTERNAL),
    )


class TestUpsertSellOrder:
    @pytest.mark.asyncio
    async def test_created_with_availability(self, db) -> None:
        repo = MagicMock()
        repo.replace_or_insert_sell_order = AsyncMock(return_value=(_sell(), False))
        req = UpsertSellOrderRequest(
            commodity=" h2o ", location="ben", price=Decimal("12.50"), currency="NCC",
            limit_mode="max_sell", limit_quantity=300,
        )

        resp = await _service(repo=repo).upsert_sell_order(db, SELLER, req)

        assert resp.replaced is False
        assert resp.order.fio_quantity == 1000
        assert resp.order.available_quantity == 300
        draft = repo.replace_or_insert_sell_order.call_args.args[1]
        assert (draft.commodity, draft.location) == ("H2O", "BEN")
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_replaced_flag_passes_through(self, db) -> None:
        repo = MagicMock()
        repo.replace_or_insert_sell_order = AsyncMock(return_value=(_sell(), True))
        req = UpsertSellOrderRequest(
            commodity="H2O", location="BEN", price=Decimal("13"), currency="NCC"
        )

        resp = await _service(repo=repo).upsert_sell_order(db, SELLER, req)

        assert resp.replaced is True

    @pytest.mark.asyncio
    async def test_limit_dropped_for_unlimited_mode(self, db) -> None:
        repo = MagicMock()
        repo.replace_or_insert_sell_order = AsyncMock(
            return_value=(_sell(limit_mode="none", limit_quantity=None), False)
        )
        req = UpsertSellOrderRequest(
            commodity="H2O", location="BEN", price=Decimal("1"), currency="NCC",
            limit_mode="none", limit_quantity=50,
        )

        await _service(repo=repo).upsert_sell_order(db, SELLER, req)

        assert repo.replace_or_insert_sell_order.call_args.args[1].limit_quantity is None

    @pytest.mark.asyncio
    async def test_partner_visibility_requires_partner_grant(self, db) -> None:
        repo = MagicMock()
        repo.replace_or_insert_sell_order = AsyncMock()
        req = UpsertSellOrderRequest(
            commodity="H2O", location="BEN", price=Decimal("1"), currency="NCC",
            visibility="partner",
        )

        with pytest.raises(OrderPermissionDeniedError):
            await _service(repo=repo).upsert_sell_order(db, SELLER, req)
        repo.replace_or_insert_sell_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_negative_price_rejected(self, db) -> None:
        req = UpsertSellOrderRequest(
            commodity="H2O", location="BEN", price=Decimal("-1"), currency="NCC"
        )
        with pytest.raises(InvalidOrderError):
            await _service().upsert_sell_order(db, SELLER, req)

    @pytest.mark.asyncio
    async def test_repo_failure_rolls_back(self, db) -> None:
        repo = MagicMock()
        repo.replace_or_insert_sell_order = AsyncMock(side_effect=RuntimeError("db down"))
        req = UpsertSellOrderRequest(
            commodity="H2O", location="BEN", price=Decimal("1"), currency="NCC"
        )

        with pytest.raises(RuntimeError):
            await _service(repo=repo).upsert_sell_order(db, SELLER, req)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_called()


class TestUpsertBuyOrder:
    @pytest.mark.asyncio
    async def test_zero_quantity_rejected(self, db) -> None:
        req = UpsertBuyOrderRequest(
            commodity="RAT", location="MOR", quantity=0, price=Decimal("5"), currency="NCC"
        )
        with pytest.raises(InvalidOrderError):
            await _service().upsert_buy_order(db, SELLER, req)

    @pytest.mark.asyncio
    async def test_created(self, db) -> None:
        stored = BuyOrder(
            id=4, owner_id=1, commodity="RAT", location="MOR", quantity=200,
            price=Decimal("5"), currency="NCC",
        )
        repo = MagicMock()
        repo.replace_or_insert_buy_order = AsyncMock(return_value=(stored, False))
        req = UpsertBuyOrderRequest(
            commodity="RAT", location="MOR", quantity=200, price=Decimal("5"), currency="NCC"
        )

        resp = await _service(repo=repo).upsert_buy_order(db, SELLER, req)

        assert resp.order.quantity == 200
        assert resp.order.price == 5.0
        assert resp.replaced is False


class TestDeleteAndList:
    @pytest.mark.asyncio
    async def test_delete_someone_elses_order_is_not_found(self, db) -> None:
        repo = MagicMock()
        repo.get_sell_order = AsyncMock(return_value=_sell(owner_id=99))
        repo.delete_sell_order = AsyncMock()

        with pytest.raises(OrderNotFoundError):
            await _service(repo=repo).delete_sell_order(db, SELLER, 10)
        repo.delete_sell_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_own_buy_order(self, db) -> None:
        repo = MagicMock()
        repo.get_buy_order = AsyncMock(return_value=BuyOrder(
            id=4, owner_id=1, commodity="RAT", location="MOR", quantity=1,
            price=Decimal("1"), currency="NCC",
        ))
        repo.delete_buy_order = AsyncMock()

        await _service(repo=repo).delete_buy_order(db, SELLER, 4)

        repo.delete_buy_order.assert_awaited_once_with(db, 4)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_my_sell_orders_carry_availability(self, db) -> None:
        synced = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
        repo = MagicMock()
        repo.list_sell_orders_by_owner = AsyncMock(return_value=[
            _sell(limit_mode="reserve", limit_quantity=400),
        ])
        inventory = MagicMock()
        inventory.get_inventory_for_owners = AsyncMock(return_value={
            inventory_key(1, "H2O", "BEN"): InventoryInfo(quantity=1000, fio_uploaded_at=synced),
        })

        result = await _service(repo=repo, inventory=inventory).list_my_sell_orders(db, SELLER)

        assert result[0].available_quantity == 600
        assert result[0].fio_uploaded_at == synced
        inventory.get_inventory_for_owners.assert_awaited_once_with(db, [1])
