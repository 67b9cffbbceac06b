"""Unit tests for OrderRepository row mapping and replace-or-insert."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cm_order.domain.models import BuyOrder, SellOrder
from src.cm_order.infrastructure.persistence import (
    OrderRepository,
    _row_to_buy_order,
    _row_to_sell_order,
)


def _make_sell_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 10)
    row.user_id = kwargs.get("user_id", 1)
    row.commodity_ticker = kwargs.get("commodity_ticker", "H2O")
    row.location_id = kwargs.get("location_id", "BEN")
    row.price = kwargs.get("price", Decimal("12.50"))
    row.currency = kwargs.get("currency", "NCC")
    row.visibility = kwargs.get("visibility", "internal")
    row.limit_mode = kwargs.get("limit_mode", "none")
    row.limit_quantity = kwargs.get("limit_quantity")
    row.owner_name = kwargs.get("owner_name", "Alice")
    row.created_at = kwargs.get("created_at", datetime.now(UTC))
    row.updated_at = kwargs.get("updated_at", datetime.now(UTC))
    return row


def _make_buy_row(**kwargs: Any) -> MagicMock:
    row = _make_sell_row(**kwargs)
    row.quantity = kwargs.get("quantity", 200)
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestRowMappers:
    def test_sell_row(self) -> None:
        order = _row_to_sell_order(_make_sell_row(limit_mode="reserve", limit_quantity=50))
        assert isinstance(order, SellOrder)
        assert order.owner_id == 1
        assert order.price == Decimal("12.50")
        assert (order.limit_mode, order.limit_quantity) == ("reserve", 50)
        assert order.key == (1, "H2O", "BEN", "internal", "NCC")

    def test_missing_owner_name_is_unknown(self) -> None:
        assert _row_to_sell_order(_make_sell_row(owner_name=None)).owner_name == "Unknown"

    def test_buy_row(self) -> None:
        order = _row_to_buy_order(_make_buy_row(quantity=75))
        assert isinstance(order, BuyOrder)
        assert order.quantity == 75


class TestReplaceOrInsert:
    @pytest.mark.asyncio
    async def test_existing_key_is_updated_in_place(self, db) -> None:
        lock = MagicMock()
        lock.fetchone.return_value = MagicMock(id=10)
        update = MagicMock()
        update.fetchone.return_value = _make_sell_row(price=Decimal("14"))
        db.execute = AsyncMock(side_effect=[lock, update])
        draft = SellOrder(
            id=0, owner_id=1, commodity="H2O", location="BEN",
            price=Decimal("14"), currency="NCC",
        )

        stored, replaced = await OrderRepository().replace_or_insert_sell_order(db, draft)

        assert replaced is True
        assert stored.id == 10
        params = db.execute.call_args_list[1].args[1]
        assert params["id"] == 10
        assert params["price"] == Decimal("14")
        assert "UPDATE sell_orders" in str(db.execute.call_args_list[1].args[0])

    @pytest.mark.asyncio
    async def test_new_key_is_inserted(self, db) -> None:
        lock = MagicMock()
        lock.fetchone.return_value = None
        insert = MagicMock()
        insert.fetchone.return_value = _make_buy_row(id=11)
        db.execute = AsyncMock(side_effect=[lock, insert])
        draft = BuyOrder(
            id=0, owner_id=1, commodity="H2O", location="BEN", quantity=200,
            price=Decimal("12.50"), currency="NCC", visibility="partner",
        )

        stored, replaced = await OrderRepository().replace_or_insert_buy_order(db, draft)

        assert replaced is False
        assert stored.id == 11
        lock_params = db.execute.call_args_list[0].args[1]
        assert lock_params == {
            "owner_id": 1, "commodity": "H2O", "location": "BEN",
            "visibility": "partner", "currency": "NCC",
        }
        assert "INSERT INTO buy_orders" in str(db.execute.call_args_list[1].args[0])
