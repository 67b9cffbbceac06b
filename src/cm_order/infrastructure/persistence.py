# src/cm_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence for sell_orders and buy_orders.

Replace-or-insert is two statements inside the caller's transaction: lock
the row for the composite key (FOR UPDATE), then UPDATE it in place or
INSERT a new one. The id of a replaced order is kept, so reservations
pointing at it stay attached.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.prices import parse_price
from src.cm_order.domain.models import BuyOrder, SellOrder

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_OWNER_NAME = "(SELECT COALESCE(u.display_name, u.username) FROM users u WHERE u.id = user_id)"

_SELL_COLUMNS = f"""
    id, user_id, commodity_ticker, location_id, price, currency,
    visibility, limit_mode, limit_quantity, created_at, updated_at,
    {_OWNER_NAME} AS owner_name
"""

_BUY_COLUMNS = f"""
    id, user_id, commodity_ticker, location_id, quantity, price, currency,
    visibility, created_at, updated_at,
    {_OWNER_NAME} AS owner_name
"""

_LIST_SELL_SQL = text(f"SELECT {_SELL_COLUMNS} FROM sell_orders ORDER BY id")

_LIST_SELL_BY_OWNER_SQL = text(f"""
    SELECT {_SELL_COLUMNS} FROM sell_orders
    WHERE user_id = :owner_id
    ORDER BY commodity_ticker, location_id
""")

_GET_SELL_SQL = text(f"SELECT {_SELL_COLUMNS} FROM sell_orders WHERE id = :id")

_LOCK_SELL_BY_KEY_SQL = text("""
    SELECT id FROM sell_orders
    WHERE user_id = :owner_id
      AND commodity_ticker = :commodity
      AND location_id = :location
      AND visibility = :visibility
      AND currency = :currency
    FOR UPDATE
""")

_INSERT_SELL_SQL = text(f"""
    INSERT INTO sell_orders (user_id, commodity_ticker, location_id, price, currency,
        visibility, limit_mode, limit_quantity)
    VALUES (:owner_id, :commodity, :location, :price, :currency,
        :visibility, :limit_mode, :limit_quantity)
    RETURNING {_SELL_COLUMNS}
""")

_REPLACE_SELL_SQL = text(f"""
    UPDATE sell_orders
    SET price = :price, limit_mode = :limit_mode,
        limit_quantity = :limit_quantity, updated_at = NOW()
    WHERE id = :id
    RETURNING {_SELL_COLUMNS}
""")

_DELETE_SELL_SQL = text("DELETE FROM sell_orders WHERE id = :id")

_LIST_BUY_SQL = text(f"SELECT {_BUY_COLUMNS} FROM buy_orders ORDER BY id")

_LIST_BUY_BY_OWNER_SQL = text(f"""
    SELECT {_BUY_COLUMNS} FROM buy_orders
    WHERE user_id = :owner_id
    ORDER BY commodity_ticker, location_id
""")

_GET_BUY_SQL = text(f"SELECT {_BUY_COLUMNS} FROM buy_orders WHERE id = :id")

_LOCK_BUY_BY_KEY_SQL = text("""
    SELECT id FROM buy_orders
    WHERE user_id = :owner_id
      AND commodity_ticker = :commodity
      AND location_id = :location
      AND visibility = :visibility
      AND currency = :currency
    FOR UPDATE
""")

_INSERT_BUY_SQL = text(f"""
    INSERT INTO buy_orders (user_id, commodity_ticker, location_id, quantity, price,
        currency, visibility)
    VALUES (:owner_id, :commodity, :location, :quantity, :price,
        :currency, :visibility)
    RETURNING {_BUY_COLUMNS}
""")

_REPLACE_BUY_SQL = text(f"""
    UPDATE buy_orders
    SET quantity = :quantity, price = :price, updated_at = NOW()
    WHERE id = :id
    RETURNING {_BUY_COLUMNS}
""")

_DELETE_BUY_SQL = text("DELETE FROM buy_orders WHERE id = :id")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_sell_order(row: Any) -> SellOrder:
    return SellOrder(
        id=row.id,
        owner_id=row.user_id,
        commodity=row.commodity_ticker,
        location=row.location_id,
        price=parse_price(row.price),
        currency=row.currency,
        visibility=row.visibility,
        limit_mode=row.limit_mode,
        limit_quantity=row.limit_quantity,
        owner_name=row.owner_name or "Unknown",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_buy_order(row: Any) -> BuyOrder:
    return BuyOrder(
        id=row.id,
        owner_id=row.user_id,
        commodity=row.commodity_ticker,
        location=row.location_id,
        quantity=row.quantity,
        price=parse_price(row.price),
        currency=row.currency,
        visibility=row.visibility,
        owner_name=row.owner_name or "Unknown",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _key_params(order: SellOrder | BuyOrder) -> dict[str, Any]:
    return {
        "owner_id": order.owner_id,
        "commodity": order.commodity,
        "location": order.location,
        "visibility": order.visibility,
        "currency": order.currency,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def list_sell_orders(self, db: AsyncSession) -> list[SellOrder]:
        result = await db.execute(_LIST_SELL_SQL)
        return [_row_to_sell_order(row) for row in result.fetchall()]

    async def list_buy_orders(self, db: AsyncSession) -> list[BuyOrder]:
        result = await db.execute(_LIST_BUY_SQL)
        return [_row_to_buy_order(row) for row in result.fetchall()]

    async def list_sell_orders_by_owner(
        self, db: AsyncSession, owner_id: int
    ) -> list[SellOrder]:
        result = await db.execute(_LIST_SELL_BY_OWNER_SQL, {"owner_id": owner_id})
        return [_row_to_sell_order(row) for row in result.fetchall()]

    async def list_buy_orders_by_owner(
        self, db: AsyncSession, owner_id: int
    ) -> list[BuyOrder]:
        result = await db.execute(_LIST_BUY_BY_OWNER_SQL, {"owner_id": owner_id})
        return [_row_to_buy_order(row) for row in result.fetchall()]

    async def get_sell_order(self, db: AsyncSession, order_id: int) -> SellOrder | None:
        result = await db.execute(_GET_SELL_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_sell_order(row) if row else None

    async def get_buy_order(self, db: AsyncSession, order_id: int) -> BuyOrder | None:
        result = await db.execute(_GET_BUY_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_buy_order(row) if row else None

    async def replace_or_insert_sell_order(
        self, db: AsyncSession, order: SellOrder
    ) -> tuple[SellOrder, bool]:
        """Returns (stored order, replaced). replaced=False means a new row."""
        existing = (await db.execute(_LOCK_SELL_BY_KEY_SQL, _key_params(order))).fetchone()
        values = {
            "price": order.price,
            "limit_mode": order.limit_mode,
            "limit_quantity": order.limit_quantity,
        }
        if existing is not None:
            result = await db.execute(_REPLACE_SELL_SQL, {"id": existing.id, **values})
            return _row_to_sell_order(result.fetchone()), True
        result = await db.execute(_INSERT_SELL_SQL, {**_key_params(order), **values})
        return _row_to_sell_order(result.fetchone()), False

    async def replace_or_insert_buy_order(
        self, db: AsyncSession, order: BuyOrder
    ) -> tuple[BuyOrder, bool]:
        existing = (await db.execute(_LOCK_BUY_BY_KEY_SQL, _key_params(order))).fetchone()
        values = {"quantity": order.quantity, "price": order.price}
        if existing is not None:
            result = await db.execute(_REPLACE_BUY_SQL, {"id": existing.id, **values})
            return _row_to_buy_order(result.fetchone()), True
        result = await db.execute(_INSERT_BUY_SQL, {**_key_params(order), **values})
        return _row_to_buy_order(result.fetchone()), False

    async def delete_sell_order(self, db: AsyncSession, order_id: int) -> None:
        # order_reservations rows go with it (ON DELETE CASCADE)
        await db.execute(_DELETE_SELL_SQL, {"id": order_id})

    async def delete_buy_order(self, db: AsyncSession, order_id: int) -> None:
        await db.execute(_DELETE_BUY_SQL, {"id": order_id})
