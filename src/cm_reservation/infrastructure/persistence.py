# src/cm_reservation/infrastructure/persistence.py
"""ReservationRepository — raw SQL persistence for order_reservations.

Details queries LEFT JOIN both order tables: exactly one of them matches for
a healthy row. A reservation whose order is gone yields no details row, and
the caller decides whether that means "not found" or "corrupt".
"""
from datetime import datetime
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.enums import ACTIVE_RESERVATION_STATUSES, OrderKind
from src.cm_common.prices import parse_price
from src.cm_reservation.domain.models import (
    Reservation,
    ReservationAggregate,
    ReservationDetails,
)

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, sell_order_id, buy_order_id, counterparty_user_id, quantity, status,
    notes, expires_at, created_at, updated_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO order_reservations (sell_order_id, buy_order_id, counterparty_user_id,
        quantity, status, notes, expires_at)
    VALUES (:sell_order_id, :buy_order_id, :counterparty_user_id,
        :quantity, 'pending', :notes, :expires_at)
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM order_reservations WHERE id = :id")

# Empty notes keep what is already stored
_UPDATE_STATUS_SQL = text(f"""
    UPDATE order_reservations
    SET status = :status,
        notes = COALESCE(NULLIF(CAST(:notes AS TEXT), ''), notes),
        updated_at = NOW()
    WHERE id = :id
    RETURNING {_COLUMNS}
""")

_DELETE_SQL = text("DELETE FROM order_reservations WHERE id = :id")

_DETAILS_SELECT = """
    SELECT r.id, r.sell_order_id, r.buy_order_id, r.counterparty_user_id,
           r.quantity, r.status, r.notes, r.expires_at, r.created_at, r.updated_at,
           COALESCE(so.user_id, bo.user_id) AS owner_id,
           COALESCE(so.commodity_ticker, bo.commodity_ticker) AS commodity,
           COALESCE(so.location_id, bo.location_id) AS location,
           COALESCE(so.price, bo.price) AS price,
           COALESCE(so.currency, bo.currency) AS currency,
           COALESCE(ou.display_name, ou.username) AS owner_name,
           COALESCE(cu.display_name, cu.username) AS counterparty_name
    FROM order_reservations r
    LEFT JOIN sell_orders so ON so.id = r.sell_order_id
    LEFT JOIN buy_orders bo ON bo.id = r.buy_order_id
    LEFT JOIN users ou ON ou.id = COALESCE(so.user_id, bo.user_id)
    LEFT JOIN users cu ON cu.id = r.counterparty_user_id
    WHERE COALESCE(so.id, bo.id) IS NOT NULL
"""

_GET_DETAILS_SQL = text(_DETAILS_SELECT + " AND r.id = :id")

_LIST_FOR_USER_SQL = text(_DETAILS_SELECT + """
      AND (
            (CAST(:role AS TEXT) IN ('owner', 'all')
             AND COALESCE(so.user_id, bo.user_id) = :user_id)
         OR (CAST(:role AS TEXT) IN ('counterparty', 'all')
             AND r.counterparty_user_id = :user_id)
      )
      AND (CAST(:status AS TEXT) IS NULL OR r.status = :status)
    ORDER BY r.created_at DESC, r.id DESC
""")

_ACTIVE_IN = ", ".join(f"'{s.value}'" for s in ACTIVE_RESERVATION_STATUSES)

# Lapsed holds (expires_at in the past) no longer claim supply
_AGGREGATE_TEMPLATE = """
    SELECT {column} AS order_id,
           COUNT(*) AS reservation_count,
           COALESCE(SUM(quantity), 0) AS reserved_quantity
    FROM order_reservations
    WHERE {column} IN :order_ids
      AND status IN ({statuses})
      AND (expires_at IS NULL OR expires_at > NOW())
    GROUP BY {column}
"""

_AGGREGATE_SQL = {
    OrderKind.SELL.value: text(
        _AGGREGATE_TEMPLATE.format(column="sell_order_id", statuses=_ACTIVE_IN)
    ).bindparams(bindparam("order_ids", expanding=True)),
    OrderKind.BUY.value: text(
        _AGGREGATE_TEMPLATE.format(column="buy_order_id", statuses=_ACTIVE_IN)
    ).bindparams(bindparam("order_ids", expanding=True)),
}


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_reservation(row: Any) -> Reservation:
    return Reservation(
        id=row.id,
        sell_order_id=row.sell_order_id,
        buy_order_id=row.buy_order_id,
        counterparty_user_id=row.counterparty_user_id,
        quantity=row.quantity,
        status=row.status,
        notes=row.notes,
        expires_at=row.expires_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_details(row: Any) -> ReservationDetails:
    reservation = _row_to_reservation(row)
    return ReservationDetails(
        reservation=reservation,
        order_kind=reservation.order_kind,
        order_id=reservation.order_id,
        owner_id=row.owner_id,
        owner_name=row.owner_name or "Unknown",
        counterparty_name=row.counterparty_name or "Unknown",
        commodity=row.commodity,
        location=row.location,
        price=parse_price(row.price),
        currency=row.currency,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ReservationRepository:
    """Concrete implementation of ReservationRepositoryProtocol using raw SQL."""

    async def insert(
        self,
        db: AsyncSession,
        kind: str,
        order_id: int,
        counterparty_user_id: int,
        quantity: int,
        notes: str | None,
        expires_at: datetime | None,
    ) -> Reservation:
        is_sell = kind == OrderKind.SELL
        result = await db.execute(
            _INSERT_SQL,
            {
                "sell_order_id": order_id if is_sell else None,
                "buy_order_id": None if is_sell else order_id,
                "counterparty_user_id": counterparty_user_id,
                "quantity": quantity,
                "notes": notes,
                "expires_at": expires_at,
            },
        )
        return _row_to_reservation(result.fetchone())

    async def get(self, db: AsyncSession, reservation_id: int) -> Reservation | None:
        result = await db.execute(_GET_SQL, {"id": reservation_id})
        row = result.fetchone()
        return _row_to_reservation(row) if row else None

    async def get_with_details(
        self, db: AsyncSession, reservation_id: int
    ) -> ReservationDetails | None:
        result = await db.execute(_GET_DETAILS_SQL, {"id": reservation_id})
        row = result.fetchone()
        return _row_to_details(row) if row else None

    async def update_status(
        self, db: AsyncSession, reservation_id: int, status: str, notes: str | None
    ) -> Reservation | None:
        result = await db.execute(
            _UPDATE_STATUS_SQL, {"id": reservation_id, "status": status, "notes": notes}
        )
        row = result.fetchone()
        return _row_to_reservation(row) if row else None

    async def delete(self, db: AsyncSession, reservation_id: int) -> None:
        await db.execute(_DELETE_SQL, {"id": reservation_id})

    async def aggregate_active(
        self, db: AsyncSession, kind: str, order_ids: list[int]
    ) -> dict[int, ReservationAggregate]:
        """Count and summed quantity of pending/confirmed reservations per order.

        Orders without active reservations are absent from the result. No
        query is issued for an empty id list.
        """
        if not order_ids:
            return {}
        sql = _AGGREGATE_SQL[kind.value if isinstance(kind, OrderKind) else kind]
        result = await db.execute(sql, {"order_ids": list(order_ids)})
        return {
            row.order_id: ReservationAggregate(
                count=int(row.reservation_count), quantity=int(row.reserved_quantity)
            )
            for row in result.fetchall()
        }

    async def list_for_user(
        self, db: AsyncSession, user_id: int, role: str, status: str | None
    ) -> list[ReservationDetails]:
        result = await db.execute(
            _LIST_FOR_USER_SQL, {"user_id": user_id, "role": role, "status": status}
        )
        return [_row_to_details(row) for row in result.fetchall()]
