"""Reservation domain models — pure dataclasses, no SQLAlchemy dependency.

A reservation points at exactly one order: sell_order_id XOR buy_order_id.
The order's owner is the other party; the creator is the counterparty.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.cm_common.enums import OrderKind


@dataclass
class Reservation:
    id: int
    counterparty_user_id: int
    quantity: int
    status: str
    sell_order_id: int | None = None
    buy_order_id: int | None = None
    notes: str | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def order_kind(self) -> str:
        return OrderKind.SELL.value if self.sell_order_id is not None else OrderKind.BUY.value

    @property
    def order_id(self) -> int | None:
        return self.sell_order_id if self.sell_order_id is not None else self.buy_order_id


@dataclass
class ReservationAggregate:
    """Active (pending/confirmed) reservations held against one order."""

    count: int = 0
    quantity: int = 0


@dataclass
class ReservationDetails:
    """A reservation joined with its parent order and both parties' names."""

    reservation: Reservation
    order_kind: str
    order_id: int
    owner_id: int
    owner_name: str
    counterparty_name: str
    commodity: str
    location: str
    price: Decimal
    currency: str
