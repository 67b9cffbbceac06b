# src/cm_reservation/application/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from src.cm_reservation.domain.models import Reservation, ReservationDetails


class CreateReservationRequest(BaseModel):
    order_kind: Literal["sell", "buy"]
    order_id: int
    quantity: int
    notes: str | None = None
    expires_at: datetime | None = None


class UpdateReservationStatusRequest(BaseModel):
    notes: str | None = None


class ReservationResponse(BaseModel):
    id: int
    sell_order_id: int | None
    buy_order_id: int | None
    counterparty_user_id: int
    quantity: int
    status: str
    notes: str | None
    expires_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, r: Reservation) -> "ReservationResponse":
        return cls(
            id=r.id,
            sell_order_id=r.sell_order_id,
            buy_order_id=r.buy_order_id,
            counterparty_user_id=r.counterparty_user_id,
            quantity=r.quantity,
            status=r.status,
            notes=r.notes,
            expires_at=r.expires_at,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class ReservationWithDetails(ReservationResponse):
    order_kind: str
    order_id: int
    owner_id: int
    owner_name: str
    counterparty_name: str
    commodity: str
    location: str
    price: float
    currency: str
    is_owner: bool

    @classmethod
    def from_details(cls, d: ReservationDetails, viewer_id: int) -> "ReservationWithDetails":
        base = ReservationResponse.from_domain(d.reservation).model_dump()
        return cls(
            **base,
            order_kind=d.order_kind,
            order_id=d.order_id,
            owner_id=d.owner_id,
            owner_name=d.owner_name,
            counterparty_name=d.counterparty_name,
            commodity=d.commodity,
            location=d.location,
            price=float(d.price),
            currency=d.currency,
            is_owner=d.owner_id == viewer_id,
        )
