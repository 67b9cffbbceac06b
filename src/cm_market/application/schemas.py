# src/cm_market/application/schemas.py
from pydantic import BaseModel

from src.cm_market.domain.models import MarketBuyRequest, MarketListing


class MarketListingResponse(BaseModel):
    id: int
    seller_name: str
    commodity: str
    location: str
    price: float
    currency: str
    visibility: str
    fio_quantity: int
    available_quantity: int
    is_own: bool
    jump_count: int | None
    active_reservation_count: int
    reserved_quantity: int
    remaining_quantity: int

    @classmethod
    def from_domain(cls, m: MarketListing) -> "MarketListingResponse":
        return cls(
            id=m.id,
            seller_name=m.seller_name,
            commodity=m.commodity,
            location=m.location,
            price=float(m.price),
            currency=m.currency,
            visibility=m.visibility,
            fio_quantity=m.fio_quantity,
            available_quantity=m.available_quantity,
            is_own=m.is_own,
            jump_count=m.jump_count,
            active_reservation_count=m.active_reservation_count,
            reserved_quantity=m.reserved_quantity,
            remaining_quantity=m.remaining_quantity,
        )


class MarketBuyRequestResponse(BaseModel):
    id: int
    buyer_name: str
    commodity: str
    location: str
    quantity: int
    price: float
    currency: str
    visibility: str
    is_own: bool
    jump_count: int | None
    active_reservation_count: int
    reserved_quantity: int
    remaining_quantity: int

    @classmethod
    def from_domain(cls, m: MarketBuyRequest) -> "MarketBuyRequestResponse":
        return cls(
            id=m.id,
            buyer_name=m.buyer_name,
            commodity=m.commodity,
            location=m.location,
            quantity=m.quantity,
            price=float(m.price),
            currency=m.currency,
            visibility=m.visibility,
            is_own=m.is_own,
            jump_count=m.jump_count,
            active_reservation_count=m.active_reservation_count,
            reserved_quantity=m.reserved_quantity,
            remaining_quantity=m.remaining_quantity,
        )
