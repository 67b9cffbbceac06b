"""Market listing domain models — what a viewer sees on the market board."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ListingFilters:
    commodity: str | None = None
    location: str | None = None
    destination: str | None = None


@dataclass
class MarketListing:
    """A sell order as offered on the market."""

    id: int
    seller_id: int
    seller_name: str
    commodity: str
    location: str
    price: Decimal
    currency: str
    visibility: str
    fio_quantity: int
    available_quantity: int
    is_own: bool
    jump_count: int | None = None
    active_reservation_count: int = 0
    reserved_quantity: int = 0
    remaining_quantity: int = 0


@dataclass
class MarketBuyRequest:
    """A buy order as offered on the market."""

    id: int
    buyer_id: int
    buyer_name: str
    commodity: str
    location: str
    quantity: int
    price: Decimal
    currency: str
    visibility: str
    is_own: bool
    jump_count: int | None = None
    active_reservation_count: int = 0
    reserved_quantity: int = 0
    remaining_quantity: int = 0
