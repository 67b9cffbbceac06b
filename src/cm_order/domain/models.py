"""Order domain models — pure dataclasses, no SQLAlchemy dependency.

Both order kinds are unique per (owner, commodity, location, visibility,
currency); posting the same key again replaces the existing row.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class SellOrder:
    id: int
    owner_id: int
    commodity: str
    location: str
    price: Decimal
    currency: str
    visibility: str = "internal"  # internal / partner
    limit_mode: str = "none"  # none / max_sell / reserve
    limit_quantity: int | None = None
    owner_name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def key(self) -> tuple[int, str, str, str, str]:
        return (self.owner_id, self.commodity, self.location, self.visibility, self.currency)


@dataclass
class BuyOrder:
    id: int
    owner_id: int
    commodity: str
    location: str
    quantity: int  # requested amount, not inventory-backed
    price: Decimal
    currency: str
    visibility: str = "internal"
    owner_name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def key(self) -> tuple[int, str, str, str, str]:
        return (self.owner_id, self.commodity, self.location, self.visibility, self.currency)
