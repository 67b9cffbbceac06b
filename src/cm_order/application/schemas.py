# src/cm_order/application/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, field_validator

from src.cm_order.domain.models import BuyOrder, SellOrder


def _normalize_ticker(v: str) -> str:
    v = v.strip().upper()
    if not v or " " in v:
        raise ValueError("must be a non-empty identifier without whitespace")
    return v


class UpsertSellOrderRequest(BaseModel):
    commodity: str
    location: str
    price: Decimal
    currency: Literal["ICA", "CIS", "AIC", "NCC"]
    visibility: Literal["internal", "partner"] = "internal"
    limit_mode: Literal["none", "max_sell", "reserve"] = "none"
    limit_quantity: int | None = None

    @field_validator("commodity", "location")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return _normalize_ticker(v)


class UpsertBuyOrderRequest(BaseModel):
    commodity: str
    location: str
    quantity: int
    price: Decimal
    currency: Literal["ICA", "CIS", "AIC", "NCC"]
    visibility: Literal["internal", "partner"] = "internal"

    @field_validator("commodity", "location")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return _normalize_ticker(v)


class SellOrderResponse(BaseModel):
    id: int
    commodity: str
    location: str
    price: float
    currency: str
    visibility: str
    limit_mode: str
    limit_quantity: int | None
    fio_quantity: int
    available_quantity: int
    fio_uploaded_at: datetime | None = None  # newest sync of the backing storages
    updated_at: datetime | None = None

    @classmethod
    def from_domain(
        cls,
        order: SellOrder,
        fio_quantity: int,
        available_quantity: int,
        fio_uploaded_at: datetime | None = None,
    ) -> "SellOrderResponse":
        return cls(
            id=order.id,
            commodity=order.commodity,
            location=order.location,
            price=float(order.price),
            currency=order.currency,
            visibility=order.visibility,
            limit_mode=order.limit_mode,
            limit_quantity=order.limit_quantity,
            fio_quantity=fio_quantity,
            available_quantity=available_quantity,
            fio_uploaded_at=fio_uploaded_at,
            updated_at=order.updated_at,
        )


class BuyOrderResponse(BaseModel):
    id: int
    commodity: str
    location: str
    quantity: int
    price: float
    currency: str
    visibility: str
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: BuyOrder) -> "BuyOrderResponse":
        return cls(
            id=order.id,
            commodity=order.commodity,
            location=order.location,
            quantity=order.quantity,
            price=float(order.price),
            currency=order.currency,
            visibility=order.visibility,
            updated_at=order.updated_at,
        )


class UpsertSellOrderResponse(BaseModel):
    order: SellOrderResponse
    replaced: bool


class UpsertBuyOrderResponse(BaseModel):
    order: BuyOrderResponse
    replaced: bool
