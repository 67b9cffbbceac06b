# src/cm_market/api/router.py
"""Market board.

GET /market/listings      — sell orders with remaining quantity
GET /market/buy-requests  — buy orders with remaining quantity

Both accept ?commodity=&location=&destination=; destination adds jump counts
and sorts nearest first.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.database import get_db_session
from src.cm_common.response import ApiResponse, success_response
from src.cm_gateway.auth.dependencies import get_current_identity
from src.cm_gateway.auth.identity import Identity
from src.cm_market.application.schemas import MarketBuyRequestResponse, MarketListingResponse
from src.cm_market.application.service import MarketApplicationService
from src.cm_market.domain.models import ListingFilters
from src.cm_market.infrastructure.distance_client import FioDistanceClient

router = APIRouter(prefix="/market", tags=["market"])

_distance = FioDistanceClient()
_service = MarketApplicationService(distance=_distance)


async def close_distance_client() -> None:
    await _distance.close()


def _ticker(value: str | None) -> str | None:
    value = (value or "").strip().upper()
    return value or None


def get_listing_filters(
    commodity: str | None = Query(None, description="Commodity ticker, e.g. H2O"),
    location: str | None = Query(None, description="Location natural id, e.g. BEN"),
    destination: str | None = Query(None, description="Sort by jump count to this location"),
) -> ListingFilters:
    return ListingFilters(
        commodity=_ticker(commodity),
        location=_ticker(location),
        destination=_ticker(destination),
    )


@router.get("/listings")
async def list_sell_listings(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filters: Annotated[ListingFilters, Depends(get_listing_filters)],
) -> ApiResponse:
    listings = await _service.list_sell_listings(db, identity, filters)
    return success_response([MarketListingResponse.from_domain(m) for m in listings], request)


@router.get("/buy-requests")
async def list_buy_listings(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filters: Annotated[ListingFilters, Depends(get_listing_filters)],
) -> ApiResponse:
    requests = await _service.list_buy_listings(db, identity, filters)
    return success_response([MarketBuyRequestResponse.from_domain(m) for m in requests], request)
