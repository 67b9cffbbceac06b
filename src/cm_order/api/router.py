# src/cm_order/api/router.py
"""Owner-facing order endpoints.

GET    /sell-orders          — caller's sell orders with FIO/available quantity
POST   /sell-orders          — replace-or-insert by (commodity, location, visibility, currency)
DELETE /sell-orders/{id}
GET    /buy-orders
POST   /buy-orders
DELETE /buy-orders/{id}
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.database import get_db_session
from src.cm_common.response import ApiResponse, success_response
from src.cm_gateway.auth.dependencies import get_current_identity
from src.cm_gateway.auth.identity import Identity
from src.cm_order.application.schemas import UpsertBuyOrderRequest, UpsertSellOrderRequest
from src.cm_order.application.service import OrderApplicationService

sell_router = APIRouter(prefix="/sell-orders", tags=["sell-orders"])
buy_router = APIRouter(prefix="/buy-orders", tags=["buy-orders"])

_service = OrderApplicationService()


@sell_router.get("")
async def list_sell_orders(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_my_sell_orders(db, identity)
    return success_response(result, request)


@sell_router.post("")
async def upsert_sell_order(
    req: UpsertSellOrderRequest,
    request: Request,
    response: Response,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.upsert_sell_order(db, identity, req)
    response.status_code = 200 if result.replaced else 201
    return success_response(result, request)


@sell_router.delete("/{order_id}")
async def delete_sell_order(
    order_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_sell_order(db, identity, order_id)
    return success_response({"id": order_id}, request)


@buy_router.get("")
async def list_buy_orders(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_my_buy_orders(db, identity)
    return success_response(result, request)


@buy_router.post("")
async def upsert_buy_order(
    req: UpsertBuyOrderRequest,
    request: Request,
    response: Response,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.upsert_buy_order(db, identity, req)
    response.status_code = 200 if result.replaced else 201
    return success_response(result, request)


@buy_router.delete("/{order_id}")
async def delete_buy_order(
    order_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_buy_order(db, identity, order_id)
    return success_response({"id": order_id}, request)
