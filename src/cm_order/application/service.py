# src/cm_order/application/service.py
"""OrderApplicationService — the owner's side of standing orders.

Write methods commit; read methods don't. Posting an order whose composite
key already exists replaces it (same id, new price/limits/quantity).
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.enums import LimitMode, post_capability
from src.cm_common.errors import (
    InvalidOrderError,
    OrderNotFoundError,
    OrderPermissionDeniedError,
)
from src.cm_gateway.auth.identity import Identity
from src.cm_inventory.domain.availability import available_quantity
from src.cm_inventory.domain.models import InventoryInfo, inventory_key
from src.cm_inventory.domain.repository import InventoryRepositoryProtocol
from src.cm_inventory.infrastructure.persistence import InventoryRepository
from src.cm_order.application.schemas import (
    BuyOrderResponse,
    SellOrderResponse,
    UpsertBuyOrderRequest,
    UpsertBuyOrderResponse,
    UpsertSellOrderRequest,
    UpsertSellOrderResponse,
)
from src.cm_order.domain.models import BuyOrder, SellOrder
from src.cm_order.domain.repository import OrderRepositoryProtocol
from src.cm_order.infrastructure.persistence import OrderRepository
from src.cm_permission.application.service import PermissionOracle, PermissionService

logger = logging.getLogger(__name__)


def _sell_response(order: SellOrder, inventory: InventoryInfo) -> SellOrderResponse:
    return SellOrderResponse.from_domain(
        order,
        fio_quantity=inventory.quantity,
        available_quantity=available_quantity(
            inventory.quantity, order.limit_mode, order.limit_quantity
        ),
        fio_uploaded_at=inventory.fio_uploaded_at,
    )


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        inventory_repo: InventoryRepositoryProtocol | None = None,
        permissions: PermissionOracle | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._inventory: InventoryRepositoryProtocol = inventory_repo or InventoryRepository()
        self._permissions: PermissionOracle = permissions or PermissionService()

    async def _check_post_permission(
        self, db: AsyncSession, identity: Identity, visibility: str
    ) -> None:
        capability = post_capability(visibility)
        if not await self._permissions.has_permission(db, identity.roles, capability):
            raise OrderPermissionDeniedError(visibility)

    # -- sell side ----------------------------------------------------------

    async def list_my_sell_orders(
        self, db: AsyncSession, identity: Identity
    ) -> list[SellOrderResponse]:
        orders = await self._repo.list_sell_orders_by_owner(db, identity.user_id)
        if not orders:
            return []
        inventory = await self._inventory.get_inventory_for_owners(db, [identity.user_id])
        return [
            _sell_response(
                o, inventory.get(inventory_key(o.owner_id, o.commodity, o.location), InventoryInfo())
            )
            for o in orders
        ]

    async def upsert_sell_order(
        self, db: AsyncSession, identity: Identity, req: UpsertSellOrderRequest
    ) -> UpsertSellOrderResponse:
        await self._check_post_permission(db, identity, req.visibility)
        if req.price < 0:
            raise InvalidOrderError("Price must not be negative")
        if req.limit_quantity is not None and req.limit_quantity < 0:
            raise InvalidOrderError("Limit quantity must not be negative")
        limit_quantity = None if req.limit_mode == LimitMode.NONE else req.limit_quantity

        draft = SellOrder(
            id=0,
            owner_id=identity.user_id,
            commodity=req.commodity,
            location=req.location,
            price=req.price,
            currency=req.currency,
            visibility=req.visibility,
            limit_mode=req.limit_mode,
            limit_quantity=limit_quantity,
        )
        try:
            stored, replaced = await self._repo.replace_or_insert_sell_order(db, draft)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Sell order %s %s: user=%s %s@%s",
            stored.id, "replaced" if replaced else "created",
            identity.user_id, stored.commodity, stored.location,
        )
        inventory = await self._inventory.get_quantity(
            db, identity.user_id, stored.commodity, stored.location
        )
        return UpsertSellOrderResponse(order=_sell_response(stored, inventory), replaced=replaced)

    async def delete_sell_order(
        self, db: AsyncSession, identity: Identity, order_id: int
    ) -> None:
        order = await self._repo.get_sell_order(db, order_id)
        if order is None or order.owner_id != identity.user_id:
            raise OrderNotFoundError("sell", order_id)
        try:
            await self._repo.delete_sell_order(db, order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Sell order %s deleted by user=%s", order_id, identity.user_id)

    # -- buy side -----------------------------------------------------------

    async def list_my_buy_orders(
        self, db: AsyncSession, identity: Identity
    ) -> list[BuyOrderResponse]:
        orders = await self._repo.list_buy_orders_by_owner(db, identity.user_id)
        return [BuyOrderResponse.from_domain(o) for o in orders]

    async def upsert_buy_order(
        self, db: AsyncSession, identity: Identity, req: UpsertBuyOrderRequest
    ) -> UpsertBuyOrderResponse:
        await self._check_post_permission(db, identity, req.visibility)
        if req.quantity <= 0:
            raise InvalidOrderError("Quantity must be greater than 0")
        if req.price < 0:
            raise InvalidOrderError("Price must not be negative")

        draft = BuyOrder(
            id=0,
            owner_id=identity.user_id,
            commodity=req.commodity,
            location=req.location,
            quantity=req.quantity,
            price=req.price,
            currency=req.currency,
            visibility=req.visibility,
        )
        try:
            stored, replaced = await self._repo.replace_or_insert_buy_order(db, draft)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Buy order %s %s: user=%s %s@%s qty=%d",
            stored.id, "replaced" if replaced else "created",
            identity.user_id, stored.commodity, stored.location, stored.quantity,
        )
        return UpsertBuyOrderResponse(order=BuyOrderResponse.from_domain(stored), replaced=replaced)

    async def delete_buy_order(
        self, db: AsyncSession, identity: Identity, order_id: int
    ) -> None:
        order = await self._repo.get_buy_order(db, order_id)
        if order is None or order.owner_id != identity.user_id:
            raise OrderNotFoundError("buy", order_id)
        try:
            await self._repo.delete_buy_order(db, order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Buy order %s deleted by user=%s", order_id, identity.user_id)
