# src/cm_order/domain/repository.py
"""OrderRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_order.domain.models import BuyOrder, SellOrder


class OrderRepositoryProtocol(Protocol):
    async def list_sell_orders(self, db: AsyncSession) -> list[SellOrder]: ...

    async def list_buy_orders(self, db: AsyncSession) -> list[BuyOrder]: ...

    async def list_sell_orders_by_owner(
        self, db: AsyncSession, owner_id: int
    ) -> list[SellOrder]: ...

    async def list_buy_orders_by_owner(
        self, db: AsyncSession, owner_id: int
    ) -> list[BuyOrder]: ...

    async def get_sell_order(self, db: AsyncSession, order_id: int) -> SellOrder | None: ...

    async def get_buy_order(self, db: AsyncSession, order_id: int) -> BuyOrder | None: ...

    async def replace_or_insert_sell_order(
        self, db: AsyncSession, order: SellOrder
    ) -> tuple[SellOrder, bool]: ...

    async def replace_or_insert_buy_order(
        self, db: AsyncSession, order: BuyOrder
    ) -> tuple[BuyOrder, bool]: ...

    async def delete_sell_order(self, db: AsyncSession, order_id: int) -> None: ...

    async def delete_buy_order(self, db: AsyncSession, order_id: int) -> None: ...
