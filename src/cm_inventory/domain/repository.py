# src/cm_inventory/domain/repository.py
"""InventoryRepository Protocol — read-only access to the FIO snapshot."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_inventory.domain.models import InventoryInfo


class InventoryRepositoryProtocol(Protocol):
    async def get_inventory_for_owners(
        self, db: AsyncSession, owner_ids: list[int]
    ) -> dict[str, InventoryInfo]: ...

    async def get_quantity(
        self, db: AsyncSession, owner_id: int, commodity: str, location: str
    ) -> InventoryInfo: ...
