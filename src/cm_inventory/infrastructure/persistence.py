# src/cm_inventory/infrastructure/persistence.py
"""InventoryRepository — reads fio_inventory joined to fio_user_storage.

The tables are written by the FIO sync job; this module never writes.
Storages without a location (ships in flight) are ignored.
"""
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_inventory.domain.models import (
    InventoryInfo,
    InventorySnapshotEntry,
    inventory_key,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_INVENTORY_FOR_OWNERS_SQL = text("""
    SELECT s.user_id AS owner_id, i.commodity_ticker AS commodity,
           s.location_id AS location, i.quantity, s.fio_uploaded_at
    FROM fio_inventory i
    JOIN fio_user_storage s ON s.id = i.user_storage_id
    WHERE s.user_id IN :owner_ids
      AND s.location_id IS NOT NULL
""").bindparams(bindparam("owner_ids", expanding=True))

_INVENTORY_FOR_KEY_SQL = text("""
    SELECT s.user_id AS owner_id, i.commodity_ticker AS commodity,
           s.location_id AS location, i.quantity, s.fio_uploaded_at
    FROM fio_inventory i
    JOIN fio_user_storage s ON s.id = i.user_storage_id
    WHERE s.user_id = :owner_id
      AND i.commodity_ticker = :commodity
      AND s.location_id = :location
""")


# ---------------------------------------------------------------------------
# Row mapper + folding
# ---------------------------------------------------------------------------


def _row_to_entry(row: Any) -> InventorySnapshotEntry:
    return InventorySnapshotEntry(
        owner_id=row.owner_id,
        commodity=row.commodity,
        location=row.location,
        quantity=int(row.quantity),
        fio_uploaded_at=row.fio_uploaded_at,
    )


def sum_by_location(entries: list[InventorySnapshotEntry]) -> dict[str, InventoryInfo]:
    """Sum quantities per owner:commodity:location, keeping the newest upload time."""
    inventory: dict[str, InventoryInfo] = {}
    for entry in entries:
        key = inventory_key(entry.owner_id, entry.commodity, entry.location)
        info = inventory.setdefault(key, InventoryInfo())
        info.quantity += entry.quantity
        if entry.fio_uploaded_at is not None and (
            info.fio_uploaded_at is None or entry.fio_uploaded_at > info.fio_uploaded_at
        ):
            info.fio_uploaded_at = entry.fio_uploaded_at
    return inventory


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class InventoryRepository:
    async def get_inventory_for_owners(
        self, db: AsyncSession, owner_ids: list[int]
    ) -> dict[str, InventoryInfo]:
        if not owner_ids:
            return {}
        result = await db.execute(
            _INVENTORY_FOR_OWNERS_SQL, {"owner_ids": sorted(set(owner_ids))}
        )
        return sum_by_location([_row_to_entry(row) for row in result.fetchall()])

    async def get_quantity(
        self, db: AsyncSession, owner_id: int, commodity: str, location: str
    ) -> InventoryInfo:
        result = await db.execute(
            _INVENTORY_FOR_KEY_SQL,
            {"owner_id": owner_id, "commodity": commodity, "location": location},
        )
        summed = sum_by_location([_row_to_entry(row) for row in result.fetchall()])
        return summed.get(inventory_key(owner_id, commodity, location), InventoryInfo())
