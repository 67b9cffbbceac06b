"""Inventory domain models — read-only view of the synced FIO snapshot."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class InventorySnapshotEntry:
    """One storage row: a seller may hold the same commodity at one location
    across several storages (base, warehouse, ship)."""

    owner_id: int
    commodity: str
    location: str
    quantity: int
    fio_uploaded_at: datetime | None = None


@dataclass
class InventoryInfo:
    """Quantity summed over all storages at one location."""

    quantity: int = 0
    fio_uploaded_at: datetime | None = None


def inventory_key(owner_id: int, commodity: str, location: str) -> str:
    return f"{owner_id}:{commodity}:{location}"
