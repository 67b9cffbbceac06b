# src/cm_reservation/domain/repository.py
"""ReservationRepository Protocol — interface contract for persistence layer."""
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_reservation.domain.models import (
    Reservation,
    ReservationAggregate,
    ReservationDetails,
)


class ReservationRepositoryProtocol(Protocol):
    async def insert(
        self,
        db: AsyncSession,
        kind: str,
        order_id: int,
        counterparty_user_id: int,
        quantity: int,
        notes: str | None,
        expires_at: datetime | None,
    ) -> Reservation: ...

    async def get(self, db: AsyncSession, reservation_id: int) -> Reservation | None: ...

    async def get_with_details(
        self, db: AsyncSession, reservation_id: int
    ) -> ReservationDetails | None: ...

    async def update_status(
        self, db: AsyncSession, reservation_id: int, status: str, notes: str | None
    ) -> Reservation | None: ...

    async def delete(self, db: AsyncSession, reservation_id: int) -> None: ...

    async def aggregate_active(
        self, db: AsyncSession, kind: str, order_ids: list[int]
    ) -> dict[int, ReservationAggregate]: ...

    async def list_for_user(
        self, db: AsyncSession, user_id: int, role: str, status: str | None
    ) -> list[ReservationDetails]: ...
