# src/cm_notification/domain/repository.py
"""NotificationRepository Protocol."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_notification.domain.models import Notification, NotificationEvent


class NotificationRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, event: NotificationEvent) -> int: ...

    async def list_for_user(
        self, db: AsyncSession, user_id: int, unread_only: bool, limit: int, offset: int
    ) -> list[Notification]: ...

    async def count_unread(self, db: AsyncSession, user_id: int) -> int: ...

    async def mark_read(self, db: AsyncSession, notification_id: int, user_id: int) -> bool: ...

    async def mark_all_read(self, db: AsyncSession, user_id: int) -> int: ...
