# src/cm_notification/application/service.py
"""NotificationApplicationService — the recipient's inbox."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.errors import NotificationNotFoundError
from src.cm_notification.application.schemas import (
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from src.cm_notification.domain.repository import NotificationRepositoryProtocol
from src.cm_notification.infrastructure.persistence import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationApplicationService:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> NotificationListResponse:
        items = await self._repo.list_for_user(db, user_id, unread_only, limit, offset)
        unread = await self._repo.count_unread(db, user_id)
        return NotificationListResponse(
            items=[NotificationResponse.from_domain(n) for n in items],
            unread_count=unread,
        )

    async def unread_count(self, db: AsyncSession, user_id: int) -> UnreadCountResponse:
        return UnreadCountResponse(unread_count=await self._repo.count_unread(db, user_id))

    async def mark_read(self, db: AsyncSession, user_id: int, notification_id: int) -> None:
        updated = await self._repo.mark_read(db, notification_id, user_id)
        if not updated:
            raise NotificationNotFoundError(notification_id)
        await db.commit()

    async def mark_all_read(self, db: AsyncSession, user_id: int) -> int:
        count = await self._repo.mark_all_read(db, user_id)
        await db.commit()
        logger.debug("Marked %d notifications read for user=%s", count, user_id)
        return count
