"""DatabaseNotificationSink — persists events as in-app notifications.

Runs in its own session (session_scope): delivery happens after the
originating transaction committed and must not share its connection.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.cm_common.database import session_scope
from src.cm_notification.domain.models import NotificationEvent
from src.cm_notification.domain.repository import NotificationRepositoryProtocol
from src.cm_notification.infrastructure.persistence import NotificationRepository

logger = logging.getLogger(__name__)


class DatabaseNotificationSink:
    def __init__(
        self,
        repo: NotificationRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()
        self._session_factory = session_factory

    async def deliver(self, event: NotificationEvent) -> None:
        async with session_scope(self._session_factory) as db:
            notification_id = await self._repo.insert(db, event)
        logger.debug(
            "Notification %s stored: type=%s recipient=%s",
            notification_id, event.type, event.recipient_user_id,
        )
