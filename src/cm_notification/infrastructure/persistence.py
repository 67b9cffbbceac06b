# src/cm_notification/infrastructure/persistence.py
"""NotificationRepository — raw SQL over the notifications table."""
import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_notification.domain.models import Notification, NotificationEvent

_INSERT_SQL = text("""
    INSERT INTO notifications (user_id, type, title, message, data)
    VALUES (:user_id, :type, :title, :message, CAST(:data AS JSONB))
    RETURNING id
""")

_LIST_SQL = text("""
    SELECT id, user_id, type, title, message, data, is_read, created_at
    FROM notifications
    WHERE user_id = :user_id
      AND (:unread_only = FALSE OR is_read = FALSE)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_COUNT_UNREAD_SQL = text("""
    SELECT COUNT(*) AS unread FROM notifications
    WHERE user_id = :user_id AND is_read = FALSE
""")

_MARK_READ_SQL = text("""
    UPDATE notifications SET is_read = TRUE
    WHERE id = :id AND user_id = :user_id
    RETURNING id
""")

_MARK_ALL_READ_SQL = text("""
    UPDATE notifications SET is_read = TRUE
    WHERE user_id = :user_id AND is_read = FALSE
    RETURNING id
""")


def _row_to_notification(row: Any) -> Notification:
    data = row.data
    if isinstance(data, str):
        data = json.loads(data)
    return Notification(
        id=row.id,
        user_id=row.user_id,
        type=row.type,
        title=row.title,
        message=row.message,
        data=data,
        is_read=bool(row.is_read),
        created_at=row.created_at,
    )


class NotificationRepository:
    async def insert(self, db: AsyncSession, event: NotificationEvent) -> int:
        result = await db.execute(
            _INSERT_SQL,
            {
                "user_id": event.recipient_user_id,
                "type": event.type,
                "title": event.title,
                "message": event.message,
                "data": json.dumps(event.data, default=str),
            },
        )
        return int(result.scalar_one())

    async def list_for_user(
        self, db: AsyncSession, user_id: int, unread_only: bool, limit: int, offset: int
    ) -> list[Notification]:
        result = await db.execute(
            _LIST_SQL,
            {"user_id": user_id, "unread_only": unread_only, "limit": limit, "offset": offset},
        )
        return [_row_to_notification(row) for row in result.fetchall()]

    async def count_unread(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(_COUNT_UNREAD_SQL, {"user_id": user_id})
        return int(result.scalar_one())

    async def mark_read(self, db: AsyncSession, notification_id: int, user_id: int) -> bool:
        result = await db.execute(_MARK_READ_SQL, {"id": notification_id, "user_id": user_id})
        return result.fetchone() is not None

    async def mark_all_read(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(_MARK_ALL_READ_SQL, {"user_id": user_id})
        return len(result.fetchall())
