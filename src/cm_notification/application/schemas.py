# src/cm_notification/application/schemas.py
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from src.cm_notification.domain.models import Notification


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str | None
    data: dict[str, Any] | None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, n: Notification) -> "NotificationResponse":
        return cls(
            id=n.id,
            type=n.type,
            title=n.title,
            message=n.message,
            data=n.data,
            is_read=n.is_read,
            created_at=n.created_at,
        )


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int
