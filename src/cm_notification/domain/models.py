"""Notification domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class NotificationEvent:
    """Emitted by a committed state change; delivered after the fact."""

    recipient_user_id: int
    type: str
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notification:
    id: int
    user_id: int
    type: str
    title: str
    message: str | None
    data: dict[str, Any] | None
    is_read: bool
    created_at: datetime
