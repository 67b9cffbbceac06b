"""Notification sink Protocol.

A sink delivers one event somewhere (notifications table, Discord DM, ...).
Sinks may raise; the dispatcher decides what a failure means.
"""
from typing import Protocol

from src.cm_notification.domain.models import NotificationEvent


class NotificationSinkProtocol(Protocol):
    async def deliver(self, event: NotificationEvent) -> None: ...
