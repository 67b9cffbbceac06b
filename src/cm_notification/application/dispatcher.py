"""NotificationDispatcher — post-commit delivery of domain events.

Callers commit first, then dispatch. A failing sink is logged and skipped:
the state change that produced the event has already succeeded and stays
that way. Retries, if any, belong to the sink.
"""
import logging
from collections.abc import Iterable

from src.cm_notification.domain.models import NotificationEvent
from src.cm_notification.domain.sink import NotificationSinkProtocol
from src.cm_notification.infrastructure.sink import DatabaseNotificationSink

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, sinks: list[NotificationSinkProtocol] | None = None) -> None:
        self._sinks: list[NotificationSinkProtocol] = (
            sinks if sinks is not None else [DatabaseNotificationSink()]
        )

    async def dispatch(self, events: Iterable[NotificationEvent]) -> int:
        """Deliver every event to every sink. Returns the number of failed deliveries."""
        failures = 0
        for event in events:
            for sink in self._sinks:
                try:
                    await sink.deliver(event)
                except Exception:
                    failures += 1
                    logger.exception(
                        "Notification delivery failed: type=%s recipient=%s sink=%s",
                        event.type, event.recipient_user_id, type(sink).__name__,
                    )
        return failures
