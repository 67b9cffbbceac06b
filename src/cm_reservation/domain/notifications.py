"""Reservation notification templates.

Type, title and message are a pure function of the new status; the recipient
is whichever party did not act.
"""
from src.cm_common.enums import NotificationType, ReservationStatus
from src.cm_notification.domain.models import NotificationEvent
from src.cm_reservation.domain.models import ReservationDetails

_S = ReservationStatus

# status -> (type, title, message template)
_TEMPLATES: dict[str, tuple[str, str, str]] = {
    _S.CONFIRMED.value: (
        NotificationType.RESERVATION_CONFIRMED.value,
        "Reservation Confirmed",
        "{actor} confirmed your reservation for {quantity} {commodity}",
    ),
    _S.REJECTED.value: (
        NotificationType.RESERVATION_REJECTED.value,
        "Reservation Rejected",
        "{actor} rejected your reservation for {quantity} {commodity}",
    ),
    _S.FULFILLED.value: (
        NotificationType.RESERVATION_FULFILLED.value,
        "Reservation Fulfilled",
        "{actor} marked the reservation for {quantity} {commodity} as fulfilled",
    ),
    _S.CANCELLED.value: (
        NotificationType.RESERVATION_CANCELLED.value,
        "Reservation Cancelled",
        "{actor} cancelled the reservation for {quantity} {commodity}",
    ),
    _S.EXPIRED.value: (
        NotificationType.RESERVATION_EXPIRED.value,
        "Reservation Expired",
        "Your reservation for {quantity} {commodity} has expired",
    ),
    _S.PENDING.value: (
        NotificationType.RESERVATION_PLACED.value,
        "Reservation Reopened",
        "{actor} reopened the reservation for {quantity} {commodity}",
    ),
}


def _payload(details: ReservationDetails) -> dict:
    r = details.reservation
    return {
        "reservationId": r.id,
        "orderId": details.order_id,
        "orderType": details.order_kind,
        "counterpartyUserId": r.counterparty_user_id,
        "quantity": r.quantity,
        "commodity": details.commodity,
        "location": details.location,
    }


_PLACED_TEMPLATES = {
    "sell": "{actor} wants to reserve {quantity} {commodity} from your sell order",
    "buy": "{actor} wants to fill {quantity} {commodity} on your buy order",
}


def placed_event(details: ReservationDetails) -> NotificationEvent:
    """Sent to the order owner when someone reserves against their order."""
    return NotificationEvent(
        recipient_user_id=details.owner_id,
        type=NotificationType.RESERVATION_PLACED.value,
        title="New Reservation",
        message=_PLACED_TEMPLATES[details.order_kind].format(
            actor=details.counterparty_name,
            quantity=details.reservation.quantity,
            commodity=details.commodity,
        ),
        data=_payload(details),
    )


def status_event(
    details: ReservationDetails, new_status: str, acting_user_id: int
) -> NotificationEvent:
    """Sent to the party that did not perform the transition."""
    type_, title, template = _TEMPLATES[new_status]
    acted_as_owner = acting_user_id == details.owner_id
    actor_name = details.owner_name if acted_as_owner else details.counterparty_name
    recipient = details.reservation.counterparty_user_id if acted_as_owner else details.owner_id
    return NotificationEvent(
        recipient_user_id=recipient,
        type=type_,
        title=title,
        message=template.format(
            actor=actor_name,
            quantity=details.reservation.quantity,
            commodity=details.commodity,
        ),
        data={**_payload(details), "status": new_status},
    )
