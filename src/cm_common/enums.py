"""Global enums — must match DB CHECK constraints exactly (see alembic/versions)."""

from enum import Enum


class OrderKind(str, Enum):
    """Which order table a reservation (or listing) points at."""
    SELL = "sell"
    BUY = "buy"


class OrderVisibility(str, Enum):
    """internal = members only, partner = trade partners."""
    INTERNAL = "internal"
    PARTNER = "partner"


class LimitMode(str, Enum):
    NONE = "none"
    MAX_SELL = "max_sell"
    RESERVE = "reserve"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    FULFILLED = "fulfilled"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


# Statuses that still represent a claim on supply
ACTIVE_RESERVATION_STATUSES: tuple[ReservationStatus, ...] = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
)


class NotificationType(str, Enum):
    RESERVATION_PLACED = "reservation_placed"
    RESERVATION_CONFIRMED = "reservation_confirmed"
    RESERVATION_REJECTED = "reservation_rejected"
    RESERVATION_FULFILLED = "reservation_fulfilled"
    RESERVATION_CANCELLED = "reservation_cancelled"
    RESERVATION_EXPIRED = "reservation_expired"


class Capability(str, Enum):
    """Permission ids stored in role_permissions.permission_id."""
    VIEW_INTERNAL = "orders.view_internal"
    VIEW_PARTNER = "orders.view_partner"
    POST_INTERNAL = "orders.post_internal"
    POST_PARTNER = "orders.post_partner"
    PLACE_INTERNAL = "reservations.place_internal"
    PLACE_PARTNER = "reservations.place_partner"


def view_capability(visibility: str) -> Capability:
    return (
        Capability.VIEW_PARTNER
        if visibility == OrderVisibility.PARTNER
        else Capability.VIEW_INTERNAL
    )


def post_capability(visibility: str) -> Capability:
    return (
        Capability.POST_PARTNER
        if visibility == OrderVisibility.PARTNER
        else Capability.POST_INTERNAL
    )


def place_capability(visibility: str) -> Capability:
    return (
        Capability.PLACE_PARTNER
        if visibility == OrderVisibility.PARTNER
        else Capability.PLACE_INTERNAL
    )
