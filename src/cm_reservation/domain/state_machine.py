"""Reservation status state machine and authorization matrix.

    pending   -> confirmed | rejected | cancelled
    confirmed -> fulfilled | cancelled
    cancelled -> pending            (reopen)
    rejected, fulfilled, expired    terminal

Who may drive each target status:

    confirmed, rejected  order owner
    fulfilled, cancelled either party
    pending (reopen)     counterparty
"""
from enum import Enum

from src.cm_common.enums import ReservationStatus
from src.cm_common.errors import (
    InvalidTransitionError,
    NotCounterpartyError,
    NotOrderOwnerError,
    NotReservationPartyError,
)

_S = ReservationStatus

VALID_TRANSITIONS: dict[str, frozenset[str]] = {
    _S.PENDING.value: frozenset({_S.CONFIRMED.value, _S.REJECTED.value, _S.CANCELLED.value}),
    _S.CONFIRMED.value: frozenset({_S.FULFILLED.value, _S.CANCELLED.value}),
    _S.CANCELLED.value: frozenset({_S.PENDING.value}),
    _S.REJECTED.value: frozenset(),
    _S.FULFILLED.value: frozenset(),
    _S.EXPIRED.value: frozenset(),
}


class Actor(str, Enum):
    OWNER = "owner"
    COUNTERPARTY = "counterparty"
    EITHER = "either"


ALLOWED_ACTOR: dict[str, Actor] = {
    _S.CONFIRMED.value: Actor.OWNER,
    _S.REJECTED.value: Actor.OWNER,
    _S.FULFILLED.value: Actor.EITHER,
    _S.CANCELLED.value: Actor.EITHER,
    _S.PENDING.value: Actor.COUNTERPARTY,
}


def _value(status: str) -> str:
    return status.value if isinstance(status, Enum) else status


def can_transition(current: str, target: str) -> bool:
    return _value(target) in VALID_TRANSITIONS.get(_value(current), frozenset())


def check_transition(current: str, target: str, is_owner: bool, is_counterparty: bool) -> None:
    """Raise unless the caller may move a reservation from current to target.

    Order of checks: party membership (Forbidden), state table (BadRequest),
    then the per-target actor rule (Forbidden). An outsider learns nothing
    about the reservation's status; a party always gets BadRequest for a
    transition that does not exist.
    """
    current, target = _value(current), _value(target)
    if not (is_owner or is_counterparty):
        raise NotReservationPartyError()
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)

    actor = ALLOWED_ACTOR[target]
    if actor is Actor.OWNER and not is_owner:
        raise NotOrderOwnerError()
    if actor is Actor.COUNTERPARTY and not is_counterparty:
        raise NotCounterpartyError("reopen a reservation")
