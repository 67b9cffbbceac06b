"""Unified error codes and custom exceptions.

Every domain failure is one of three kinds, mirrored by the intermediate
classes below: NotFoundError (404), BadRequestError (400), ForbiddenError (403).

Error code ranges:
  1xxx: Auth/User
  4xxx: Order
  5xxx: Reservation
  6xxx: Notification
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class BadRequestError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


class ForbiddenError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 403)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AccountDisabledError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled")


# --- 4xxx: Order ---

class InvalidOrderError(BadRequestError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, detail)


class OrderPermissionDeniedError(ForbiddenError):
    def __init__(self, visibility: str) -> None:
        super().__init__(4003, f"You do not have permission to create {visibility} orders")


class OrderNotFoundError(NotFoundError):
    def __init__(self, kind: str, order_id: int) -> None:
        super().__init__(4004, f"{kind.capitalize()} order not found: {order_id}")


# --- 5xxx: Reservation ---

class ReservationNotFoundError(NotFoundError):
    def __init__(self, reservation_id: int) -> None:
        super().__init__(5001, f"Reservation not found: {reservation_id}")


class ReservationOrderMissingError(NotFoundError):
    def __init__(self, reservation_id: int) -> None:
        super().__init__(5002, f"Associated order not found for reservation {reservation_id}")


class SelfReservationError(BadRequestError):
    def __init__(self, kind: str) -> None:
        super().__init__(5003, f"You cannot create a reservation against your own {kind} order")


class InvalidReservationQuantityError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(5004, "Quantity must be greater than 0")


class InvalidTransitionError(BadRequestError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(5005, f"Cannot transition from '{current}' to '{target}'")


class ReservationNotDeletableError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(5006, "Only pending reservations can be deleted")


class ReservationPermissionDeniedError(ForbiddenError):
    def __init__(self, visibility: str) -> None:
        super().__init__(
            5101, f"You do not have permission to place reservations on {visibility} orders"
        )


class NotOrderOwnerError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__(5102, "Only the order owner can perform this action")


class NotCounterpartyError(ForbiddenError):
    def __init__(self, action: str = "perform this action") -> None:
        super().__init__(5103, f"Only the counterparty can {action}")


class NotReservationPartyError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__(5104, "You do not have access to this reservation")


# --- 6xxx: Notification ---

class NotificationNotFoundError(NotFoundError):
    def __init__(self, notification_id: int) -> None:
        super().__init__(6001, f"Notification not found: {notification_id}")
