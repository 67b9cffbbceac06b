"""Tests for cm_common.errors and cm_common.response."""

from src.cm_common.errors import (
    AppError,
    BadRequestError,
    ForbiddenError,
    InvalidTransitionError,
    NotCounterpartyError,
    NotFoundError,
    OrderNotFoundError,
    ReservationOrderMissingError,
    ReservationPermissionDeniedError,
    SelfReservationError,
)
from src.cm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_kinds_carry_http_status(self) -> None:
        assert NotFoundError(1, "x").http_status == 404
        assert BadRequestError(1, "x").http_status == 400
        assert ForbiddenError(1, "x").http_status == 403


class TestSpecificErrors:
    def test_order_not_found(self) -> None:
        err = OrderNotFoundError("sell", 12)
        assert err.code == 4004
        assert err.http_status == 404
        assert err.message == "Sell order not found: 12"

    def test_self_reservation_names_kind(self) -> None:
        err = SelfReservationError("buy")
        assert isinstance(err, BadRequestError)
        assert err.message == "You cannot create a reservation against your own buy order"

    def test_invalid_transition(self) -> None:
        err = InvalidTransitionError("rejected", "pending")
        assert err.http_status == 400
        assert "'rejected'" in err.message
        assert "'pending'" in err.message

    def test_permission_denied_names_visibility(self) -> None:
        err = ReservationPermissionDeniedError("partner")
        assert err.http_status == 403
        assert "partner" in err.message

    def test_counterparty_action(self) -> None:
        assert NotCounterpartyError("reopen a reservation").message == (
            "Only the counterparty can reopen a reservation"
        )

    def test_order_missing_is_not_found(self) -> None:
        assert isinstance(ReservationOrderMissingError(3), NotFoundError)


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 7})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 7}

    def test_success_dumps_models(self) -> None:
        resp = success_response([ApiResponse(code=3)])
        assert resp.data[0]["code"] == 3

    def test_error(self) -> None:
        resp = error_response(5001, "Reservation not found: 9")
        assert resp.code == 5001
        assert resp.message == "Reservation not found: 9"
        assert resp.data is None

    def test_serialization(self) -> None:
        d = success_response({"price": 65}).model_dump()
        for field in ("code", "message", "data", "timestamp", "request_id"):
            assert field in d
