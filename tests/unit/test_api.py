"""HTTP-level tests: routing, envelopes and error rendering.

Auth and the DB session are replaced through dependency_overrides; each
router's module-level service is swapped for a mock.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.cm_common.database import get_db_session
from src.cm_common.errors import InvalidTransitionError, NotReservationPartyError
from src.cm_gateway.auth.dependencies import get_current_identity
from src.cm_gateway.auth.identity import Identity
from src.cm_market.domain.models import ListingFilters
from src.cm_reservation.application.schemas import ReservationResponse
from src.main import app

ALICE = Identity(user_id=1, roles=["member"])


async def _fake_db():
    yield MagicMock()


@pytest.fixture
def as_alice():
    app.dependency_overrides[get_current_identity] = lambda: ALICE
    app.dependency_overrides[get_db_session] = _fake_db
    yield
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_missing_token_is_401(client: AsyncClient) -> None:
    app.dependency_overrides[get_db_session] = _fake_db
    try:
        resp = await client.get("/api/v1/market/listings")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_listing_filters_are_normalized(client, as_alice, monkeypatch) -> None:
    from src.cm_market.api import router as market_router

    service = MagicMock()
    service.list_sell_listings = AsyncMock(return_value=[])
    monkeypatch.setattr(market_router, "_service", service)

    resp = await client.get(
        "/api/v1/market/listings", params={"commodity": " h2o ", "destination": "mor"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == 0
    assert body["data"] == []
    filters = service.list_sell_listings.call_args.args[2]
    assert filters == ListingFilters(commodity="H2O", location=None, destination="MOR")


@pytest.mark.asyncio
async def test_create_reservation_returns_201(client, as_alice, monkeypatch) -> None:
    from src.cm_reservation.api import router as reservation_router

    service = MagicMock()
    service.create_reservation = AsyncMock(return_value=ReservationResponse(
        id=5, sell_order_id=10, buy_order_id=None, counterparty_user_id=1,
        quantity=40, status="pending", notes=None, expires_at=None,
        created_at=None, updated_at=None,
    ))
    monkeypatch.setattr(reservation_router, "_service", service)

    resp = await client.post(
        "/api/v1/reservations", json={"order_kind": "sell", "order_id": 10, "quantity": 40}
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["status"] == "pending"


@pytest.mark.asyncio
async def test_reopen_routes_to_pending(client, as_alice, monkeypatch) -> None:
    from src.cm_reservation.api import router as reservation_router

    service = MagicMock()
    service.transition_reservation = AsyncMock(
        side_effect=InvalidTransitionError("rejected", "pending")
    )
    monkeypatch.setattr(reservation_router, "_service", service)

    resp = await client.put("/api/v1/reservations/5/reopen", headers={"X-Request-ID": "req_t1"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == 5005
    assert body["data"] is None
    assert body["request_id"] == "req_t1"
    args = service.transition_reservation.call_args.args
    assert args[1:] == (5, "pending", 1, None)


@pytest.mark.asyncio
async def test_forbidden_error_rendered(client, as_alice, monkeypatch) -> None:
    from src.cm_reservation.api import router as reservation_router

    service = MagicMock()
    service.get_reservation = AsyncMock(side_effect=NotReservationPartyError())
    monkeypatch.setattr(reservation_router, "_service", service)

    resp = await client.get("/api/v1/reservations/5")

    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this reservation"
