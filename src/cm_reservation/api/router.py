# src/cm_reservation/api/router.py
"""Reservation endpoints.

GET    /reservations                 — ?role=owner|counterparty|all&status=
GET    /reservations/{id}            — parties only
POST   /reservations                 — place against a sell or buy order
PUT    /reservations/{id}/confirm    — order owner
PUT    /reservations/{id}/reject     — order owner
PUT    /reservations/{id}/fulfill    — either party
PUT    /reservations/{id}/cancel     — either party
PUT    /reservations/{id}/reopen     — counterparty, cancelled -> pending
DELETE /reservations/{id}            — counterparty, pending only
"""
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.database import get_db_session
from src.cm_common.enums import ReservationStatus
from src.cm_common.response import ApiResponse, success_response
from src.cm_gateway.auth.dependencies import get_current_identity
from src.cm_gateway.auth.identity import Identity
from src.cm_reservation.application.schemas import (
    CreateReservationRequest,
    UpdateReservationStatusRequest,
)
from src.cm_reservation.application.service import ReservationApplicationService

router = APIRouter(prefix="/reservations", tags=["reservations"])

_service = ReservationApplicationService()

StatusFilter = Literal["pending", "confirmed", "rejected", "fulfilled", "expired", "cancelled"]


@router.get("")
async def list_reservations(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    role: Literal["owner", "counterparty", "all"] = Query("all"),
    status: StatusFilter | None = Query(None),
) -> ApiResponse:
    result = await _service.list_reservations(db, identity.user_id, role, status)
    return success_response(result, request)


@router.get("/{reservation_id}")
async def get_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_reservation(db, reservation_id, identity.user_id)
    return success_response(result, request)


@router.post("", status_code=201)
async def create_reservation(
    req: CreateReservationRequest,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_reservation(db, identity, req)
    return success_response(result, request)


async def _transition(
    reservation_id: int,
    new_status: ReservationStatus,
    body: UpdateReservationStatusRequest | None,
    request: Request,
    identity: Identity,
    db: AsyncSession,
) -> ApiResponse:
    notes = body.notes if body is not None else None
    result = await _service.transition_reservation(
        db, reservation_id, new_status.value, identity.user_id, notes
    )
    return success_response(result, request)


@router.put("/{reservation_id}/confirm")
async def confirm_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: UpdateReservationStatusRequest | None = None,
) -> ApiResponse:
    return await _transition(
        reservation_id, ReservationStatus.CONFIRMED, body, request, identity, db
    )


@router.put("/{reservation_id}/reject")
async def reject_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: UpdateReservationStatusRequest | None = None,
) -> ApiResponse:
    return await _transition(
        reservation_id, ReservationStatus.REJECTED, body, request, identity, db
    )


@router.put("/{reservation_id}/fulfill")
async def fulfill_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: UpdateReservationStatusRequest | None = None,
) -> ApiResponse:
    return await _transition(
        reservation_id, ReservationStatus.FULFILLED, body, request, identity, db
    )


@router.put("/{reservation_id}/cancel")
async def cancel_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: UpdateReservationStatusRequest | None = None,
) -> ApiResponse:
    return await _transition(
        reservation_id, ReservationStatus.CANCELLED, body, request, identity, db
    )


@router.put("/{reservation_id}/reopen")
async def reopen_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: UpdateReservationStatusRequest | None = None,
) -> ApiResponse:
    return await _transition(
        reservation_id, ReservationStatus.PENDING, body, request, identity, db
    )


@router.delete("/{reservation_id}")
async def delete_reservation(
    reservation_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_reservation(db, reservation_id, identity.user_id)
    return success_response({"id": reservation_id}, request)
