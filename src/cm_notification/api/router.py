# src/cm_notification/api/router.py
"""In-app notification inbox.

GET /notifications               — newest first, ?unread_only=&limit=&offset=
GET /notifications/unread-count
PUT /notifications/{id}/read
PUT /notifications/read-all
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.database import get_db_session
from src.cm_common.response import ApiResponse, success_response
from src.cm_gateway.auth.dependencies import get_current_identity
from src.cm_gateway.auth.identity import Identity
from src.cm_notification.application.service import NotificationApplicationService

router = APIRouter(prefix="/notifications", tags=["notifications"])

_service = NotificationApplicationService()


@router.get("")
async def list_notifications(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    result = await _service.list_notifications(db, identity.user_id, unread_only, limit, offset)
    return success_response(result, request)


@router.get("/unread-count")
async def unread_count(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.unread_count(db, identity.user_id)
    return success_response(result, request)


@router.put("/read-all")
async def mark_all_read(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    count = await _service.mark_all_read(db, identity.user_id)
    return success_response({"updated": count}, request)


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.mark_read(db, identity.user_id, notification_id)
    return success_response({"id": notification_id}, request)
