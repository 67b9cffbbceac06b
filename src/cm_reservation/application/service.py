# src/cm_reservation/application/service.py
"""ReservationApplicationService — create, transition and delete reservations.

Every write follows the same shape: validate, persist, commit, then hand the
resulting NotificationEvent to the dispatcher. Delivery happens strictly
after commit, so a failing sink can never undo the state change.

No row lock is taken on transitions: two concurrent requests on the same
reservation both pass validation and the last write wins. Reservations are
not checked against remaining supply either; over-reservation is legal and
the owner arbitrates by rejecting.
"""
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.enums import OrderKind, ReservationStatus, place_capability
from src.cm_common.errors import (
    InvalidReservationQuantityError,
    NotCounterpartyError,
    NotReservationPartyError,
    OrderNotFoundError,
    ReservationNotDeletableError,
    ReservationNotFoundError,
    ReservationOrderMissingError,
    ReservationPermissionDeniedError,
    SelfReservationError,
)
from src.cm_gateway.auth.identity import Identity
from src.cm_notification.application.dispatcher import NotificationDispatcher
from src.cm_order.domain.models import BuyOrder, SellOrder
from src.cm_order.domain.repository import OrderRepositoryProtocol
from src.cm_order.infrastructure.persistence import OrderRepository
from src.cm_permission.application.service import PermissionOracle, PermissionService
from src.cm_reservation.application.schemas import (
    CreateReservationRequest,
    ReservationResponse,
    ReservationWithDetails,
)
from src.cm_reservation.domain.models import Reservation, ReservationDetails
from src.cm_reservation.domain.notifications import placed_event, status_event
from src.cm_reservation.domain.repository import ReservationRepositoryProtocol
from src.cm_reservation.domain.state_machine import check_transition
from src.cm_reservation.infrastructure.persistence import ReservationRepository

logger = logging.getLogger(__name__)


class ReservationApplicationService:
    def __init__(
        self,
        repo: ReservationRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
        permissions: PermissionOracle | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._repo: ReservationRepositoryProtocol = repo or ReservationRepository()
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._permissions: PermissionOracle = permissions or PermissionService()
        self._dispatcher = dispatcher or NotificationDispatcher()

    async def _load_order(
        self, db: AsyncSession, kind: str, order_id: int
    ) -> SellOrder | BuyOrder:
        if kind == OrderKind.SELL:
            order = await self._orders.get_sell_order(db, order_id)
        else:
            order = await self._orders.get_buy_order(db, order_id)
        if order is None:
            raise OrderNotFoundError(kind, order_id)
        return order

    async def _load_details(self, db: AsyncSession, reservation_id: int) -> ReservationDetails:
        details = await self._repo.get_with_details(db, reservation_id)
        if details is not None:
            return details
        # Distinguish "no such reservation" from "reservation lost its order"
        if await self._repo.get(db, reservation_id) is None:
            raise ReservationNotFoundError(reservation_id)
        raise ReservationOrderMissingError(reservation_id)

    # -- create -------------------------------------------------------------

    async def create_reservation(
        self, db: AsyncSession, identity: Identity, req: CreateReservationRequest
    ) -> ReservationResponse:
        return await self.place(
            db,
            identity,
            kind=req.order_kind,
            order_id=req.order_id,
            quantity=req.quantity,
            notes=req.notes,
            expires_at=req.expires_at,
        )

    async def place(
        self,
        db: AsyncSession,
        identity: Identity,
        kind: str,
        order_id: int,
        quantity: int,
        notes: str | None = None,
        expires_at: datetime | None = None,
    ) -> ReservationResponse:
        order = await self._load_order(db, kind, order_id)
        if order.owner_id == identity.user_id:
            raise SelfReservationError(kind)
        capability = place_capability(order.visibility)
        if not await self._permissions.has_permission(db, identity.roles, capability):
            raise ReservationPermissionDeniedError(order.visibility)
        if quantity <= 0:
            raise InvalidReservationQuantityError()

        try:
            reservation = await self._repo.insert(
                db, kind, order_id, identity.user_id, quantity, notes, expires_at
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Reservation %s placed: %s order %s by user=%s qty=%d",
            reservation.id, kind, order_id, identity.user_id, quantity,
        )
        await self._notify_placed(db, kind, order, reservation)
        return ReservationResponse.from_domain(reservation)

    async def _notify_placed(
        self, db: AsyncSession, kind: str, order: SellOrder | BuyOrder, reservation: Reservation
    ) -> None:
        # The reservation is committed; nothing here may fail the request
        try:
            details = await self._repo.get_with_details(db, reservation.id)
        except Exception:
            logger.exception("Details lookup failed for reservation %s", reservation.id)
            details = None
        if details is None:
            details = ReservationDetails(
                reservation=reservation,
                order_kind=kind,
                order_id=order.id,
                owner_id=order.owner_id,
                owner_name=order.owner_name,
                counterparty_name="Unknown",
                commodity=order.commodity,
                location=order.location,
                price=order.price,
                currency=order.currency,
            )
        await self._dispatcher.dispatch([placed_event(details)])

    # -- transition ---------------------------------------------------------

    async def transition_reservation(
        self,
        db: AsyncSession,
        reservation_id: int,
        new_status: str,
        acting_user_id: int,
        notes: str | None = None,
    ) -> ReservationResponse:
        new_status = ReservationStatus(new_status).value
        details = await self._load_details(db, reservation_id)
        current = details.reservation
        check_transition(
            current.status,
            new_status,
            is_owner=acting_user_id == details.owner_id,
            is_counterparty=acting_user_id == current.counterparty_user_id,
        )

        try:
            updated = await self._repo.update_status(db, reservation_id, new_status, notes)
            if updated is None:
                raise ReservationNotFoundError(reservation_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Reservation %s: %s -> %s by user=%s",
            reservation_id, current.status, new_status, acting_user_id,
        )
        details.reservation = updated
        await self._dispatcher.dispatch([status_event(details, new_status, acting_user_id)])
        return ReservationResponse.from_domain(updated)

    # -- delete -------------------------------------------------------------

    async def delete_reservation(
        self, db: AsyncSession, reservation_id: int, acting_user_id: int
    ) -> None:
        reservation = await self._repo.get(db, reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        if reservation.counterparty_user_id != acting_user_id:
            raise NotCounterpartyError("delete a reservation")
        if reservation.status != ReservationStatus.PENDING:
            raise ReservationNotDeletableError()

        try:
            await self._repo.delete(db, reservation_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Reservation %s deleted by user=%s", reservation_id, acting_user_id)

    # -- reads --------------------------------------------------------------

    async def get_reservation(
        self, db: AsyncSession, reservation_id: int, viewer_id: int
    ) -> ReservationWithDetails:
        details = await self._load_details(db, reservation_id)
        if viewer_id not in (details.owner_id, details.reservation.counterparty_user_id):
            raise NotReservationPartyError()
        return ReservationWithDetails.from_details(details, viewer_id)

    async def list_reservations(
        self,
        db: AsyncSession,
        viewer_id: int,
        role: str = "all",
        status: str | None = None,
    ) -> list[ReservationWithDetails]:
        rows = await self._repo.list_for_user(db, viewer_id, role, status)
        return [ReservationWithDetails.from_details(d, viewer_id) for d in rows]
