# src/cm_market/application/service.py
"""MarketApplicationService — assembles the market board.

All methods are read-only; no commit/rollback needed. The queries
(orders, inventory, reservation aggregates) run one after another without a
shared snapshot, so a reservation placed mid-request may be missing from
that response.

Sell side:
  orders -> visibility gate -> filters -> inventory -> availability
  -> jump counts -> active reservations -> remaining -> sort
Buy side: the same without inventory; remaining is netted against the
requested quantity and the price tiebreak is descending.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.enums import OrderKind, OrderVisibility, view_capability
from src.cm_gateway.auth.identity import Identity
from src.cm_inventory.domain.availability import available_quantity, remaining_quantity
from src.cm_inventory.domain.models import InventoryInfo, inventory_key
from src.cm_inventory.domain.repository import InventoryRepositoryProtocol
from src.cm_inventory.infrastructure.persistence import InventoryRepository
from src.cm_market.domain.distance import DistanceOracle, jump_sort_key, resolve_jump_counts
from src.cm_market.domain.models import ListingFilters, MarketBuyRequest, MarketListing
from src.cm_market.infrastructure.distance_client import FioDistanceClient
from src.cm_order.domain.models import BuyOrder, SellOrder
from src.cm_order.domain.repository import OrderRepositoryProtocol
from src.cm_order.infrastructure.persistence import OrderRepository
from src.cm_permission.application.service import PermissionOracle, PermissionService
from src.cm_reservation.domain.models import ReservationAggregate
from src.cm_reservation.domain.repository import ReservationRepositoryProtocol
from src.cm_reservation.infrastructure.persistence import ReservationRepository

logger = logging.getLogger(__name__)


class MarketApplicationService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        inventory_repo: InventoryRepositoryProtocol | None = None,
        reservation_repo: ReservationRepositoryProtocol | None = None,
        permissions: PermissionOracle | None = None,
        distance: DistanceOracle | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._inventory: InventoryRepositoryProtocol = inventory_repo or InventoryRepository()
        self._reservations: ReservationRepositoryProtocol = (
            reservation_repo or ReservationRepository()
        )
        self._permissions: PermissionOracle = permissions or PermissionService()
        self._distance: DistanceOracle = distance or FioDistanceClient()

    async def _visible_visibilities(self, db: AsyncSession, identity: Identity) -> set[str]:
        allowed: set[str] = set()
        for visibility in OrderVisibility:
            if await self._permissions.has_permission(
                db, identity.roles, view_capability(visibility)
            ):
                allowed.add(visibility.value)
        return allowed

    @staticmethod
    def _filter_orders(
        orders: list[SellOrder] | list[BuyOrder],
        viewer_id: int,
        allowed: set[str],
        filters: ListingFilters,
    ) -> list:
        kept = []
        for order in orders:
            if order.owner_id != viewer_id and order.visibility not in allowed:
                continue
            if filters.commodity and order.commodity != filters.commodity:
                continue
            if filters.location and order.location != filters.location:
                continue
            kept.append(order)
        return kept

    async def _jump_counts(
        self, locations: list[str], destination: str | None
    ) -> dict[str, int | None]:
        if not destination:
            return {}
        return await resolve_jump_counts(self._distance, locations, destination)

    # -- sell side ----------------------------------------------------------

    async def list_sell_listings(
        self, db: AsyncSession, identity: Identity, filters: ListingFilters
    ) -> list[MarketListing]:
        allowed = await self._visible_visibilities(db, identity)
        if not allowed:
            return []

        orders = await self._orders.list_sell_orders(db)
        orders = self._filter_orders(orders, identity.user_id, allowed, filters)
        if not orders:
            return []

        seller_ids = sorted({o.owner_id for o in orders})
        inventory = await self._inventory.get_inventory_for_owners(db, seller_ids)

        candidates: list[tuple[SellOrder, InventoryInfo, int]] = []
        for order in orders:
            info = inventory.get(
                inventory_key(order.owner_id, order.commodity, order.location), InventoryInfo()
            )
            available = available_quantity(info.quantity, order.limit_mode, order.limit_quantity)
            # Owners always see their own listings, even when nothing is for sale
            if available <= 0 and order.owner_id != identity.user_id:
                continue
            candidates.append((order, info, available))
        if not candidates:
            return []

        jump_counts = await self._jump_counts(
            [o.location for o, _, _ in candidates], filters.destination
        )
        aggregates = await self._reservations.aggregate_active(
            db, OrderKind.SELL.value, [o.id for o, _, _ in candidates]
        )

        listings = []
        for order, info, available in candidates:
            agg = aggregates.get(order.id, ReservationAggregate())
            listings.append(
                MarketListing(
                    id=order.id,
                    seller_id=order.owner_id,
                    seller_name=order.owner_name,
                    commodity=order.commodity,
                    location=order.location,
                    price=order.price,
                    currency=order.currency,
                    visibility=order.visibility,
                    fio_quantity=info.quantity,
                    available_quantity=available,
                    is_own=order.owner_id == identity.user_id,
                    jump_count=jump_counts.get(order.location),
                    active_reservation_count=agg.count,
                    reserved_quantity=agg.quantity,
                    remaining_quantity=remaining_quantity(available, agg.quantity),
                )
            )

        with_distance = bool(filters.destination)
        listings.sort(
            key=lambda m: (
                jump_sort_key(m.jump_count) if with_distance else 0.0,
                m.commodity,
                m.location,
                m.price,
            )
        )
        logger.debug(
            "Sell listings for user=%s: %d of %d orders", identity.user_id, len(listings), len(orders)
        )
        return listings

    # -- buy side -----------------------------------------------------------

    async def list_buy_listings(
        self, db: AsyncSession, identity: Identity, filters: ListingFilters
    ) -> list[MarketBuyRequest]:
        allowed = await self._visible_visibilities(db, identity)
        if not allowed:
            return []

        orders = await self._orders.list_buy_orders(db)
        orders = self._filter_orders(orders, identity.user_id, allowed, filters)
        if not orders:
            return []

        jump_counts = await self._jump_counts([o.location for o in orders], filters.destination)
        aggregates = await self._reservations.aggregate_active(
            db, OrderKind.BUY.value, [o.id for o in orders]
        )

        requests = []
        for order in orders:
            agg = aggregates.get(order.id, ReservationAggregate())
            requests.append(
                MarketBuyRequest(
                    id=order.id,
                    buyer_id=order.owner_id,
                    buyer_name=order.owner_name,
                    commodity=order.commodity,
                    location=order.location,
                    quantity=order.quantity,
                    price=order.price,
                    currency=order.currency,
                    visibility=order.visibility,
                    is_own=order.owner_id == identity.user_id,
                    jump_count=jump_counts.get(order.location),
                    active_reservation_count=agg.count,
                    reserved_quantity=agg.quantity,
                    remaining_quantity=remaining_quantity(order.quantity, agg.quantity),
                )
            )

        with_distance = bool(filters.destination)
        # Highest bid first within the same commodity and location
        requests.sort(
            key=lambda m: (
                jump_sort_key(m.jump_count) if with_distance else 0.0,
                m.commodity,
                m.location,
                -m.price,
            )
        )
        return requests
