# storefront/services/order_service.py
import logging
import uuid
from collections import defaultdict

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.exceptions import FetchError, NotFoundError
from storefront.models.order import Address, Order, OrderItem
from storefront.models.product import Product
from storefront.models.profile import Profile
from storefront.repositories.order_repo import AddressRepository, OrderRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import (
    AddressRead,
    AdminOrderRead,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for placed orders.

    Responsibilities:
      - order history for the current shopper (with address + items)
      - admin listing across all shoppers
      - admin status updates (free text, no transition rules)

    Placing orders lives in CheckoutService.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        address_repo: AddressRepository,
        profile_repo: ProfileRepository,
    ):
        self.order_repo = order_repo
        self.address_repo = address_repo
        self.profile_repo = profile_repo

    # -------- User-facing operations --------

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user, newest first, with items.
        """
        try:
            orders = self.order_repo.list_for_user(session, user_id, skip, limit)
            return self._build_order_reads(session, orders)
        except SQLAlchemyError as exc:
            logger.error("Failed to load orders for user %s: %s", user_id, exc)
            raise FetchError("Failed to load orders") from exc

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order for the user, including items.

        - NotFoundError if order not found or does not belong to this user.
        """
        try:
            order = self.order_repo.get_by_id(session, order_id)
            if order and order.user_id == user_id:
                return self._build_order_reads(session, [order])[0]
        except SQLAlchemyError as exc:
            logger.error("Failed to load order %s for user %s: %s", order_id, user_id, exc)
            raise FetchError("Failed to load order") from exc

        raise NotFoundError("Order not found")

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[AdminOrderRead]:
        """
        List all orders with the customer's email (admin only).
        """
        try:
            orders = self.order_repo.list_all(session, skip, limit)
            reads = self._build_order_reads(session, orders)
            profiles = self.profile_repo.list_by_ids(
                session, list({o.user_id for o in orders})
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to load orders for admin: %s", exc)
            raise FetchError("Failed to load orders") from exc

        return [self._to_admin_read(r, profiles.get(r.user_id)) for r in reads]

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> AdminOrderRead:
        """
        Get any order with items (admin only).
        """
        try:
            order = self.order_repo.get_by_id(session, order_id)
            if order:
                read = self._build_order_reads(session, [order])[0]
                profile = self.profile_repo.get_by_id(session, order.user_id)
                return self._to_admin_read(read, profile)
        except SQLAlchemyError as exc:
            logger.error("Failed to load order %s for admin: %s", order_id, exc)
            raise FetchError("Failed to load order") from exc

        raise NotFoundError("Order not found")

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> AdminOrderRead:
        """
        Admin-only status update.

        Any non-empty status is accepted (the panel uses pending,
        shipped, delivered); there is no transition check.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        order.status = payload.status
        self.order_repo.update_order(session, order)
        logger.info(
            "Order %s status changed: %s -> %s", order_id, previous, payload.status
        )

        return self.get_order_admin(session, order_id)

    # -------- Helper DTO builders --------

    def _build_order_reads(
        self,
        session: Session,
        orders: list[Order],
    ) -> list[OrderRead]:
        """
        Compose OrderRead models, loading addresses and items in bulk.
        """
        if not orders:
            return []

        addresses = self.address_repo.list_by_ids(
            session, list({o.address_id for o in orders})
        )
        rows = self.order_repo.list_items_for_orders(session, [o.id for o in orders])

        items_by_order: dict[uuid.UUID, list[OrderItemRead]] = defaultdict(list)
        for item, product in rows:
            items_by_order[item.order_id].append(self._to_item_read(item, product))

        return [
            OrderRead(
                id=o.id,
                user_id=o.user_id,
                address_id=o.address_id,
                total_amount=o.total_amount,
                status=o.status,
                request_id=o.request_id,
                created_at=o.created_at,
                address=self._to_address_read(addresses.get(o.address_id)),
                items=items_by_order.get(o.id, []),
            )
            for o in orders
        ]

    @staticmethod
    def _to_item_read(item: OrderItem, product: Product | None) -> OrderItemRead:
        return OrderItemRead(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=product.name if product else None,
            product_image_url=product.image_url if product else None,
            quantity=item.quantity,
            price=item.price,
            color=item.color,
            size=item.size,
            line_total=item.price * item.quantity,
        )

    @staticmethod
    def _to_address_read(address: Address | None) -> AddressRead | None:
        if address is None:
            return None
        return AddressRead.model_validate(address, from_attributes=True)

    @staticmethod
    def _to_admin_read(read: OrderRead, profile: Profile | None) -> AdminOrderRead:
        return AdminOrderRead(
            **read.model_dump(exclude={"address", "items"}),
            address=read.address,
            items=read.items,
            customer_email=profile.email if profile else None,
        )
