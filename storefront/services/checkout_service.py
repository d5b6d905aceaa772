# storefront/services/checkout_service.py
import logging
import uuid
from enum import Enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.core.exceptions import (
    EmptyCartError,
    OrderPlacementError,
    ValidationError,
)
from storefront.models.order import Address, Order, OrderItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import AddressRepository, OrderRepository
from storefront.schemas.cart import CartLineRead
from storefront.schemas.order import (
    AddressRead,
    CheckoutRequest,
    CheckoutResult,
    OrderItemRead,
    OrderRead,
)
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)


class CheckoutStage(str, Enum):
    AWAITING_ADDRESS_SUBMIT = "awaiting_address_submit"
    CREATING_ADDRESS = "creating_address"
    CREATING_ORDER = "creating_order"
    CREATING_ORDER_LINES = "creating_order_lines"
    CLEARING_CART = "clearing_cart"
    DONE = "done"
    ABORTED = "aborted"


# Stage name reported to the client in OrderPlacementError
FAILED_STAGE_LABELS: dict[CheckoutStage, str] = {
    CheckoutStage.CREATING_ADDRESS: "address",
    CheckoutStage.CREATING_ORDER: "order",
    CheckoutStage.CREATING_ORDER_LINES: "lines",
}


class CheckoutService:
    """
    Places one order from a cart snapshot and a freshly submitted address.

    The four writes (address -> order -> order lines -> cart clear) are
    separate commits; each step needs the id generated by the one before.

    Failure handling:
      - address fails      -> OrderPlacementError("address"), nothing written
      - order fails        -> OrderPlacementError("order"), address deleted
      - order lines fail   -> OrderPlacementError("lines"), order + address deleted
      - cart clear fails   -> logged only, the order stands (cart_cleared=False)

    With compensate=False the rows written before the failure are left in
    place (orphan address, order without lines).

    Idempotency:
      - a request_id already used by this user replays the stored order
        and writes nothing, even when the cart has been emptied since.
      - without request_id, every submission places a new order.
    """

    def __init__(
        self,
        address_repo: AddressRepository,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        order_service: OrderService,
        compensate: bool = True,
    ):
        self.address_repo = address_repo
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.order_service = order_service
        self.compensate = compensate

    # ---- public operation ----

    def place_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CheckoutRequest,
        lines: list[CartLineRead],
    ) -> CheckoutResult:
        """
        Run the checkout saga for `user_id`.

        Args:
            payload: validated address form (+ optional request_id).
            lines: cart snapshot from CartService.load_cart.

        Raises:
            EmptyCartError: the snapshot has no lines (nothing written).
            ValidationError: a line's product no longer exists (nothing written).
            OrderPlacementError: a write failed; `stage` says which one.
        """
        self._advance(user_id, CheckoutStage.AWAITING_ADDRESS_SUBMIT)

        if payload.request_id:
            existing = self.order_repo.get_by_request_id(
                session, user_id, payload.request_id
            )
            if existing is not None:
                logger.info(
                    "Checkout replay for user %s, request_id=%s -> order %s",
                    user_id,
                    payload.request_id,
                    existing.id,
                )
                return self._replay(session, user_id, existing.id)

        self._validate_snapshot(lines)

        # 1) Address
        stage = self._advance(user_id, CheckoutStage.CREATING_ADDRESS)
        try:
            address = self.address_repo.create(
                session,
                Address(
                    user_id=user_id,
                    full_name=payload.full_name,
                    phone=payload.phone,
                    address_line1=payload.address_line1,
                    address_line2=payload.address_line2,
                    city=payload.city,
                    state=payload.state,
                    postal_code=payload.postal_code,
                    is_default=True,
                ),
            )
        except SQLAlchemyError as exc:
            session.rollback()
            raise self._abort(user_id, stage, exc) from exc

        address_id = address.id
        address_read = AddressRead.model_validate(address, from_attributes=True)

        # 2) Order header; total comes from the snapshot, not from live prices
        stage = self._advance(user_id, CheckoutStage.CREATING_ORDER)
        subtotal = CartService.compute_subtotal(lines)
        try:
            order = self.order_repo.create_order(
                session,
                Order(
                    user_id=user_id,
                    address_id=address_id,
                    total_amount=subtotal,
                    status="pending",
                    request_id=payload.request_id,
                ),
            )
        except SQLAlchemyError as exc:
            session.rollback()
            if isinstance(exc, IntegrityError) and payload.request_id:
                # Lost a race against a concurrent submit with the same key
                winner = self.order_repo.get_by_request_id(
                    session, user_id, payload.request_id
                )
                if winner is not None:
                    self._compensate(session, address_id=address_id, force=True)
                    return self._replay(session, user_id, winner.id)

            _, address_left = self._compensate(session, address_id=address_id)
            raise self._abort(
                user_id,
                stage,
                exc,
                compensated=address_left is None,
                address_id=address_left,
            ) from exc

        order_id = order.id
        created_at = order.created_at

        # 3) Order lines, as one batch
        stage = self._advance(user_id, CheckoutStage.CREATING_ORDER_LINES)
        items = [
            OrderItem(
                order_id=order_id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.unit_price,
                color=line.color,
                size=line.size,
            )
            for line in lines
        ]
        try:
            items = self.order_repo.create_items(session, items)
        except SQLAlchemyError as exc:
            session.rollback()
            order_left, address_left = self._compensate(
                session, order_id=order_id, address_id=address_id
            )
            raise self._abort(
                user_id,
                stage,
                exc,
                compensated=order_left is None and address_left is None,
                order_id=order_left,
                address_id=address_left,
            ) from exc

        item_reads = [
            OrderItemRead(
                id=item.id,
                order_id=order_id,
                product_id=line.product_id,
                product_name=line.product_name,
                product_image_url=line.product_image_url,
                quantity=line.quantity,
                price=line.unit_price,
                color=line.color,
                size=line.size,
                line_total=line.line_total,
            )
            for item, line in zip(items, lines)
        ]

        # 4) Clear the cart; failure here does not undo the order
        self._advance(user_id, CheckoutStage.CLEARING_CART)
        cart_cleared = True
        try:
            self.cart_repo.delete_lines(session, user_id, [line.id for line in lines])
        except SQLAlchemyError as exc:
            session.rollback()
            cart_cleared = False
            logger.warning(
                "Order %s placed but cart of user %s was not cleared: %s",
                order_id,
                user_id,
                exc,
            )

        self._advance(user_id, CheckoutStage.DONE)
        logger.info(
            "Order %s placed by user %s: %d lines, total %s",
            order_id,
            user_id,
            len(item_reads),
            subtotal,
        )

        return CheckoutResult(
            order=OrderRead(
                id=order_id,
                user_id=user_id,
                address_id=address_id,
                total_amount=subtotal,
                status="pending",
                request_id=payload.request_id,
                created_at=created_at,
                address=address_read,
                items=item_reads,
            ),
            cart_cleared=cart_cleared,
        )

    # ---- helpers ----

    @staticmethod
    def _validate_snapshot(lines: list[CartLineRead]) -> None:
        if not lines:
            raise EmptyCartError()

        unavailable = [str(line.product_id) for line in lines if not line.available]
        if unavailable:
            raise ValidationError(
                "Some items in your cart are no longer available: "
                + ", ".join(unavailable)
            )

    @staticmethod
    def _advance(user_id: uuid.UUID, stage: CheckoutStage) -> CheckoutStage:
        logger.debug("Checkout for user %s -> %s", user_id, stage.value)
        return stage

    @staticmethod
    def _abort(
        user_id: uuid.UUID,
        stage: CheckoutStage,
        exc: Exception,
        compensated: bool = True,
        order_id: uuid.UUID | None = None,
        address_id: uuid.UUID | None = None,
    ) -> OrderPlacementError:
        label = FAILED_STAGE_LABELS[stage]
        logger.error(
            "Checkout for user %s %s at %s (compensated=%s): %s",
            user_id,
            CheckoutStage.ABORTED.value,
            stage.value,
            compensated,
            exc,
        )
        return OrderPlacementError(
            stage=label,
            compensated=compensated,
            order_id=order_id,
            address_id=address_id,
        )

    def _compensate(
        self,
        session: Session,
        order_id: uuid.UUID | None = None,
        address_id: uuid.UUID | None = None,
        force: bool = False,
    ) -> tuple[uuid.UUID | None, uuid.UUID | None]:
        """
        Delete rows written by earlier steps, order first.

        Each delete commits on its own, so the result is the pair
        (order_id, address_id) of rows still persisted; (None, None)
        means nothing written by this attempt is left behind. The
        address is kept while its order still exists.

        force=True runs even when compensation is disabled (used for the
        duplicate address of a replayed request).
        """
        if not (self.compensate or force):
            logger.warning(
                "Compensation disabled; leaving order=%s address=%s in place",
                order_id,
                address_id,
            )
            return order_id, address_id

        order_left, address_left = order_id, address_id
        try:
            if order_id is not None:
                order = self.order_repo.get_by_id(session, order_id)
                if order is not None:
                    self.order_repo.delete_order(session, order)
                order_left = None
            if address_id is not None:
                address = self.address_repo.get_by_id(session, address_id)
                if address is not None:
                    self.address_repo.delete(session, address)
                address_left = None
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "Compensation failed, still persisted: order=%s address=%s: %s",
                order_left,
                address_left,
                exc,
            )
            return order_left, address_left

        logger.info("Compensated order=%s address=%s", order_id, address_id)
        return None, None

    def _replay(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> CheckoutResult:
        order = self.order_service.get_user_order(session, user_id, order_id)
        return CheckoutResult(order=order, cart_cleared=False, replayed=True)
