# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth, require_admin
from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import AddressRepository, OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import (
    AdminOrderRead,
    CheckoutRequest,
    CheckoutResult,
    OrderRead,
    OrderStatusUpdate,
)
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService

settings = get_settings()

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
address_repo = AddressRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
profile_repo = ProfileRepository()

cart_service = CartService(cart_repo, product_repo)
service = OrderService(order_repo, address_repo, profile_repo)
checkout_service = CheckoutService(
    address_repo,
    order_repo,
    cart_repo,
    service,
    compensate=settings.CHECKOUT_COMPENSATION_ENABLED,
)


# -------- User-facing endpoints --------


@router.post(
    "/checkout",
    response_model=CheckoutResult,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Place an order from the current user's cart and the submitted address.

    Send a unique `request_id` per checkout attempt to make retries safe.

    Errors:
      - 400 EMPTY_CART / VALIDATION_ERROR: nothing was written
      - 503 FETCH_ERROR: the cart could not be read; nothing was written
      - 502 ORDER_PLACEMENT_FAILED: a write failed; see `stage`
    """
    lines = cart_service.load_cart(session, current_user.id)
    return checkout_service.place_order(session, current_user.id, payload, lines)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders with address and items.
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[AdminOrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders (admin only).
    """
    return service.list_all_orders(session, skip, limit)


@router.get(
    "/{order_id}",
    response_model=AdminOrderRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=AdminOrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only), e.g. "shipped" or "delivered".
    """
    return service.update_status(session, order_id, payload)
