# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(CartRepository(), ProductRepository())


@router.get("", response_model=CartSummary)
def read_cart(
    session: Session = Depends(get_session),
    shopper: Profile = Depends(require_auth),
):
    """
    Cart lines priced at today's product price, plus the subtotal.

    A line whose product was removed from the catalog is returned with
    `available=false` and does not count towards the subtotal.
    """
    return service.get_cart_summary(session, shopper.id)


@router.post("/lines", response_model=CartSummary)
def add_line(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    shopper: Profile = Depends(require_auth),
):
    """
    Put a (product, color, size) variant in the cart.

    Errors:
      - 404 NOT_FOUND: unknown product
      - 400 VALIDATION_ERROR: variant not offered, or not enough stock
    """
    return service.add_to_cart(session, shopper.id, payload)


@router.patch("/lines/{line_id}", response_model=CartSummary)
def set_line_quantity(
    line_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    shopper: Profile = Depends(require_auth),
):
    return service.update_quantity(session, shopper.id, line_id, payload)


@router.delete("/lines/{line_id}", response_model=CartSummary)
def remove_line(
    line_id: uuid.UUID,
    session: Session = Depends(get_session),
    shopper: Profile = Depends(require_auth),
):
    return service.remove_item(session, shopper.id, line_id)


@router.delete("", response_model=CartSummary)
def empty_cart(
    session: Session = Depends(get_session),
    shopper: Profile = Depends(require_auth),
):
    return service.clear_cart(session, shopper.id)
