# storefront/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CheckoutRequest(SQLModel):
    """
    Shipping address form submitted at checkout.

    User provides:
      - full_name, phone
      - address_line1, address_line2 (optional)
      - city, state, postal_code
      - request_id (optional idempotency key; retries with the same
        key return the original order instead of placing a new one)

    Backend derives:
      - user_id from token
      - status = 'pending'
      - total_amount and items from the cart
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str = Field(max_length=100)
    phone: str = Field(max_length=20)
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str = Field(max_length=12)
    request_id: str | None = Field(default=None, max_length=100)

    @field_validator(
        "full_name", "phone", "address_line1", "city", "state", "postal_code"
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("address_line2", "request_id")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class AddressRead(SQLModel):
    id: uuid.UUID
    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None
    city: str
    state: str
    postal_code: str


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    product_image_url: str | None = None
    quantity: int
    price: Decimal
    color: str
    size: str
    line_total: Decimal


class OrderRead(SQLModel):
    """
    Order header with its address and lines.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    address_id: uuid.UUID
    total_amount: Decimal
    status: str
    request_id: str | None = None
    created_at: datetime
    address: AddressRead | None = None
    items: list[OrderItemRead] = []


class AdminOrderRead(OrderRead):
    """
    Admin view also shows who placed the order.
    """

    customer_email: str | None = None


class CheckoutResult(SQLModel):
    """
    Outcome of a checkout.

    cart_cleared=False means the order was placed but the cart rows
    could not be removed; the shopper may still see them.
    replayed=True means an earlier order with the same request_id
    was returned and nothing was written (cart_cleared is then False).
    """

    order: OrderRead
    cart_cleared: bool
    replayed: bool = False


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: str = Field(max_length=30)

    @field_validator("status")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("status cannot be empty")
        return v
