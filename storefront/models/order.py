# storefront/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Address(SQLModel, table=True):
    """
    Shipping address captured at checkout.

    A fresh row is written for every checkout attempt, even when it is
    identical to an earlier one.
    """

    __tablename__ = "addresses"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str

    is_default: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Order(SQLModel, table=True):
    """
    Order header.

    status is free text written by admins
    (observed: pending | shipped | delivered).
    request_id is the optional client idempotency key.
    """

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "request_id", name="uq_orders_request_id"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    address_id: uuid.UUID = Field(
        foreign_key="addresses.id",
        index=True,
    )

    total_amount: Decimal = Field(
        max_digits=12,
        decimal_places=2,
        description="Sum of unit price x quantity over the order lines",
    )

    status: str = Field(
        default="pending",
        index=True,
    )

    request_id: str | None = Field(
        default=None,
        max_length=100,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order. `price` is the unit price captured when
    the order was placed and never follows the live product price.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of order",
    )

    color: str
    size: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
