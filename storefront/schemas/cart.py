# storefront/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding a product variant to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)
    color: str
    size: str

    @field_validator("color", "size")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please select color and size")
        return v


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class CartLineRead(SQLModel):
    """
    One cart line joined with the live product.

    available=False means the product row is gone; such a line has no
    price and is left out of the subtotal.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    color: str
    size: str
    created_at: datetime
    available: bool = True
    product_name: str | None = None
    product_image_url: str | None = None
    unit_price: Decimal | None = None
    line_total: Decimal = Decimal("0")


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_quantity: int
    subtotal: Decimal
