# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry for an adaptive clothing item.

    Read-only for the storefront; the catalog is maintained in Supabase.
    `colors` / `sizes` list the variants a shopper may pick. When a list
    is empty or missing, any value is accepted for that variant.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        default="",
        description="Long description",
    )

    price: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price (displayed as INR)",
    )

    image_url: str | None = Field(
        default=None,
        description="Main image URL",
    )

    category: str = Field(
        max_length=50,
        index=True,
        description="Catalog category",
    )

    colors: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    sizes: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    # Free-form list of adaptive features (magnetic closures, ...)
    features: Any = Field(
        default=None,
        sa_column=Column(JSON),
    )

    stock: int | None = Field(
        default=None,
        ge=0,
        description="Units in stock; None means not tracked",
    )

    is_featured: bool = Field(
        default=False,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
