# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    image_url: str | None = None
    category: str
    colors: list[str] | None = None
    sizes: list[str] | None = None
    features: Any = None
    stock: int | None = None
    is_featured: bool
    created_at: datetime
