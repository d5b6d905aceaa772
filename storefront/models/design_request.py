# storefront/models/design_request.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class CustomDesignRequest(SQLModel, table=True):
    """
    A shopper's request for a made-to-measure design.

    requirements is stored as JSON:
      clothingType, preferredColors, size, specialFeatures, budget
    """

    __tablename__ = "custom_design_requests"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    description: str

    requirements: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    # pending | contacted | completed
    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
