# storefront/schemas/review.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ReviewCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    review_text: str | None = Field(default=None, max_length=2000)

    @field_validator("review_text")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    reviewer_name: str | None = None
    rating: int
    review_text: str | None
    created_at: datetime


class ReviewSummary(SQLModel):
    """
    Reviews for one product, newest first.
    average_rating is rounded to one decimal (0 when there are none).
    """

    product_id: uuid.UUID
    average_rating: float
    review_count: int
    reviews: list[ReviewRead]
