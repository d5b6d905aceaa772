# storefront/schemas/design_request.py
import uuid
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class DesignRequirements(SQLModel):
    """
    Structured part of a custom design request.

    Stored with camelCase keys, the shape the storefront client reads.
    """

    model_config = ConfigDict(extra="forbid")

    clothing_type: str = Field(max_length=100)
    preferred_colors: str | None = None
    size: str | None = None
    special_features: str | None = None
    budget: str | None = None

    @field_validator("clothing_type")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("clothing type cannot be empty")
        return v

    def to_json(self) -> dict[str, Any]:
        return {
            "clothingType": self.clothing_type,
            "preferredColors": self.preferred_colors or "",
            "size": self.size or "",
            "specialFeatures": self.special_features or "",
            "budget": self.budget or "",
        }


class DesignRequestCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(max_length=5000)
    requirements: DesignRequirements

    @field_validator("description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty")
        return v


class DesignRequestRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    description: str
    requirements: dict[str, Any] | None
    status: str
    created_at: datetime
