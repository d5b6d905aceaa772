# storefront/schemas/suggestion.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class SuggestionRequest(SQLModel):
    """
    Free-text description of the shopper's needs, e.g.
    "wheelchair user, limited hand dexterity, prefers cotton".
    """

    model_config = ConfigDict(extra="forbid")

    user_preferences: str = Field(max_length=2000)

    @field_validator("user_preferences")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("preferences cannot be empty")
        return v


class SuggestionRead(SQLModel):
    suggestions: str
    image: str | None = None
