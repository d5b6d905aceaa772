# storefront/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Persistent shopper profile.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Admin access is a flag on the profile; everyone else is a shopper.
    Credentials live in Supabase Auth, never here.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    full_name: str = Field(
        max_length=100,
        description="Display name; first part of email by default",
    )

    phone: str | None = Field(
        default=None,
        max_length=20,
        description="Contact number used by the design team",
    )

    is_admin: bool = Field(
        default=False,
        index=True,
        description="Grants access to the admin order panel",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime | None = Field(
        default=None,
        description="Last profile edit (UTC)",
    )
