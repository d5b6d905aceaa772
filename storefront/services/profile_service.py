# storefront/services/profile_service.py
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.models.profile import Profile
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.profile import ProfileUpdate


class ProfileService:
    """
    Business logic for the shopper's own profile.

    The row itself is auto-provisioned in `get_current_user`; email is
    owned by Supabase Auth and cannot be changed here.
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    def get_me(self, current_user: Profile) -> Profile:
        """Return the current authenticated profile."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: Profile,
        payload: ProfileUpdate,
    ) -> Profile:
        """
        Partial update for profile edits (full_name, phone).
        """
        if payload.full_name is not None:
            current_user.full_name = payload.full_name

        if "phone" in payload.model_fields_set:
            current_user.phone = payload.phone

        current_user.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, current_user)
