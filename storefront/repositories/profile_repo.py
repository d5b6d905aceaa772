# storefront/repositories/profile_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.profile import Profile


class ProfileRepository:
    """
    Data access layer for Profile.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, user_id)

    def list_by_ids(
        self, session: Session, user_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, Profile]:
        """Profiles keyed by id, for joining onto orders and reviews."""
        if not user_ids:
            return {}
        stmt = select(Profile).where(col(Profile.id).in_(user_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def create(self, session: Session, profile: Profile) -> Profile:
        """Insert a new Profile and return the persisted row."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile
