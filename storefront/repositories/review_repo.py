# storefront/repositories/review_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.profile import Profile
from storefront.models.review import Review


class ReviewRepository:

    def list_for_product(
        self, session: Session, product_id: uuid.UUID
    ) -> list[tuple[Review, Profile | None]]:
        stmt = (
            select(Review, Profile)
            .join(Profile, Review.user_id == Profile.id, isouter=True)
            .where(Review.product_id == product_id)
            .order_by(col(Review.created_at).desc())
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review
