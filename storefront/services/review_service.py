# storefront/services/review_service.py
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.exceptions import FetchError, NotFoundError
from storefront.models.review import Review
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import ReviewCreate, ReviewRead, ReviewSummary


class ReviewService:
    """
    Product reviews: submit, list, average rating.
    """

    def __init__(self, repo: ReviewRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def add_review(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: ReviewCreate,
    ) -> ReviewRead:
        if self.product_repo.get_by_id(session, product_id) is None:
            raise NotFoundError("Product not found")

        review = self.repo.create(
            session,
            Review(
                user_id=user_id,
                product_id=product_id,
                rating=payload.rating,
                review_text=payload.review_text,
            ),
        )
        return ReviewRead.model_validate(review, from_attributes=True)

    def list_reviews(self, session: Session, product_id: uuid.UUID) -> ReviewSummary:
        """
        Reviews for a product, newest first, with the average rating
        rounded to one decimal.
        """
        try:
            rows = self.repo.list_for_product(session, product_id)
        except SQLAlchemyError as exc:
            raise FetchError("Failed to load reviews") from exc

        reviews = [
            ReviewRead(
                id=r.id,
                product_id=r.product_id,
                user_id=r.user_id,
                reviewer_name=p.full_name if p else None,
                rating=r.rating,
                review_text=r.review_text,
                created_at=r.created_at,
            )
            for r, p in rows
        ]

        average = 0.0
        if reviews:
            average = round(sum(r.rating for r in reviews) / len(reviews), 1)

        return ReviewSummary(
            product_id=product_id,
            average_rating=average,
            review_count=len(reviews),
            reviews=reviews,
        )
