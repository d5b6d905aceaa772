# storefront/routers/reviews.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import ReviewCreate, ReviewRead, ReviewSummary
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products/{product_id}/reviews", tags=["Reviews"])

service = ReviewService(ReviewRepository(), ProductRepository())


@router.get("", response_model=ReviewSummary)
def list_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Reviews for a product with the average rating (public).
    """
    return service.list_reviews(session, product_id)


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
def add_review(
    product_id: uuid.UUID,
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Submit a 1-5 star review.

    Auth:
      - Requires valid Supabase JWT.
    """
    return service.add_review(session, current_user.id, product_id, payload)
