# storefront/services/product_service.py
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.exceptions import FetchError, NotFoundError
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """
    Read-only catalog browsing.

    Responsibilities:
      - listing with category / featured filters (newest first)
      - category list for the storefront filter bar
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        featured_only: bool = False,
    ) -> list[Product]:
        # "all" is the storefront's catch-all filter value
        if category and category.strip().lower() == "all":
            category = None
        try:
            return self.repo.list_products(
                session,
                skip=skip,
                limit=limit,
                category=category,
                featured_only=featured_only,
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to load products: %s", exc)
            raise FetchError("Failed to load products") from exc

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_categories(self, session: Session) -> list[str]:
        try:
            return self.repo.list_categories(session)
        except SQLAlchemyError as exc:
            logger.error("Failed to load categories: %s", exc)
            raise FetchError("Failed to load categories") from exc
