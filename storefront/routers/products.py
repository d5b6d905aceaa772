# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductRead
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    category: str | None = None,
    featured: bool = False,
):
    """
    List products, newest first.

    - Public endpoint.
    - `category=all` (or omitted) returns every category.
    - `featured=true` returns only featured products.
    """
    return service.list_products(
        session, skip=skip, limit=limit, category=category, featured_only=featured
    )


@router.get("/categories", response_model=list[str])
def list_categories(session: Session = Depends(get_session)):
    """
    Distinct product categories (public).
    """
    return service.list_categories(session)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)
