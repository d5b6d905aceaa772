"""Shared fixtures: in-memory SQLite database, factories, API client.

Settings are read at import time, so the environment is filled in
before anything from `storefront` is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.main import app
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.models.profile import Profile


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_profile(session):
    def _make(
        email: str = "shopper@example.com",
        full_name: str = "Test Shopper",
        is_admin: bool = False,
    ) -> Profile:
        profile = Profile(
            id=uuid.uuid4(),
            email=email,
            full_name=full_name,
            is_admin=is_admin,
        )
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def shopper(make_profile) -> Profile:
    return make_profile()


@pytest.fixture
def admin(make_profile) -> Profile:
    return make_profile(email="admin@example.com", full_name="Admin", is_admin=True)


@pytest.fixture
def make_product(session):
    def _make(
        name: str = "Magnetic Button Shirt",
        price: str = "1500",
        category: str = "shirts",
        colors: list[str] | None = None,
        sizes: list[str] | None = None,
        stock: int | None = None,
        is_featured: bool = False,
    ) -> Product:
        product = Product(
            name=name,
            description=f"{name} with adaptive closures",
            price=Decimal(price),
            category=category,
            colors=colors if colors is not None else ["Blue", "White"],
            sizes=sizes if sizes is not None else ["M", "L"],
            stock=stock,
            is_featured=is_featured,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def add_line(session):
    """Put a row straight into cart_items, bypassing CartService checks."""

    def _add(
        profile: Profile,
        product: Product,
        quantity: int = 1,
        color: str = "Blue",
        size: str = "M",
    ) -> CartItem:
        item = CartItem(
            user_id=profile.id,
            product_id=product.id,
            quantity=quantity,
            color=color,
            size=size,
        )
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    return _add


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Make every following request run as `profile` (None = guest)."""

    def _login(profile: Profile | None) -> None:
        app.dependency_overrides[get_current_user] = lambda: profile

    return _login
