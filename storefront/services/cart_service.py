# storefront/services/cart_service.py
import logging
import uuid
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.core.exceptions import FetchError, NotFoundError, ValidationError
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartLineRead,
    CartSummary,
)

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - join cart rows with the live product (name, image, price)
      - compute line totals and the cart subtotal from live prices
      - merge re-added (product, color, size) variants into one row
      - validate variant choice and stock
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _check_variant(product: Product, color: str, size: str) -> None:
        if product.colors and color not in product.colors:
            raise ValidationError(f"Color '{color}' is not available")
        if product.sizes and size not in product.sizes:
            raise ValidationError(f"Size '{size}' is not available")

    @staticmethod
    def _check_stock(product: Product, quantity: int) -> None:
        if product.stock is not None and quantity > product.stock:
            raise ValidationError(
                f"Not enough stock available (have {product.stock}, requested {quantity})"
            )

    def _increment(
        self,
        session: Session,
        product: Product,
        item: CartItem,
        quantity: int,
    ) -> None:
        new_qty = item.quantity + quantity
        self._check_stock(product, new_qty)
        item.quantity = new_qty
        self.cart_repo.update(session, item)

    @staticmethod
    def _to_line(item: CartItem, product: Product | None) -> CartLineRead:
        if product is None:
            return CartLineRead(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                color=item.color,
                size=item.size,
                created_at=item.created_at,
                available=False,
            )

        unit_price = Decimal(product.price)
        return CartLineRead(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            color=item.color,
            size=item.size,
            created_at=item.created_at,
            product_name=product.name,
            product_image_url=product.image_url,
            unit_price=unit_price,
            line_total=unit_price * item.quantity,
        )

    # ---- public operations ----

    def load_cart(self, session: Session, user_id: uuid.UUID) -> list[CartLineRead]:
        """
        Return the user's cart lines joined with live product data.

        A line whose product no longer exists is returned with
        available=False instead of failing the whole read.

        Raises:
            FetchError: if the data store cannot be read.
        """
        try:
            rows = self.cart_repo.list_with_products(session, user_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to load cart for user %s: %s", user_id, exc)
            raise FetchError("Failed to load cart") from exc

        lines = [self._to_line(item, product) for item, product in rows]

        missing = [line.id for line in lines if not line.available]
        if missing:
            logger.warning(
                "Cart of user %s references deleted products (lines %s)",
                user_id,
                missing,
            )
        return lines

    @staticmethod
    def compute_subtotal(lines: list[CartLineRead]) -> Decimal:
        """
        Sum of live unit price x quantity over available lines.
        An empty cart yields Decimal("0").
        """
        subtotal = Decimal("0")
        for line in lines:
            if line.available and line.unit_price is not None:
                subtotal += line.unit_price * line.quantity
        return subtotal

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartLineRead (with line_total)
          - total_quantity
          - subtotal
        """
        lines = self.load_cart(session, user_id)
        return CartSummary(
            items=lines,
            total_quantity=sum(line.quantity for line in lines),
            subtotal=self.compute_subtotal(lines),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product variant to the user's cart.

        Rules:
          - product must exist
          - color / size must be offered by the product (when it lists any)
          - quantity + existing_quantity <= stock (when stock is tracked)
          - the same (product, color, size) increments the existing row
        """
        product = self._get_product(session, payload.product_id)
        self._check_variant(product, payload.color, payload.size)

        existing = self.cart_repo.get_variant(
            session, user_id, payload.product_id, payload.color, payload.size
        )

        if existing:
            self._increment(session, product, existing, payload.quantity)
            return self.get_cart_summary(session, user_id)

        self._check_stock(product, payload.quantity)
        item = CartItem(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            color=payload.color,
            size=payload.size,
        )
        try:
            self.cart_repo.create(session, item)
        except IntegrityError:
            # A concurrent add of the same variant committed first
            session.rollback()
            existing = self.cart_repo.get_variant(
                session, user_id, payload.product_id, payload.color, payload.size
            )
            if existing is None:
                raise
            logger.info(
                "Cart line for user %s inserted concurrently; merging into %s",
                user_id,
                existing.id,
            )
            self._increment(session, product, existing, payload.quantity)

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of one of the user's cart lines.
        """
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise NotFoundError("Item not in cart")

        product = self.product_repo.get_by_id(session, item.product_id)
        if product is not None:
            self._check_stock(product, payload.quantity)

        item.quantity = payload.quantity
        self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a line from the cart and return updated summary.
        """
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total_quantity=0, subtotal=Decimal("0"))
