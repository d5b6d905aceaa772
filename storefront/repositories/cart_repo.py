# storefront/repositories/cart_repo.py
import uuid
from sqlmodel import Session, col, select
from storefront.models.cart import CartItem
from storefront.models.product import Product


class CartRepository:

    # Get items for a user
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return list(session.exec(stmt).all())

    def list_with_products(
        self, session: Session, user_id: uuid.UUID
    ) -> list[tuple[CartItem, Product | None]]:
        """
        Cart rows for a user, each paired with its product.
        Outer join: the product is None when it has been deleted.
        """
        stmt = (
            select(CartItem, Product)
            .join(Product, CartItem.product_id == Product.id, isouter=True)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return list(session.exec(stmt).all())

    def get_variant(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        color: str,
        size: str,
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.color == color,
            CartItem.size == size,
        )
        return session.exec(stmt).first()

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.user_id == user_id
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()

    def delete_lines(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_ids: list[uuid.UUID],
    ) -> int:
        """
        Delete the given cart rows, but only those owned by user_id.
        Returns how many rows were removed.
        """
        if not item_ids:
            return 0
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            col(CartItem.id).in_(item_ids),
        )
        rows = session.exec(stmt).all()
        for row in rows:
            session.delete(row)
        session.commit()
        return len(rows)
