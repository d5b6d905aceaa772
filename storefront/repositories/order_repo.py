# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.order import Address, Order, OrderItem
from storefront.models.product import Product


class AddressRepository:
    """
    Data access layer for checkout addresses.
    """

    def get_by_id(self, session: Session, address_id: uuid.UUID) -> Address | None:
        return session.get(Address, address_id)

    def list_by_ids(
        self, session: Session, address_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, Address]:
        if not address_ids:
            return {}
        stmt = select(Address).where(col(Address.id).in_(address_ids))
        return {a.id: a for a in session.exec(stmt).all()}

    def create(self, session: Session, address: Address) -> Address:
        session.add(address)
        session.commit()
        session.refresh(address)
        return address

    def delete(self, session: Session, address: Address) -> None:
        session.delete(address)
        session.commit()


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - Every write commits on its own. Checkout is a saga of separate
        writes; CheckoutService undoes earlier steps when a later one fails.
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_by_request_id(
        self,
        session: Session,
        user_id: uuid.UUID,
        request_id: str,
    ) -> Order | None:
        stmt = select(Order).where(
            Order.user_id == user_id, Order.request_id == request_id
        )
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def delete_order(self, session: Session, order: Order) -> None:
        session.delete(order)
        session.commit()

    # ---- Order items ----

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> list[tuple[OrderItem, Product | None]]:
        """
        Items of several orders, each paired with its product (None if the
        product was deleted since).
        """
        if not order_ids:
            return []
        stmt = (
            select(OrderItem, Product)
            .join(Product, OrderItem.product_id == Product.id, isouter=True)
            .where(col(OrderItem.order_id).in_(order_ids))
            .order_by(OrderItem.created_at)
        )
        return list(session.exec(stmt).all())

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        """
        Insert the whole batch in one commit.
        """
        session.add_all(items)
        session.commit()
        for item in items:
            session.refresh(item)
        return items
