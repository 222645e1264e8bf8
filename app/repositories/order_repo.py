# app/repositories/order_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and their line items.

    Writes only flush: placing an order also deducts stock, and the order
    service commits everything at once. Ids are generated client-side, so
    rows are usable right after the flush.
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """A customer's order history, newest first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        delivered: bool | None = None,
    ) -> list[Order]:
        """
        Admin order list, newest first.
        `delivered` narrows it to delivered / still-to-deliver orders.
        """
        stmt = select(Order)
        if delivered is not None:
            stmt = stmt.where(Order.is_delivered == delivered)
        stmt = stmt.order_by(col(Order.created_at).desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def add_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    # ---- Line items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        """Line items in the order they had in the cart."""
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(col(OrderItem.position))
        )
        return session.exec(stmt).all()

    def add_items(self, session: Session, items: list[OrderItem]) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items

    def product_was_ordered(self, session: Session, product_id: uuid.UUID) -> bool:
        """True if any order line references the product."""
        stmt = select(OrderItem.id).where(OrderItem.product_id == product_id).limit(1)
        return session.exec(stmt).first() is not None
