# app/services/order_service.py
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import Failure, Result, Success
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    PAYMENT_METHODS,
    UNSUPPORTED_PAYMENT_MESSAGE,
    CartItem,
    ShippingAddress,
)
from app.schemas.cart_actions import ClearItems
from app.schemas.checkout import CheckoutStep
from app.schemas.order import OrderItemRead, OrderWithItemsRead
from app.services.cart_session import CartContext
from app.services.checkout_wizard import landing_step

logger = logging.getLogger(__name__)

# Orders above this items price ship for free
FREE_SHIPPING_THRESHOLD = 200
SHIPPING_FLAT_RATE = 15
TAX_RATE = Decimal("0.15")


def round2(value: float | Decimal) -> float:
    """Round half up to cents (the storefront's display rounding)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class OrderPrices:
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float


def compute_prices(items: Iterable[CartItem]) -> OrderPrices:
    items_price = round2(sum(Decimal(str(it.price)) * it.quantity for it in items))
    shipping_price = 0.0 if items_price > FREE_SHIPPING_THRESHOLD else float(SHIPPING_FLAT_RATE)
    tax_price = round2(Decimal(str(items_price)) * TAX_RATE)
    total_price = round2(
        Decimal(str(items_price)) + Decimal(str(shipping_price)) + Decimal(str(tax_price))
    )
    return OrderPrices(
        items_price=items_price,
        shipping_price=shipping_price,
        tax_price=tax_price,
        total_price=total_price,
    )


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Place an order from the cart snapshot (last checkout step)
      - Re-check every cart item against current stock
      - Compute items / shipping / tax / total prices
      - Deduct count_in_stock and clear the cart items
      - Order history and admin reads / delivery
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo

    # -------- Place order --------

    def place_order(
        self,
        session: Session,
        user: User,
        ctx: CartContext,
    ) -> Result[OrderWithItemsRead]:
        """
        Convert the cart snapshot into an Order.

        Steps:
          1. Cart must not be empty.
          2. Shipping and payment steps must be complete.
          3. Every item's product must exist with enough stock.
          4. Create Order + OrderItem rows, deduct stock, commit.
          5. Clear the cart items (address and payment method stay).
        """
        cart = ctx.cart

        if not cart.items:
            return Failure.validation("Cart is empty")

        step = landing_step(cart, CheckoutStep.PLACE_ORDER)
        if step == CheckoutStep.SHIPPING:
            return Failure.validation("Shipping address is required")
        if step == CheckoutStep.PAYMENT:
            return Failure.validation("Payment method is required")
        if cart.payment_method not in PAYMENT_METHODS:
            return Failure.validation(UNSUPPORTED_PAYMENT_MESSAGE)

        # A hand-edited snapshot may repeat a product id
        wanted: dict[uuid.UUID, int] = {}
        for it in cart.items:
            wanted[it.product_id] = wanted.get(it.product_id, 0) + it.quantity

        products: dict[uuid.UUID, Product] = {}
        for it in cart.items:
            product = self.product_repo.get_by_id(session, it.product_id)
            if not product:
                return Failure.not_found(f"Product not found: {it.name}")
            if product.count_in_stock < wanted[it.product_id]:
                return Failure.stock(f"Sorry. {product.name} is out of stock")
            products[it.product_id] = product

        # Price, name and image come from the catalogue; the cookie only
        # contributes product ids and quantities.
        lines = [
            self._price_line(products[it.product_id], it.quantity)
            for it in cart.items
        ]
        prices = compute_prices(lines)
        address = cart.shipping_address

        order = self.order_repo.add_order(
            session,
            Order(
                user_id=user.id,
                full_name=address.full_name or user.name,
                address=address.address,
                city=address.city or "",
                postal_code=address.postal_code or "",
                country=address.country or "",
                payment_method=cart.payment_method,
                items_price=prices.items_price,
                shipping_price=prices.shipping_price,
                tax_price=prices.tax_price,
                total_price=prices.total_price,
            ),
        )

        order_items = self.order_repo.add_items(
            session,
            [
                OrderItem(
                    order_id=order.id,
                    product_id=it.product_id,
                    name=it.name,
                    slug=it.slug,
                    image=it.image,
                    quantity=it.quantity,
                    price=it.price,
                    position=position,
                )
                for position, it in enumerate(lines)
            ],
        )

        for product_id, quantity in wanted.items():
            product = products[product_id]
            product.count_in_stock -= quantity
            session.add(product)

        session.commit()
        session.refresh(order)

        ctx.dispatch(ClearItems())

        logger.info(
            "Order %s placed by user %s: %d items, total %.2f",
            order.id,
            user.id,
            len(order_items),
            order.total_price,
        )

        return Success(self._build_order_with_items_dto(order, order_items))

    @staticmethod
    def _price_line(product: Product, quantity: int) -> CartItem:
        return CartItem(
            product_id=product.id,
            slug=product.slug,
            name=product.name,
            image=product.image,
            price=product.price,
            count_in_stock=product.count_in_stock,
            quantity=quantity,
        )

    # -------- History --------

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_for_user(session, user_id, skip, limit)

    def get_order(
        self,
        session: Session,
        user: User,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order with items.

        - Owners see their own orders; admins see any order.
        - 404 otherwise, so order ids of other users are not disclosed.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or (order.user_id != user.id and not user.is_admin):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        delivered: bool | None = None,
    ) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit, delivered=delivered)

    def mark_delivered(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Mark an order as delivered (admin only). Idempotent.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if not order.is_delivered:
            order.is_delivered = True
            order.delivered_at = datetime.now(timezone.utc)
            session.add(order)
            session.commit()
            session.refresh(order)
        return order

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        item_dtos = [
            OrderItemRead(
                id=it.id,
                product_id=it.product_id,
                name=it.name,
                slug=it.slug,
                image=it.image,
                quantity=it.quantity,
                price=it.price,
                line_total=round2(it.price * it.quantity),
            )
            for it in items
        ]

        return OrderWithItemsRead(
            id=order.id,
            user_id=order.user_id,
            payment_method=order.payment_method,
            items_price=order.items_price,
            shipping_price=order.shipping_price,
            tax_price=order.tax_price,
            total_price=order.total_price,
            is_paid=order.is_paid,
            paid_at=order.paid_at,
            is_delivered=order.is_delivered,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            shipping_address=ShippingAddress(
                full_name=order.full_name,
                address=order.address,
                city=order.city,
                postal_code=order.postal_code,
                country=order.country,
            ),
            items=item_dtos,
        )
