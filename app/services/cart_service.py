# app/services/cart_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.errors import Failure, Result, Success
from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    PAYMENT_METHODS,
    UNSUPPORTED_PAYMENT_MESSAGE,
    Cart,
    CartItem,
    CartItemAdd,
    CartItemUpdate,
    ShippingAddressUpdate,
    PaymentMethodUpdate,
)
from app.schemas.cart_actions import (
    AddItem,
    ClearItems,
    RemoveItem,
    Reset,
    SavePaymentMethod,
    SaveShippingAddress,
)
from app.services.cart_session import CartContext

logger = logging.getLogger(__name__)

OUT_OF_STOCK_MESSAGE = "Sorry. Product is out of stock"


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence against the catalogue
      - enforce quantity <= count_in_stock before dispatching
      - snapshot name / slug / image / price from the current Product
      - validate the payment method

    The cart itself lives in the CartContext (client snapshot). Every
    operation returns a Result; a Failure never dispatches anything.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    # ---- internal helpers ----

    @staticmethod
    def _to_cart_item(product: Product, quantity: int) -> CartItem:
        return CartItem(
            product_id=product.id,
            slug=product.slug,
            name=product.name,
            image=product.image,
            price=product.price,
            count_in_stock=product.count_in_stock,
            quantity=quantity,
        )

    def _dispatch_quantity(
        self,
        session: Session,
        ctx: CartContext,
        product_id: uuid.UUID,
        quantity: int,
    ) -> Result[Cart]:
        # Stock is read fresh from the catalogue, never from the snapshot
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            return Failure.not_found("Product not found")

        if product.count_in_stock < quantity:
            logger.info(
                "Stock check failed for product %s: have %s, requested %s",
                product_id,
                product.count_in_stock,
                quantity,
            )
            return Failure.stock(OUT_OF_STOCK_MESSAGE)

        item = self._to_cart_item(product, quantity)
        return Success(ctx.dispatch(AddItem(item=item, quantity=quantity)))

    # ---- public operations ----

    def add_item(
        self,
        session: Session,
        ctx: CartContext,
        payload: CartItemAdd,
    ) -> Result[Cart]:
        """
        Add a product to the cart.

        Rules:
          - without an explicit quantity: existing quantity + 1 (or 1)
          - with one: it replaces the existing quantity
          - the resulting quantity must be <= count_in_stock
        """
        quantity = payload.quantity
        if quantity is None:
            existing = ctx.cart.find_item(payload.product_id)
            quantity = existing.quantity + 1 if existing else 1

        return self._dispatch_quantity(session, ctx, payload.product_id, quantity)

    def update_quantity(
        self,
        session: Session,
        ctx: CartContext,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> Result[Cart]:
        """
        Set the quantity of an item already in the cart.
        """
        if ctx.cart.find_item(product_id) is None:
            return Failure.not_found("Item not in cart")

        return self._dispatch_quantity(session, ctx, product_id, payload.quantity)

    def remove_item(self, ctx: CartContext, product_id: uuid.UUID) -> Result[Cart]:
        """
        Remove a product from the cart. Removing an absent product is a no-op.
        """
        return Success(ctx.dispatch(RemoveItem(product_id=product_id)))

    def save_shipping_address(
        self,
        ctx: CartContext,
        payload: ShippingAddressUpdate,
    ) -> Result[Cart]:
        return Success(ctx.dispatch(SaveShippingAddress(address=payload.to_address())))

    def save_payment_method(
        self,
        ctx: CartContext,
        payload: PaymentMethodUpdate,
    ) -> Result[Cart]:
        """
        Save the payment method chosen on the payment step.

        Rules:
          - required
          - one of PayPal / Stripe / Cash
        """
        method = (payload.payment_method or "").strip()
        if not method:
            return Failure.validation("Payment method is required")
        if method not in PAYMENT_METHODS:
            return Failure.validation(UNSUPPORTED_PAYMENT_MESSAGE)

        return Success(ctx.dispatch(SavePaymentMethod(method=method)))

    def clear_items(self, ctx: CartContext) -> Result[Cart]:
        return Success(ctx.dispatch(ClearItems()))

    def reset(self, ctx: CartContext) -> Result[Cart]:
        return Success(ctx.dispatch(Reset()))
