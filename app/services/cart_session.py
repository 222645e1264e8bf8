# app/services/cart_session.py
"""
Cart context bound to one request.

Lifecycle:
  init (empty) -> rehydrate from the `cart` cookie -> dispatch actions
  -> persist the snapshot on the response -> teardown (logout).
"""
import json
import logging
from urllib.parse import quote, unquote

from fastapi import Request, Response
from pydantic import ValidationError

from app.core.config import get_settings
from app.schemas.cart import Cart
from app.schemas.cart_actions import CartAction
from app.services.cart_store import apply

logger = logging.getLogger(__name__)

settings = get_settings()


def load_snapshot(raw: str | None) -> Cart:
    """
    Parse a `cart` snapshot. Missing or unreadable snapshots give an empty
    cart; the client simply starts over.
    """
    if not raw:
        return Cart()
    try:
        return Cart.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as e:
        logger.warning("Discarding malformed cart snapshot: %s", e)
        return Cart()


def dump_snapshot(cart: Cart) -> str:
    """
    Serialize a cart to the snapshot format:
      {"cartItems": [...], "shippingAddress": {...}, "paymentMethod": "..."}
    paymentMethod is omitted when unset.
    """
    return json.dumps(
        cart.model_dump(mode="json", by_alias=True, exclude_none=True),
        separators=(",", ":"),
    )


class CartContext:
    """
    Holds the cart for the duration of a request.

    Mutations go through `dispatch`; `persist` writes the snapshot back
    only if something changed.
    """

    def __init__(self, cart: Cart | None = None):
        self.cart = cart if cart is not None else Cart()
        self.dirty = False

    @classmethod
    def rehydrate(cls, raw: str | None) -> "CartContext":
        return cls(load_snapshot(raw))

    def dispatch(self, action: CartAction) -> Cart:
        new_cart = apply(self.cart, action)
        if new_cart is not self.cart:
            self.cart = new_cart
            self.dirty = True
        return self.cart

    def snapshot(self) -> str:
        return dump_snapshot(self.cart)

    def persist(self, response: Response) -> None:
        if not self.dirty:
            return
        response.set_cookie(
            key=settings.CART_COOKIE_NAME,
            value=quote(self.snapshot(), safe=""),
            max_age=settings.CART_COOKIE_MAX_AGE,
            samesite="lax",
        )
        self.dirty = False

    def teardown(self, response: Response) -> None:
        self.cart = Cart()
        self.dirty = False
        response.delete_cookie(key=settings.CART_COOKIE_NAME)


def get_cart_context(request: Request) -> CartContext:
    """
    FastAPI dependency: rehydrate the cart from the request cookie.
    """
    raw = request.cookies.get(settings.CART_COOKIE_NAME)
    return CartContext.rehydrate(unquote(raw) if raw else None)
