# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.errors import raise_for_failure
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    Cart,
    CartRead,
    CartItemAdd,
    CartItemUpdate,
    PaymentMethodUpdate,
    ShippingAddressUpdate,
)
from app.services.cart_service import CartService
from app.services.cart_session import CartContext, get_cart_context

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
service = CartService(product_repo)


def _read(cart: Cart) -> CartRead:
    return CartRead.model_validate(cart.model_dump())


@router.get("", response_model=CartRead)
def get_cart(ctx: CartContext = Depends(get_cart_context)):
    """
    Return the cart held in the `cart` cookie, with derived totals.

    Public: guests have a cart too.
    """
    return _read(ctx.cart)


@router.post("/items", response_model=CartRead)
def add_item(
    payload: CartItemAdd,
    response: Response,
    session: Session = Depends(get_session),
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Add a product to the cart.

    - Without `quantity`, the existing quantity is incremented by one.
    - 400 "Sorry. Product is out of stock" if stock is insufficient.
    """
    cart = raise_for_failure(service.add_item(session, ctx, payload))
    ctx.persist(response)
    return _read(cart)


@router.patch("/items/{product_id}", response_model=CartRead)
def update_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    response: Response,
    session: Session = Depends(get_session),
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Set the quantity of a product already in the cart.
    """
    cart = raise_for_failure(service.update_quantity(session, ctx, product_id, payload))
    ctx.persist(response)
    return _read(cart)


@router.delete("/items/{product_id}", response_model=CartRead)
def remove_item(
    product_id: uuid.UUID,
    response: Response,
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Remove a product from the cart. Unknown products are ignored.
    """
    cart = raise_for_failure(service.remove_item(ctx, product_id))
    ctx.persist(response)
    return _read(cart)


@router.put(
    "/shipping-address",
    response_model=CartRead,
    dependencies=[Depends(require_auth)],
)
def save_shipping_address(
    payload: ShippingAddressUpdate,
    response: Response,
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Shipping step: save the address (replaces any previous one).
    """
    cart = raise_for_failure(service.save_shipping_address(ctx, payload))
    ctx.persist(response)
    return _read(cart)


@router.put(
    "/payment-method",
    response_model=CartRead,
    dependencies=[Depends(require_auth)],
)
def save_payment_method(
    payload: PaymentMethodUpdate,
    response: Response,
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Payment step: save the payment method (PayPal, Stripe or Cash).
    """
    cart = raise_for_failure(service.save_payment_method(ctx, payload))
    ctx.persist(response)
    return _read(cart)


@router.delete("", response_model=CartRead)
def reset_cart(
    response: Response,
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Reset the cart and drop the cookie (called on logout).
    """
    cart = raise_for_failure(service.reset(ctx))
    ctx.teardown(response)
    return _read(cart)
