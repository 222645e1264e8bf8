# app/routers/checkout.py
from fastapi import APIRouter, Depends

from app.core.auth import require_auth
from app.schemas.checkout import CheckoutStep, CheckoutStepRead
from app.services.cart_session import CartContext, get_cart_context
from app.services.checkout_wizard import resolve_step

router = APIRouter(
    prefix="/checkout",
    tags=["Checkout"],
    dependencies=[Depends(require_auth)],
)


@router.get("/{step}", response_model=CheckoutStepRead)
def navigate(
    step: CheckoutStep,
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Resolve navigation to a checkout step.

    - payment without a shipping address -> shipping
    - placeorder without a payment method -> payment
    - going back is always allowed
    """
    return resolve_step(ctx.cart, step)
