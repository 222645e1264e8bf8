# app/services/checkout_wizard.py
"""
Checkout wizard: Cart -> Shipping -> Payment -> PlaceOrder.

The wizard keeps no state of its own. Which step a client may be on is
decided from the cart snapshot alone:
  - Payment needs a shipping address (address line set)
  - PlaceOrder needs a payment method
Navigating to a step whose precondition fails lands on the earlier step
instead (soft redirect). Going back is always allowed.
"""
from app.schemas.cart import Cart
from app.schemas.checkout import CheckoutStep, CheckoutStepRead

STEP_LOCATIONS: dict[CheckoutStep, str] = {
    CheckoutStep.CART: "/cart",
    CheckoutStep.SHIPPING: "/shipping",
    CheckoutStep.PAYMENT: "/payment",
    CheckoutStep.PLACE_ORDER: "/placeorder",
}


def shipping_complete(cart: Cart) -> bool:
    return bool(cart.shipping_address.address)


def payment_complete(cart: Cart) -> bool:
    return bool(cart.payment_method)


def _redirect_for(cart: Cart, step: CheckoutStep) -> CheckoutStep | None:
    """Earlier step to send the client to, or None if `step` may be entered."""
    if step == CheckoutStep.PAYMENT and not shipping_complete(cart):
        return CheckoutStep.SHIPPING
    if step == CheckoutStep.PLACE_ORDER and not payment_complete(cart):
        return CheckoutStep.PAYMENT
    return None


def can_enter(cart: Cart, step: CheckoutStep) -> bool:
    return _redirect_for(cart, step) is None


def resolve_step(cart: Cart, requested: CheckoutStep) -> CheckoutStepRead:
    """
    Resolve a navigation request to the step the client should go to.

    Each step only checks its own precondition, like the storefront pages
    do: PlaceOrder without a payment method always sends the client to
    Payment, and Payment then checks the address on its own.
    """
    target = _redirect_for(cart, requested)
    step = target if target is not None else requested
    return CheckoutStepRead(
        requested=requested,
        step=step,
        redirected=step != requested,
        location=STEP_LOCATIONS[step],
    )


_STEP_ORDER = list(CheckoutStep)


def landing_step(cart: Cart, requested: CheckoutStep) -> CheckoutStep:
    """
    First step up to `requested` whose own precondition fails, i.e. the
    step that has to be completed next. PlaceOrder is only reached when
    both the address and the payment method are set.
    """
    for step in _STEP_ORDER[: _STEP_ORDER.index(requested) + 1]:
        target = _redirect_for(cart, step)
        if target is not None:
            return target
    return requested
