# app/schemas/checkout.py
from enum import Enum

from pydantic import BaseModel


class CheckoutStep(str, Enum):
    CART = "cart"
    SHIPPING = "shipping"
    PAYMENT = "payment"
    PLACE_ORDER = "placeorder"


class CheckoutStepRead(BaseModel):
    """
    Outcome of navigating to a checkout step.

    `step` is where the client should be; `redirected` is True when it
    differs from `requested` because an earlier step is incomplete.
    """

    requested: CheckoutStep
    step: CheckoutStep
    redirected: bool
    location: str
