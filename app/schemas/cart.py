# app/schemas/cart.py
"""
Cart state as carried in the client-side `cart` snapshot.

Field names serialize in camelCase (cartItems, shippingAddress, ...) because
the snapshot format is shared with the storefront frontend.
"""
import uuid
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

PaymentMethod = Literal["PayPal", "Stripe", "Cash"]
PAYMENT_METHODS: tuple[str, ...] = get_args(PaymentMethod)
UNSUPPORTED_PAYMENT_MESSAGE = (
    f"Unsupported payment method. Allowed: {', '.join(PAYMENT_METHODS)}"
)


class CartItem(BaseModel):
    """
    One product line in the cart.
    Unique by product_id within a cart.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    product_id: uuid.UUID
    slug: str
    name: str
    image: str | None = None
    price: float = Field(ge=0)
    count_in_stock: int = Field(default=0, ge=0)
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class ShippingAddress(BaseModel):
    """
    Shipping address as saved by the shipping step.
    Every field is optional so the empty address serializes as {}.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    full_name: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Cart(BaseModel):
    """
    Cart state: items in insertion order, shipping address, payment method.
    Totals are derived, never stored in the snapshot.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    items: list[CartItem] = Field(default_factory=list, alias="cartItems")
    shipping_address: ShippingAddress = Field(
        default_factory=ShippingAddress,
        alias="shippingAddress",
    )
    # Not restricted to PaymentMethod here; membership is checked by the service
    payment_method: str | None = Field(default=None, alias="paymentMethod")

    @property
    def items_count(self) -> int:
        return sum(it.quantity for it in self.items)

    @property
    def items_price(self) -> float:
        return round(sum(it.line_total for it in self.items), 2)

    def find_item(self, product_id: uuid.UUID) -> CartItem | None:
        for it in self.items:
            if it.product_id == product_id:
                return it
        return None


class CartRead(Cart):
    """
    Cart response model with derived totals.
    """

    @computed_field(alias="itemsCount")
    @property
    def total_quantity(self) -> int:
        return self.items_count

    @computed_field(alias="itemsPrice")
    @property
    def total_price(self) -> float:
        return self.items_price


# ---- Request payloads ----


class CartItemAdd(BaseModel):
    """
    Payload for adding a product to the cart.

    If quantity is omitted, the existing quantity is incremented by one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    product_id: uuid.UUID
    quantity: int | None = Field(default=None, gt=0)


class CartItemUpdate(BaseModel):
    """
    Payload for setting the quantity of a cart item.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class ShippingAddressUpdate(BaseModel):
    """
    Payload for the shipping step. Every field is required.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    full_name: str
    address: str
    city: str
    postal_code: str
    country: str

    @field_validator("full_name", "address", "city", "postal_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    def to_address(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class PaymentMethodUpdate(BaseModel):
    """
    Payload for the payment step.
    Left loose on purpose: an empty or unknown method is reported by the
    service as a 400 with a readable message.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    payment_method: str | None = None
