# app/schemas/cart_actions.py
import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.cart import CartItem, ShippingAddress


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddItem(_Action):
    """Insert the item, or replace the entry with the same product_id."""

    type: Literal["CART_ADD_ITEM"] = "CART_ADD_ITEM"
    item: CartItem
    quantity: int = Field(ge=1)


class RemoveItem(_Action):
    type: Literal["CART_REMOVE_ITEM"] = "CART_REMOVE_ITEM"
    product_id: uuid.UUID


class SaveShippingAddress(_Action):
    type: Literal["SAVE_SHIPPING_ADDRESS"] = "SAVE_SHIPPING_ADDRESS"
    address: ShippingAddress


class SavePaymentMethod(_Action):
    type: Literal["SAVE_PAYMENT_METHOD"] = "SAVE_PAYMENT_METHOD"
    method: str


class ClearItems(_Action):
    """Empty the items after an order is placed; address and payment stay."""

    type: Literal["CART_CLEAR_ITEMS"] = "CART_CLEAR_ITEMS"


class Reset(_Action):
    """Back to an empty cart (logout)."""

    type: Literal["CART_RESET"] = "CART_RESET"


CartAction = Annotated[
    Union[AddItem, RemoveItem, SaveShippingAddress, SavePaymentMethod, ClearItems, Reset],
    Field(discriminator="type"),
]
