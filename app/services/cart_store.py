# app/services/cart_store.py
"""
Cart reducer.

`apply(cart, action)` returns the next cart state and never touches the
database, the request or the snapshot cookie. Stock checks and payment
method validation happen in CartService before an action is dispatched.
"""
from typing import assert_never

from app.schemas.cart import Cart, ShippingAddress
from app.schemas.cart_actions import (
    AddItem,
    CartAction,
    ClearItems,
    RemoveItem,
    Reset,
    SaveShippingAddress,
    SavePaymentMethod,
)


def apply(state: Cart, action: CartAction) -> Cart:
    match action:
        case AddItem(item=item, quantity=quantity):
            new_item = item.model_copy(update={"quantity": quantity})
            if state.find_item(new_item.product_id) is None:
                items = [*state.items, new_item]
            else:
                # Replace in place: quantity is the caller's final value
                items = [
                    new_item if it.product_id == new_item.product_id else it
                    for it in state.items
                ]
            return state.model_copy(update={"items": items})

        case RemoveItem(product_id=product_id):
            items = [it for it in state.items if it.product_id != product_id]
            if len(items) == len(state.items):
                return state
            return state.model_copy(update={"items": items})

        case SaveShippingAddress(address=address):
            return state.model_copy(update={"shipping_address": address})

        case SavePaymentMethod(method=method):
            return state.model_copy(update={"payment_method": method})

        case ClearItems():
            return state.model_copy(update={"items": []})

        case Reset():
            return Cart(items=[], shipping_address=ShippingAddress(), payment_method=None)

        case _:
            assert_never(action)


def reduce(state: Cart, actions) -> Cart:
    """Fold a sequence of actions over a starting cart."""
    for action in actions:
        state = apply(state, action)
    return state
