"""Tests for the cart reducer."""

import uuid

from app.schemas.cart import Cart, CartItem, ShippingAddress
from app.schemas.cart_actions import (
    AddItem,
    ClearItems,
    RemoveItem,
    Reset,
    SavePaymentMethod,
    SaveShippingAddress,
)
from app.services.cart_store import apply, reduce


def _item(name="Tulips", price=10.0, stock=10, product_id=None) -> CartItem:
    return CartItem(
        product_id=product_id or uuid.uuid4(),
        slug=name.lower(),
        name=name,
        image=f"/images/{name.lower()}.jpg",
        price=price,
        count_in_stock=stock,
    )


ADDRESS = ShippingAddress(
    full_name="Alice Doe",
    address="12 Flower St",
    city="Dubai",
    postal_code="00000",
    country="UAE",
)


class TestAddItem:
    def test_add_to_empty_cart(self):
        item = _item()
        cart = apply(Cart(), AddItem(item=item, quantity=1))
        assert [it.product_id for it in cart.items] == [item.product_id]
        assert cart.items[0].quantity == 1

    def test_distinct_products_keep_first_addition_order(self):
        items = [_item(name) for name in ("Tulips", "Roses", "Lilies", "Orchids")]
        cart = reduce(Cart(), [AddItem(item=it, quantity=1) for it in items])
        assert len(cart.items) == 4
        assert [it.name for it in cart.items] == ["Tulips", "Roses", "Lilies", "Orchids"]

    def test_same_product_replaces_quantity(self):
        item = _item()
        cart = reduce(
            Cart(),
            [AddItem(item=item, quantity=1), AddItem(item=item, quantity=2)],
        )
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_quantity_is_not_additive(self):
        item = _item()
        cart = reduce(
            Cart(),
            [AddItem(item=item, quantity=3), AddItem(item=item, quantity=1)],
        )
        assert cart.items[0].quantity == 1

    def test_replaced_item_keeps_its_position(self):
        a, b, c = _item("A"), _item("B"), _item("C")
        cart = reduce(
            Cart(),
            [
                AddItem(item=a, quantity=1),
                AddItem(item=b, quantity=1),
                AddItem(item=c, quantity=1),
                AddItem(item=b, quantity=5),
            ],
        )
        assert [it.name for it in cart.items] == ["A", "B", "C"]
        assert cart.items[1].quantity == 5

    def test_replacement_refreshes_product_fields(self):
        pid = uuid.uuid4()
        cart = apply(Cart(), AddItem(item=_item(price=10.0, product_id=pid), quantity=1))
        cart = apply(cart, AddItem(item=_item(price=12.5, product_id=pid), quantity=1))
        assert cart.items[0].price == 12.5

    def test_reducer_never_rejects_on_stock(self):
        item = _item(stock=1)
        cart = apply(Cart(), AddItem(item=item, quantity=5))
        assert cart.items[0].quantity == 5

    def test_input_state_is_not_mutated(self):
        before = Cart()
        apply(before, AddItem(item=_item(), quantity=1))
        assert before.items == []

    def test_end_to_end_readd_with_intended_quantity(self):
        a = _item("A", price=10.0)
        cart = apply(Cart(), AddItem(item=a, quantity=1))
        cart = apply(cart, AddItem(item=a, quantity=2))
        assert [(it.product_id, it.quantity) for it in cart.items] == [(a.product_id, 2)]
        assert cart.items_price == 20


class TestRemoveItem:
    def test_removes_matching_item(self):
        a, b = _item("A"), _item("B")
        cart = reduce(Cart(), [AddItem(item=a, quantity=1), AddItem(item=b, quantity=1)])
        cart = apply(cart, RemoveItem(product_id=a.product_id))
        assert [it.name for it in cart.items] == ["B"]

    def test_unknown_product_is_a_no_op(self):
        cart = apply(Cart(), AddItem(item=_item(), quantity=2))
        after = apply(cart, RemoveItem(product_id=uuid.uuid4()))
        assert after == cart


class TestAddressAndPayment:
    def test_save_shipping_address_replaces_wholesale(self):
        cart = apply(Cart(), SaveShippingAddress(address=ADDRESS))
        other = ShippingAddress(address="1 Palm Rd")
        cart = apply(cart, SaveShippingAddress(address=other))
        assert cart.shipping_address == other
        assert cart.shipping_address.city is None

    def test_save_payment_method_does_not_validate(self):
        cart = apply(Cart(), SavePaymentMethod(method="Bitcoin"))
        assert cart.payment_method == "Bitcoin"


class TestClearAndReset:
    def _full_cart(self) -> Cart:
        return reduce(
            Cart(),
            [
                AddItem(item=_item(), quantity=2),
                SaveShippingAddress(address=ADDRESS),
                SavePaymentMethod(method="PayPal"),
            ],
        )

    def test_reset_yields_empty_defaults(self):
        cart = apply(self._full_cart(), Reset())
        assert cart.items == []
        assert cart.shipping_address == ShippingAddress()
        assert cart.payment_method is None
        assert cart.model_dump(by_alias=True, exclude_none=True) == {
            "cartItems": [],
            "shippingAddress": {},
        }

    def test_reset_of_empty_cart(self):
        assert apply(Cart(), Reset()) == Cart()

    def test_clear_items_keeps_address_and_payment(self):
        cart = apply(self._full_cart(), ClearItems())
        assert cart.items == []
        assert cart.shipping_address == ADDRESS
        assert cart.payment_method == "PayPal"


class TestDerivedTotals:
    def test_items_count_and_price(self):
        cart = reduce(
            Cart(),
            [
                AddItem(item=_item("A", price=10.0), quantity=2),
                AddItem(item=_item("B", price=2.5), quantity=3),
            ],
        )
        assert cart.items_count == 5
        assert cart.items_price == 27.5

    def test_empty_cart_totals(self):
        assert Cart().items_count == 0
        assert Cart().items_price == 0
