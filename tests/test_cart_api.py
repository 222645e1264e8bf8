"""HTTP tests for the cookie-backed cart."""

import json
import uuid
from urllib.parse import unquote

from tests.conftest import API

ADDRESS = {
    "fullName": "Alice Doe",
    "address": "12 Flower St",
    "city": "Dubai",
    "postalCode": "00000",
    "country": "UAE",
}


def _cookie_snapshot(client) -> dict:
    return json.loads(unquote(client.cookies["cart"]))


class TestReadCart:
    def test_guest_gets_empty_cart(self, client):
        res = client.get(f"{API}/cart")
        assert res.status_code == 200
        assert res.json() == {
            "cartItems": [],
            "shippingAddress": {
                "fullName": None,
                "address": None,
                "city": None,
                "postalCode": None,
                "country": None,
            },
            "paymentMethod": None,
            "itemsCount": 0,
            "itemsPrice": 0,
        }
        assert "cart" not in client.cookies

    def test_malformed_cookie_reads_as_empty(self, client):
        client.cookies.set("cart", "not-json")
        res = client.get(f"{API}/cart")
        assert res.status_code == 200
        assert res.json()["cartItems"] == []


class TestAddItem:
    def test_add_snapshots_product(self, client, make_product):
        product = make_product(name="Tulip Bouquet", price=12.5)
        res = client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        assert res.status_code == 200

        body = res.json()
        (item,) = body["cartItems"]
        assert item["productId"] == str(product.id)
        assert item["name"] == "Tulip Bouquet"
        assert item["slug"] == product.slug
        assert item["price"] == 12.5
        assert item["countInStock"] == 10
        assert item["quantity"] == 1
        assert body["itemsCount"] == 1
        assert body["itemsPrice"] == 12.5

        assert _cookie_snapshot(client)["cartItems"][0]["quantity"] == 1

    def test_add_without_quantity_increments(self, client, make_product):
        product = make_product()
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        res = client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        assert res.json()["cartItems"][0]["quantity"] == 2

    def test_add_with_quantity_replaces(self, client, make_product):
        product = make_product()
        client.post(f"{API}/cart/items", json={"productId": str(product.id), "quantity": 3})
        res = client.post(
            f"{API}/cart/items", json={"productId": str(product.id), "quantity": 2}
        )
        body = res.json()
        assert len(body["cartItems"]) == 1
        assert body["cartItems"][0]["quantity"] == 2
        assert body["itemsPrice"] == 20

    def test_distinct_products_keep_order(self, client, make_product):
        first, second = make_product(), make_product()
        client.post(f"{API}/cart/items", json={"productId": str(first.id)})
        res = client.post(f"{API}/cart/items", json={"productId": str(second.id)})
        ids = [it["productId"] for it in res.json()["cartItems"]]
        assert ids == [str(first.id), str(second.id)]

    def test_out_of_stock_is_rejected(self, client, make_product):
        product = make_product(count_in_stock=1)
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})

        res = client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        assert res.status_code == 400
        assert res.json()["detail"] == "Sorry. Product is out of stock"

        # Cart left as it was
        assert _cookie_snapshot(client)["cartItems"][0]["quantity"] == 1

    def test_quantity_above_stock_on_first_add(self, client, make_product):
        product = make_product(count_in_stock=0)
        res = client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        assert res.status_code == 400
        assert "cart" not in client.cookies

    def test_unknown_product(self, client):
        res = client.post(f"{API}/cart/items", json={"productId": str(uuid.uuid4())})
        assert res.status_code == 404
        assert res.json()["detail"] == "Product not found"

    def test_zero_quantity_is_invalid(self, client, make_product):
        product = make_product()
        res = client.post(
            f"{API}/cart/items", json={"productId": str(product.id), "quantity": 0}
        )
        assert res.status_code == 422


class TestUpdateAndRemove:
    def test_update_quantity(self, client, make_product):
        product = make_product()
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        res = client.patch(f"{API}/cart/items/{product.id}", json={"quantity": 4})
        assert res.status_code == 200
        assert res.json()["cartItems"][0]["quantity"] == 4

    def test_update_above_stock(self, client, make_product):
        product = make_product(count_in_stock=2)
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        res = client.patch(f"{API}/cart/items/{product.id}", json={"quantity": 3})
        assert res.status_code == 400

    def test_update_item_not_in_cart(self, client, make_product):
        product = make_product()
        res = client.patch(f"{API}/cart/items/{product.id}", json={"quantity": 1})
        assert res.status_code == 404
        assert res.json()["detail"] == "Item not in cart"

    def test_remove_item(self, client, make_product):
        first, second = make_product(), make_product()
        client.post(f"{API}/cart/items", json={"productId": str(first.id)})
        client.post(f"{API}/cart/items", json={"productId": str(second.id)})

        res = client.delete(f"{API}/cart/items/{first.id}")
        assert res.status_code == 200
        assert [it["productId"] for it in res.json()["cartItems"]] == [str(second.id)]

    def test_remove_absent_item_is_a_no_op(self, client, make_product):
        product = make_product()
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        res = client.delete(f"{API}/cart/items/{uuid.uuid4()}")
        assert res.status_code == 200
        assert len(res.json()["cartItems"]) == 1


class TestCheckoutData:
    def test_shipping_address_requires_signin(self, client):
        res = client.put(f"{API}/cart/shipping-address", json=ADDRESS)
        assert res.status_code == 401

    def test_save_shipping_address(self, client, auth_headers):
        res = client.put(f"{API}/cart/shipping-address", json=ADDRESS, headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["shippingAddress"] == ADDRESS
        assert _cookie_snapshot(client)["shippingAddress"] == ADDRESS

    def test_shipping_address_fields_required(self, client, auth_headers):
        res = client.put(
            f"{API}/cart/shipping-address",
            json={**ADDRESS, "city": "  "},
            headers=auth_headers,
        )
        assert res.status_code == 422

    def test_save_payment_method(self, client, auth_headers):
        res = client.put(
            f"{API}/cart/payment-method",
            json={"paymentMethod": "Stripe"},
            headers=auth_headers,
        )
        assert res.status_code == 200
        assert res.json()["paymentMethod"] == "Stripe"

    def test_payment_method_required(self, client, auth_headers):
        res = client.put(f"{API}/cart/payment-method", json={}, headers=auth_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "Payment method is required"

    def test_unsupported_payment_method(self, client, auth_headers):
        res = client.put(
            f"{API}/cart/payment-method",
            json={"paymentMethod": "Bitcoin"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert res.json()["detail"].startswith("Unsupported payment method")


class TestReset:
    def test_reset_clears_cart_and_cookie(self, client, make_product, auth_headers):
        product = make_product()
        client.post(f"{API}/cart/items", json={"productId": str(product.id)})
        client.put(f"{API}/cart/shipping-address", json=ADDRESS, headers=auth_headers)
        client.put(
            f"{API}/cart/payment-method",
            json={"paymentMethod": "Cash"},
            headers=auth_headers,
        )

        res = client.delete(f"{API}/cart")
        assert res.status_code == 200
        body = res.json()
        assert body["cartItems"] == []
        assert body["paymentMethod"] is None
        assert body["shippingAddress"]["address"] is None

        assert "cart" not in client.cookies
        assert client.get(f"{API}/cart").json()["itemsCount"] == 0
