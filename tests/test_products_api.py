"""HTTP tests for catalogue browsing, reviews and the user profile."""

import uuid

import pytest

from tests.conftest import API, bearer, make_token


class TestBrowse:
    def test_list_newest_first(self, client, make_product):
        older = make_product(name="Older Roses")
        newer = make_product(name="Newer Roses")
        res = client.get(f"{API}/products")
        assert res.status_code == 200
        assert [p["id"] for p in res.json()] == [str(newer.id), str(older.id)]

    def test_filter_by_category_and_query(self, client, make_product):
        make_product(name="Red Roses", category="Roses")
        tulips = make_product(name="Yellow Tulips", category="Tulips")
        make_product(name="White Tulips", category="Tulips")

        res = client.get(f"{API}/products", params={"category": "Tulips", "query": "yellow"})
        assert [p["id"] for p in res.json()] == [str(tulips.id)]

    def test_featured_only(self, client, make_product):
        featured = make_product(is_featured=True)
        make_product()
        res = client.get(f"{API}/products", params={"featured": True})
        assert [p["id"] for p in res.json()] == [str(featured.id)]

    def test_categories_are_distinct_and_sorted(self, client, make_product):
        make_product(category="Tulips")
        make_product(category="Roses")
        make_product(category="Tulips")
        assert client.get(f"{API}/products/categories").json() == ["Roses", "Tulips"]

    def test_get_by_slug(self, client, make_product):
        product = make_product(slug="pink-peonies")
        res = client.get(f"{API}/products/slug/pink-peonies")
        assert res.status_code == 200
        assert res.json()["id"] == str(product.id)

    def test_unknown_slug(self, client):
        res = client.get(f"{API}/products/slug/missing")
        assert res.status_code == 404
        assert res.json()["detail"] == "Product not found"

    def test_get_by_id(self, client, make_product):
        product = make_product(count_in_stock=7)
        res = client.get(f"{API}/products/{product.id}")
        assert res.json()["count_in_stock"] == 7

    def test_unknown_id(self, client):
        assert client.get(f"{API}/products/{uuid.uuid4()}").status_code == 404


class TestReviewsApi:
    def test_signin_required(self, client, make_product):
        product = make_product()
        res = client.post(
            f"{API}/products/{product.id}/reviews",
            json={"rating": 5, "comment": "Great"},
        )
        assert res.status_code == 401
        assert res.json()["detail"] == "Signin required"

    def test_unknown_product(self, client, auth_headers):
        res = client.post(
            f"{API}/products/{uuid.uuid4()}/reviews",
            json={"rating": 5, "comment": "Great"},
            headers=auth_headers,
        )
        assert res.status_code == 404

    def test_missing_comment(self, client, auth_headers, make_product):
        product = make_product()
        res = client.post(
            f"{API}/products/{product.id}/reviews",
            json={"rating": 5},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Please enter comment"

    def test_rating_out_of_range(self, client, auth_headers, make_product):
        product = make_product()
        res = client.post(
            f"{API}/products/{product.id}/reviews",
            json={"rating": 6, "comment": "Great"},
            headers=auth_headers,
        )
        assert res.status_code == 400

    @pytest.mark.parametrize("rating", ["abc", 4.5, [5]])
    def test_non_integer_rating(self, client, auth_headers, make_product, rating):
        product = make_product()
        res = client.post(
            f"{API}/products/{product.id}/reviews",
            json={"rating": rating, "comment": "Great"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Rating must be between 1 and 5"
        assert client.get(f"{API}/products/{product.id}").json()["num_reviews"] == 0

    def test_create_then_update(self, client, auth_headers, other_customer, make_product):
        product = make_product()
        url = f"{API}/products/{product.id}/reviews"

        res = client.post(url, json={"rating": 4, "comment": "Nice"}, headers=auth_headers)
        assert res.status_code == 201
        assert res.json() == {
            "message": "Review submitted",
            "created": True,
            "num_reviews": 1,
            "rating": 4.0,
        }

        res = client.post(
            url, json={"rating": 2, "comment": "Meh"}, headers=bearer(other_customer)
        )
        assert res.json()["rating"] == 3.0

        res = client.post(url, json={"rating": 2, "comment": "Faded"}, headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Review updated"
        assert res.json()["rating"] == 2.0

        reviews = client.get(url).json()
        assert [r["comment"] for r in reviews] == ["Faded", "Meh"]
        assert reviews[0]["name"] == "Alice"

        detail = client.get(f"{API}/products/{product.id}").json()
        assert (detail["num_reviews"], detail["rating"]) == (2, 2.0)

    def test_list_reviews_of_unknown_product(self, client):
        assert client.get(f"{API}/products/{uuid.uuid4()}/reviews").status_code == 404


class TestUsers:
    def test_me_requires_signin(self, client):
        assert client.get(f"{API}/users/me").status_code == 401

    def test_invalid_token(self, client):
        res = client.get(f"{API}/users/me", headers={"Authorization": "Bearer nope"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired token"

    def test_first_request_provisions_profile(self, client):
        user_id = uuid.uuid4()
        token = make_token(user_id, "rose@floralshop.com", name="Rose")
        res = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert res.json()["id"] == str(user_id)
        assert res.json()["name"] == "Rose"
        assert res.json()["role"] == "user"

    def test_provisioned_name_defaults_to_email_local_part(self, client):
        token = make_token(uuid.uuid4(), "lily@floralshop.com")
        res = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res.json()["name"] == "lily"

    def test_long_email_name_is_truncated(self, client):
        local = "f" * 60
        token = make_token(uuid.uuid4(), f"{local}@floralshop.com")
        res = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert res.json()["name"] == "f" * 50

    def test_token_without_email(self, client):
        token = make_token(uuid.uuid4(), "")
        res = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Token missing sub/email"

    def test_update_name(self, client, auth_headers):
        res = client.patch(f"{API}/users/me", json={"name": "Alice B"}, headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Alice B"

    def test_role_is_not_self_editable(self, client, auth_headers):
        res = client.patch(f"{API}/users/me", json={"role": "admin"}, headers=auth_headers)
        assert res.status_code == 422


class TestGoogleKey:
    def test_requires_signin(self, client):
        assert client.get(f"{API}/keys/google").status_code == 401

    def test_returns_key(self, client, auth_headers):
        res = client.get(f"{API}/keys/google", headers=auth_headers)
        assert res.status_code == 200
        assert res.text == "google-test-key"
