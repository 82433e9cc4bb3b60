"""
Component tests for the cart endpoints.

Every request is authenticated with a real login; carts are stored in
the test database and read back through the API.
"""
from fastapi.testclient import TestClient


def add(client: TestClient, headers: dict, **item):
    return client.post("/cart/add", json=item, headers=headers)


class TestGetCart:
    def test_no_cart_yet_is_null(self, test_client: TestClient, auth_headers: dict):
        response = test_client.get("/cart", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() is None


class TestAddItem:
    def test_add_creates_cart(self, test_client: TestClient, auth_headers: dict):
        response = add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        assert response.status_code == 200
        cart = response.json()
        assert set(cart) == {"id", "userId", "status", "items", "total"}
        assert cart["status"] == "ACTIVE"
        assert cart["items"] == [
            {"productId": "p1", "quantity": 2, "price": 10, "total": 20, "title": None, "image": None}
        ]
        assert cart["total"] == 20

    def test_cart_is_returned_by_get(self, test_client: TestClient, auth_headers: dict):
        added = add(test_client, auth_headers, productId="p1", quantity=1, price=4.5).json()

        response = test_client.get("/cart", headers=auth_headers)

        assert response.json() == added

    def test_repeat_add_keeps_first_price(self, test_client: TestClient, auth_headers: dict):
        """
        Merging into an existing line ignores the price sent with the second add
        """
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        cart = add(test_client, auth_headers, productId="p1", quantity=1, price=15).json()

        assert cart["items"][0]["quantity"] == 3
        assert cart["items"][0]["price"] == 10
        assert cart["total"] == 30

    def test_display_fields_are_stored(self, test_client: TestClient, auth_headers: dict):
        cart = add(
            test_client, auth_headers, productId="p1", quantity=1, price=3, title="Mug", image="mug.png"
        ).json()

        assert cart["items"][0]["title"] == "Mug"
        assert cart["items"][0]["image"] == "mug.png"

    def test_display_fields_come_from_catalog(self, test_client: TestClient, auth_headers: dict, catalog):
        category = test_client.get("/categories").json()[0]
        product = test_client.get(f"/products/{category['id']}").json()[0]

        cart = add(test_client, auth_headers, productId=product["id"], quantity=1, price=product["price"]).json()

        assert cart["items"][0]["title"] == product["title"]
        assert cart["items"][0]["image"] == product["image"]

    def test_negative_quantity_is_rejected(self, test_client: TestClient, auth_headers: dict):
        response = add(test_client, auth_headers, productId="p1", quantity=-1, price=10)

        assert response.status_code == 422

    def test_quantity_beyond_column_range_is_rejected(self, test_client: TestClient, auth_headers: dict):
        response = add(test_client, auth_headers, productId="p1", quantity=2**31, price=10)

        assert response.status_code == 422
        assert test_client.get("/cart", headers=auth_headers).json() is None

    def test_price_beyond_money_precision_is_rejected(self, test_client: TestClient, auth_headers: dict):
        response = add(test_client, auth_headers, productId="p1", quantity=1, price="1e20")

        assert response.status_code == 422

    def test_price_with_fractional_cents_is_rejected(self, test_client: TestClient, auth_headers: dict):
        response = add(test_client, auth_headers, productId="p1", quantity=1, price="9.999")

        assert response.status_code == 422

    def test_requires_authentication(self, test_client: TestClient):
        response = test_client.post("/cart/add", json={"productId": "p1", "quantity": 1, "price": 1})

        assert response.status_code == 401


class TestUpdateItem:
    def test_patch_replaces_quantity(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        response = test_client.patch("/cart/update/p1", json={"quantity": 5}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 5
        assert response.json()["total"] == 50

    def test_post_is_accepted_too(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        response = test_client.post("/cart/update/p1", json={"quantity": 0}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_quantity_beyond_column_range_is_rejected(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        response = test_client.patch("/cart/update/p1", json={"quantity": 2**31}, headers=auth_headers)

        assert response.status_code == 422
        assert test_client.get("/cart", headers=auth_headers).json()["items"][0]["quantity"] == 2

    def test_unknown_item_answers_404(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        response = test_client.patch("/cart/update/p2", json={"quantity": 5}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found!"}
        assert test_client.get("/cart", headers=auth_headers).json()["total"] == 20

    def test_missing_cart_answers_404(self, test_client: TestClient, auth_headers: dict):
        response = test_client.patch("/cart/update/p1", json={"quantity": 5}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Cart not found!"}


class TestRemoveItem:
    def test_delete_removes_item(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)
        add(test_client, auth_headers, productId="p2", quantity=1, price=5)

        response = test_client.delete("/cart/remove/p1", headers=auth_headers)

        assert response.status_code == 200
        assert [i["productId"] for i in response.json()["items"]] == ["p2"]
        assert response.json()["total"] == 5

    def test_post_is_accepted_too(self, test_client: TestClient, auth_headers: dict):
        add(test_client, auth_headers, productId="p1", quantity=2, price=10)

        response = test_client.post("/cart/remove/p1", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_unknown_item_is_a_no_op(self, test_client: TestClient, auth_headers: dict):
        before = add(test_client, auth_headers, productId="p1", quantity=2, price=10).json()

        response = test_client.delete("/cart/remove/p9", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == before

    def test_missing_cart_answers_404(self, test_client: TestClient, auth_headers: dict):
        response = test_client.delete("/cart/remove/p1", headers=auth_headers)

        assert response.status_code == 404
