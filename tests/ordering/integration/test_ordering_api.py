"""Integration tests for the cart and order endpoints."""

import pytest

from identity.customer.customer import ROLE_ADMIN, ROLE_CUSTOMER


@pytest.fixture()
def shopper(make_customer, auth_headers):
    customer_id = make_customer(email="shopper@example.com")
    return customer_id, auth_headers(customer_id)


class TestCartEndpoints:
    def test_add_view_and_count(self, client, shopper, make_product):
        customer_id, headers = shopper
        lamp = make_product(name="Desk Lamp")
        hose = make_product(name="Garden Hose")

        response = client.post(
            f"/customers/{customer_id}/cart",
            json={"items": [{"product_id": lamp, "quantity": 2}, {"product_id": hose}]},
            headers=headers,
        )
        assert response.status_code == 200
        assert [(i["product"]["name"], i["quantity"]) for i in response.json()] == [("Desk Lamp", 2), ("Garden Hose", 1)]

        client.post(f"/customers/{customer_id}/cart", json={"items": [{"product_id": lamp}]}, headers=headers)

        cart = client.get(f"/customers/{customer_id}/cart", headers=headers).json()
        assert [(i["product"]["id"], i["quantity"]) for i in cart] == [(lamp, 3), (hose, 1)]
        assert client.get(f"/customers/{customer_id}/cart/count", headers=headers).json() == {"count": 4}

    def test_empty_cart_is_an_empty_list(self, client, shopper):
        customer_id, headers = shopper
        assert client.get(f"/customers/{customer_id}/cart", headers=headers).json() == []

    def test_empty_items_are_rejected(self, client, shopper):
        customer_id, headers = shopper
        response = client.post(f"/customers/{customer_id}/cart", json={"items": []}, headers=headers)
        assert response.status_code == 400

    def test_unknown_product_is_404(self, client, shopper):
        customer_id, headers = shopper
        response = client.post(f"/customers/{customer_id}/cart", json={"items": [{"product_id": 404}]}, headers=headers)
        assert response.status_code == 404

    def test_other_customers_cart_is_403(self, client, shopper, make_customer):
        _, headers = shopper
        other = make_customer()
        assert client.get(f"/customers/{other}/cart", headers=headers).status_code == 403

    def test_cart_requires_authentication(self, client, shopper):
        customer_id, _ = shopper
        assert client.get(f"/customers/{customer_id}/cart").status_code == 401


class TestOrderEndpoints:
    def test_place_and_list_orders(self, client, shopper, make_product):
        customer_id, headers = shopper
        product_id = make_product(name="Headphones", quantity=5)

        response = client.post(
            f"/customers/{customer_id}/orders", json={"product_id": product_id, "quantity": 3}, headers=headers
        )
        assert response.status_code == 201
        order = response.json()
        assert order["customer_id"] == customer_id
        assert order["quantity"] == 3
        assert order["product"]["quantity"] == 2

        listed = client.get(f"/customers/{customer_id}/orders", headers=headers).json()
        assert [o["id"] for o in listed] == [order["id"]]
        assert client.get(f"/products/{product_id}").json()["quantity"] == 2

    def test_insufficient_stock_is_409(self, client, shopper, make_product):
        customer_id, headers = shopper
        product_id = make_product(quantity=1)

        response = client.post(
            f"/customers/{customer_id}/orders", json={"product_id": product_id, "quantity": 2}, headers=headers
        )
        assert response.status_code == 409
        assert response.json() == {"error": {"message": "only 1 left in stock"}}

    def test_no_orders_is_an_empty_list(self, client, shopper):
        customer_id, headers = shopper
        assert client.get(f"/customers/{customer_id}/orders", headers=headers).json() == []

    def test_admin_can_list_any_customers_orders(self, client, shopper, make_admin, auth_headers):
        customer_id, _ = shopper
        admin = auth_headers(make_admin(), roles=(ROLE_CUSTOMER, ROLE_ADMIN))
        assert client.get(f"/customers/{customer_id}/orders", headers=admin).status_code == 200
