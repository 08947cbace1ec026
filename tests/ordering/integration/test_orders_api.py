"""Integration tests for the /api/orders endpoints and who may act on an order."""

import pytest

GUEST = {"name": "Guest Shopper", "email": "guest@example.com"}


@pytest.fixture()
def order_body(shipping_address):
    def _body(product, quantity=1, **extra):
        body = {
            "order_items": [{"product_id": product.id, "quantity": quantity}],
            "shipping_address": shipping_address,
            "payment_method": "COD",
        }
        body.update(extra)
        return body

    return _body


class TestCreateOrder:
    def test_signed_in_order(self, client, signup, make_product, order_body):
        headers, body = signup()
        product = make_product(price=1000.0, stock=5)

        response = client.post("/api/orders", json=order_body(product, 2), headers=headers)

        assert response.status_code == 201
        order = response.json()
        assert order["user_id"] == body["user"]["id"]
        assert order["status"] == "Pending"
        assert order["is_paid"] is False
        assert order["items_price"] == 2000.0
        assert order["shipping_price"] == 200.0
        assert order["tax_price"] == 100.0
        assert order["total_price"] == 2300.0
        assert client.get(f"/api/products/{product.id}").json()["stock"] == 3

    def test_client_prices_are_ignored(self, client, signup, make_product, order_body, shipping_address):
        headers, _ = signup()
        product = make_product(price=1000.0)
        body = order_body(product)
        body["order_items"][0]["price"] = 1.0
        body["total_price"] = 1.0

        response = client.post("/api/orders", json=body, headers=headers)

        assert response.json()["order_items"][0]["price"] == 1000.0

    def test_guest_order(self, client, make_product, order_body):
        product = make_product()

        response = client.post("/api/orders", json=order_body(product, guest_user=GUEST))

        assert response.status_code == 201
        assert response.json()["guest_user"]["email"] == "guest@example.com"
        assert response.json()["user_id"] is None

    def test_guest_without_contact_details(self, client, make_product, order_body):
        response = client.post("/api/orders", json=order_body(make_product()))
        assert response.status_code == 400

    def test_over_stock(self, client, signup, make_product, order_body):
        headers, _ = signup()
        product = make_product(stock=1)

        response = client.post("/api/orders", json=order_body(product, 2), headers=headers)

        assert response.status_code == 400
        assert client.get(f"/api/products/{product.id}").json()["stock"] == 1

    def test_unknown_payment_method(self, client, signup, make_product, order_body):
        headers, _ = signup()
        response = client.post(
            "/api/orders",
            json=order_body(make_product(), payment_method="Barter"),
            headers=headers,
        )
        assert response.status_code == 400


class TestOrderAccess:
    def test_owner_can_read(self, client, signup, make_product, order_body):
        headers, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=headers).json()

        assert client.get(f"/api/orders/{order['id']}", headers=headers).status_code == 200

    def test_other_shopper_is_forbidden(self, client, signup, make_product, order_body):
        owner, _ = signup(email="owner@example.com")
        stranger, _ = signup(email="stranger@example.com")
        order = client.post("/api/orders", json=order_body(make_product()), headers=owner).json()

        assert client.get(f"/api/orders/{order['id']}", headers=stranger).status_code == 403

    def test_anonymous_reader_of_user_order(self, client, signup, make_product, order_body):
        owner, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=owner).json()

        assert client.get(f"/api/orders/{order['id']}").status_code == 401

    def test_admin_can_read_any_order(self, client, signup, admin_headers, make_product, order_body):
        owner, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=owner).json()

        assert client.get(f"/api/orders/{order['id']}", headers=admin_headers).status_code == 200

    def test_guest_reads_with_matching_email(self, client, make_product, order_body):
        order = client.post("/api/orders", json=order_body(make_product(), guest_user=GUEST)).json()

        assert client.get(f"/api/orders/{order['id']}", params={"email": "GUEST@example.com"}).status_code == 200
        assert client.get(f"/api/orders/{order['id']}", params={"email": "other@example.com"}).status_code == 403
        assert client.get(f"/api/orders/{order['id']}").status_code == 403

    def test_unknown_order(self, client, admin_headers):
        assert client.get("/api/orders/missing", headers=admin_headers).status_code == 404


class TestOrderLists:
    def test_my_orders(self, client, signup, make_product, order_body):
        headers, _ = signup()
        product = make_product(stock=5)
        client.post("/api/orders", json=order_body(product), headers=headers)
        client.post("/api/orders", json=order_body(product), headers=headers)

        assert len(client.get("/api/orders/myorders", headers=headers).json()) == 2

    def test_guest_orders_by_email(self, client, make_product, order_body):
        client.post("/api/orders", json=order_body(make_product(), guest_user=GUEST))

        assert len(client.get("/api/orders/guest/guest@example.com").json()) == 1

    def test_admin_list_and_stats(self, client, signup, admin_headers, make_product, order_body):
        headers, _ = signup()
        client.post("/api/orders", json=order_body(make_product()), headers=headers)

        listing = client.get("/api/orders", headers=admin_headers).json()
        stats = client.get("/api/orders/stats", headers=admin_headers).json()

        assert listing["total"] == 1
        assert stats["total_orders"] == 1
        assert stats["orders_by_status"]["Pending"] == 1

    def test_shopper_cannot_list_all(self, client, signup):
        headers, _ = signup()
        assert client.get("/api/orders", headers=headers).status_code == 403
        assert client.get("/api/orders/stats", headers=headers).status_code == 403


class TestOrderUpdates:
    def test_owner_marks_paid(self, client, signup, make_product, order_body):
        headers, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=headers).json()

        response = client.put(
            f"/api/orders/{order['id']}/pay",
            json={"id": "pi_fake_1", "status": "succeeded", "email_address": "ayesha@example.com"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["is_paid"] is True
        assert response.json()["payment_result"]["id"] == "pi_fake_1"

    def test_stranger_cannot_mark_paid(self, client, signup, make_product, order_body):
        owner, _ = signup(email="owner@example.com")
        stranger, _ = signup(email="stranger@example.com")
        order = client.post("/api/orders", json=order_body(make_product()), headers=owner).json()

        response = client.put(f"/api/orders/{order['id']}/pay", json={"id": "pi_x"}, headers=stranger)

        assert response.status_code == 403

    def test_admin_status_and_delivery(self, client, signup, admin_headers, make_product, order_body):
        headers, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=headers).json()

        shipped = client.put(
            f"/api/orders/{order['id']}/status",
            json={"status": "Shipped", "tracking_number": "TCS-99"},
            headers=admin_headers,
        )
        delivered = client.put(f"/api/orders/{order['id']}/deliver", headers=admin_headers)

        assert shipped.json()["tracking_number"] == "TCS-99"
        assert delivered.json()["status"] == "Delivered"
        assert delivered.json()["is_delivered"] is True

    def test_shopper_cannot_change_status(self, client, signup, make_product, order_body):
        headers, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=headers).json()

        response = client.put(f"/api/orders/{order['id']}/status", json={"status": "Delivered"}, headers=headers)

        assert response.status_code == 403

    def test_owner_cancels_and_stock_returns(self, client, signup, make_product, order_body):
        headers, _ = signup()
        product = make_product(stock=5)
        order = client.post("/api/orders", json=order_body(product, 2), headers=headers).json()

        response = client.put(f"/api/orders/{order['id']}/cancel", json={"reason": "Too slow"}, headers=headers)

        assert response.json()["status"] == "Cancelled"
        assert client.get(f"/api/products/{product.id}").json()["stock"] == 5

    def test_guest_cancels_with_email(self, client, make_product, order_body):
        order = client.post("/api/orders", json=order_body(make_product(), guest_user=GUEST)).json()

        denied = client.put(f"/api/orders/{order['id']}/cancel", json={"guest_email": "x@example.com"})
        allowed = client.put(f"/api/orders/{order['id']}/cancel", json={"guest_email": "guest@example.com"})

        assert denied.status_code == 403
        assert allowed.json()["status"] == "Cancelled"

    def test_shipped_order_cannot_be_cancelled(self, client, signup, admin_headers, make_product, order_body):
        headers, _ = signup()
        order = client.post("/api/orders", json=order_body(make_product()), headers=headers).json()
        client.put(f"/api/orders/{order['id']}/status", json={"status": "Shipped"}, headers=admin_headers)

        response = client.put(f"/api/orders/{order['id']}/cancel", json={}, headers=headers)

        assert response.status_code == 400
