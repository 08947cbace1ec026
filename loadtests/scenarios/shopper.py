"""Shopper load test scenarios.

Anonymous browsing, a registered shopper's journey from sign-up to a paid
order, and a guest checkout. The journeys are SequentialTaskSets; each step
depends on the previous one succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, TaskSet, between, task

from loadtests.data_generators import (
    address_data,
    guest_user,
    order_lines,
    payment_method,
    registration_data,
    review_data,
    search_params,
    shipping_address,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import GuestState, ShopperState


def _product_ids(resp) -> list[str]:
    return [p["id"] for p in resp.json()["products"]]


class CatalogBrowsing(TaskSet):
    """Read-only traffic: listings, search and product pages."""

    @task(5)
    def search(self):
        with self.client.get(
            "/api/products",
            params=search_params(),
            catch_response=True,
            name="GET /api/products",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task(3)
    def product_page(self):
        resp = self.client.get("/api/products", params={"limit": 24}, name="GET /api/products")
        if resp.status_code != 200 or not resp.json()["products"]:
            return
        product_id = random.choice(_product_ids(resp))
        self.client.get(f"/api/products/{product_id}", name="GET /api/products/{id}")

    @task(2)
    def home_page(self):
        self.client.get("/api/products/featured", name="GET /api/products/featured")
        self.client.get("/api/products/new", name="GET /api/products/new")
        self.client.get("/api/products/top", name="GET /api/products/top")

    @task(1)
    def facets(self):
        self.client.get("/api/products/brands", name="GET /api/products/brands")
        self.client.get("/api/categories/tree", name="GET /api/categories/tree")


class RegisteredShopperJourney(SequentialTaskSet):
    """Register -> Browse -> Fill Cart -> Save Address -> Order -> Pay -> Review."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def register(self):
        payload = registration_data()
        with self.client.post(
            "/api/auth/register",
            json=payload,
            catch_response=True,
            name="POST /api/auth/register",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.token = body["token"]
                self.state.user_id = body["user"]["id"]
                self.state.email = payload["email"]
            else:
                resp.failure(f"Registration failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse(self):
        with self.client.get(
            "/api/products",
            params={"limit": 24, "inStock": "true"},
            catch_response=True,
            name="GET /api/products",
        ) as resp:
            if resp.status_code == 200 and resp.json()["products"]:
                self.state.browsed_product_ids = _product_ids(resp)
            else:
                resp.failure("No products to shop for")
                self.interrupt()

    @task
    def fill_cart(self):
        for line in order_lines(self.state.browsed_product_ids):
            with self.client.post(
                "/api/cart",
                json=line,
                headers=self.state.headers,
                catch_response=True,
                name="POST /api/cart",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_item_ids = [i["item_id"] for i in resp.json()["items"]]
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def save_address(self):
        with self.client.post(
            "/api/users/address",
            json=address_data(is_default=True),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/users/address",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Add address failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def place_order(self):
        cart = self.client.get("/api/cart", headers=self.state.headers, name="GET /api/cart").json()
        if not cart["items"]:
            self.interrupt()
        payload = {
            "order_items": [{"product_id": i["product_id"], "quantity": i["quantity"]} for i in cart["items"]],
            "shipping_address": shipping_address(),
            "payment_method": payment_method(),
        }
        with self.client.post(
            "/api/orders",
            json=payload,
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/orders",
        ) as resp:
            if resp.status_code == 201:
                order = resp.json()
                self.state.order_id = order["id"]
                self.state.order_total = order["total_price"]
                self.client.delete("/api/cart", headers=self.state.headers, name="DELETE /api/cart")
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay(self):
        with self.client.post(
            "/api/payment/create-payment-intent",
            json={"amount": self.state.order_total, "currency": "pkr"},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/payment/create-payment-intent",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment intent failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
            intent = resp.json()["client_secret"].split("_secret_")[0]

        with self.client.put(
            f"/api/orders/{self.state.order_id}/pay",
            json={"id": intent, "status": "succeeded", "email_address": self.state.email},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /api/orders/{id}/pay",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Mark paid failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def review(self):
        product_id = random.choice(self.state.browsed_product_ids)
        with self.client.post(
            f"/api/products/{product_id}/reviews",
            json=review_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/products/{id}/reviews",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Review failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def check_orders(self):
        self.client.get("/api/orders/myorders", headers=self.state.headers, name="GET /api/orders/myorders")
        self.interrupt()


class GuestCheckoutJourney(SequentialTaskSet):
    """Browse -> Price Cart -> Order as Guest -> Look Up Order by Email."""

    def on_start(self):
        self.state = GuestState()

    @task
    def browse(self):
        resp = self.client.get("/api/products", params={"limit": 24, "inStock": "true"}, name="GET /api/products")
        if resp.status_code != 200 or not resp.json()["products"]:
            self.interrupt()
        self.state.product_ids = _product_ids(resp)

    @task
    def price_cart(self):
        lines = order_lines(self.state.product_ids)
        with self.client.post(
            "/api/cart/price",
            json={"guest_cart": lines},
            catch_response=True,
            name="POST /api/cart/price",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Price cart failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
            self.state.lines = [{"product_id": i["product_id"], "quantity": i["quantity"]} for i in resp.json()["items"]]

    @task
    def place_order(self):
        guest = guest_user()
        with self.client.post(
            "/api/orders",
            json={
                "order_items": self.state.lines,
                "shipping_address": shipping_address(),
                "payment_method": "COD",
                "guest_user": guest,
            },
            catch_response=True,
            name="POST /api/orders (guest)",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
                self.state.email = guest["email"]
            else:
                resp.failure(f"Guest order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def look_up(self):
        self.client.get(f"/api/orders/guest/{self.state.email}", name="GET /api/orders/guest/{email}")
        self.interrupt()


class BrowsingUser(HttpUser):
    """Window shoppers only. Useful for read-path baselines."""

    wait_time = between(0.5, 2.0)
    tasks = [CatalogBrowsing]


class ShopperUser(HttpUser):
    """Shoppers who buy, with and without an account."""

    wait_time = between(1.0, 3.0)
    tasks = {RegisteredShopperJourney: 3, GuestCheckoutJourney: 2}
