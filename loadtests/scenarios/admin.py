"""Back-office load test scenarios.

Admin credentials come from ADMIN_EMAIL and ADMIN_PASSWORD, matching the
account `python src/manage.py seed` creates.
"""

import os
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import category_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@storefront.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

_FULFILMENT_STEPS = ["Processing", "Shipped"]


def _login(task_set) -> str | None:
    with task_set.client.post(
        "/api/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        catch_response=True,
        name="POST /api/auth/login",
    ) as resp:
        if resp.status_code != 200:
            resp.failure(f"Admin login failed: {resp.status_code} - {extract_error_detail(resp)}")
            return None
        return resp.json()["token"]


class CatalogAdminJourney(SequentialTaskSet):
    """Login -> Create Category -> Create Products -> Restock -> Retire One."""

    def on_start(self):
        self.state = AdminState()

    @task
    def login(self):
        self.state.token = _login(self)
        if self.state.token is None:
            self.interrupt()

    @task
    def create_category(self):
        with self.client.post(
            "/api/categories",
            json=category_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/categories",
        ) as resp:
            if resp.status_code == 201:
                self.state.category_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Create category failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def create_products(self):
        for _ in range(3):
            with self.client.post(
                "/api/products",
                json=product_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /api/products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def restock(self):
        if not self.state.product_ids:
            self.interrupt()
        product_id = random.choice(self.state.product_ids)
        with self.client.put(
            f"/api/products/{product_id}",
            json={"stock": random.randint(100, 400), "is_featured": random.random() < 0.2},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /api/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def retire_one(self):
        if len(self.state.product_ids) > 1:
            product_id = self.state.product_ids.pop()
            self.client.delete(
                f"/api/products/{product_id}",
                headers=self.state.headers,
                name="DELETE /api/products/{id}",
            )
        self.interrupt()


class OrderFulfilmentJourney(SequentialTaskSet):
    """Login -> Dashboard -> Pending Orders -> Advance Each -> Deliver."""

    def on_start(self):
        self.state = AdminState()

    @task
    def login(self):
        self.state.token = _login(self)
        if self.state.token is None:
            self.interrupt()

    @task
    def dashboard(self):
        self.client.get("/api/orders/stats", headers=self.state.headers, name="GET /api/orders/stats")

    @task
    def pending_orders(self):
        with self.client.get(
            "/api/orders",
            params={"status": "Pending"},
            headers=self.state.headers,
            catch_response=True,
            name="GET /api/orders",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
            self.state.order_ids = [o["id"] for o in resp.json()["orders"][:5]]

    @task
    def advance(self):
        for order_id in self.state.order_ids:
            for status in _FULFILMENT_STEPS:
                payload = {"status": status}
                if status == "Shipped":
                    payload["tracking_number"] = f"TRK{random.randint(10**8, 10**9 - 1)}"
                with self.client.put(
                    f"/api/orders/{order_id}/status",
                    json=payload,
                    headers=self.state.headers,
                    catch_response=True,
                    name="PUT /api/orders/{id}/status",
                ) as resp:
                    if resp.status_code != 200:
                        resp.failure(f"Status update failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def deliver(self):
        for order_id in self.state.order_ids:
            self.client.put(
                f"/api/orders/{order_id}/deliver",
                headers=self.state.headers,
                name="PUT /api/orders/{id}/deliver",
            )
        self.interrupt()


class AdminUser(HttpUser):
    wait_time = between(2.0, 5.0)
    tasks = {CatalogAdminJourney: 1, OrderFulfilmentJourney: 2}
