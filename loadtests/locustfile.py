"""Storefront load testing: Locust entry point.

Discovers all user classes from the scenarios package. Seed the database
first (`python src/manage.py seed`) so there are products to buy and an
admin account to log in with. Keep RATE_LIMIT_ENABLED=false on the target,
or every simulated user shares one client address and is throttled.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:5000

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.admin import AdminUser  # noqa: F401
from loadtests.scenarios.mixed import CatalogAdminUser, MixedWorkloadUser  # noqa: F401
from loadtests.scenarios.shopper import BrowsingUser, ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "Insufficient stock for Clay
    Mask. Available: 0" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker and check the target is up when the load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        resp = requests.get(f"{environment.host}/api/health", timeout=5)
        print(f"[LOADTEST] Health: {resp.json().get('status')} ({resp.json().get('environment')})")
    except requests.RequestException as e:
        print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the order dashboard when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    from loadtests.scenarios.admin import ADMIN_EMAIL, ADMIN_PASSWORD

    try:
        login = requests.post(
            f"{environment.host}/api/auth/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
            timeout=5,
        )
        stats = requests.get(
            f"{environment.host}/api/orders/stats",
            headers={"Authorization": f"Bearer {login.json()['token']}"},
            timeout=5,
        ).json()
        print("[LOADTEST] Final order stats:")
        for key in ("total_orders", "monthly_orders", "total_revenue", "orders_by_status"):
            print(f"  {key}: {stats.get(key)}")
        print()
    except (requests.RequestException, KeyError, ValueError) as e:
        print(f"[LOADTEST] Could not fetch order stats: {e}\n")
