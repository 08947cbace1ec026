import os
from pathlib import Path

import pytest

# Settings are read from the environment on first use, so they are pinned here
# before any storefront module is imported.
_TEST_ENVIRONMENT = {
    "RATE_LIMIT_ENABLED": "false",
    "BCRYPT_ROUNDS": "4",
    "WALLET_DELAY_SECONDS": "0",
    "VERIFY_DELAY_SECONDS": "0",
    "EMAIL_BACKEND": "fake",
    "PAYMENT_GATEWAY": "fake",
    "UPLOAD_BACKEND": "local",
    "JWT_SECRET": "test-secret",
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pin the environment and initialize the storefront domain once."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    for key, value in _TEST_ENVIRONMENT.items():
        os.environ.setdefault(key, value)

    from storefront.config import reset_settings
    from storefront.domain import storefront

    reset_settings()
    storefront.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain():
    from storefront.domain import storefront

    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain, tmp_path):
    """Push domain context before each test, cleanup after."""
    from storefront.media.storage import set_storage
    from storefront.media.storage.local_disk import LocalDiskStorage

    ctx = _storefront_domain.domain_context()
    ctx.push()
    set_storage(LocalDiskStorage(tmp_path / "uploads"))

    yield

    from protean import current_domain

    from storefront.media.storage import reset_storage
    from storefront.notifications.channel import reset_mailer
    from storefront.payments.gateway import reset_gateway

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()

    reset_mailer()
    reset_gateway()
    reset_storage()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def mailer():
    """The in-memory mailer every notification goes through during a test."""
    from storefront.notifications.channel import get_mailer

    return get_mailer()


@pytest.fixture()
def make_user():
    """Register a user through the command pipeline and return the stored aggregate."""
    from protean import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    def _make(name="Ayesha Khan", email="ayesha@example.com", password="secret123", is_admin=False, **extra):
        command = RegisterUser(name=name, email=email, password=password, **extra)
        user_id = current_domain.process(command, asynchronous=False)
        repo = current_domain.repository_for(User)
        user = repo.get(user_id)
        if is_admin:
            user.grant_admin(True)
            repo.add(user)
            user = repo.get(user_id)
        return user

    return _make


@pytest.fixture()
def make_product():
    """Create an active product directly through the repository."""
    from protean import current_domain

    from storefront.catalogue.product import Product

    def _make(name="Hydrating Serum", price=1000.0, stock=5, **details):
        details.setdefault("brand", "Glow Lab")
        details.setdefault("category", "Skincare")
        details.setdefault("description", "A lightweight daily serum.")
        product = Product.create(name=name, price=price, stock=stock, **details)
        repo = current_domain.repository_for(Product)
        repo.add(product)
        return repo.get(product.id)

    return _make


@pytest.fixture()
def shipping_address():
    return {
        "name": "Ayesha Khan",
        "address": "12 Mall Road",
        "city": "Lahore",
        "state": "Punjab",
        "postal_code": "54000",
        "country": "Pakistan",
        "phone": "+923001234567",
    }


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from storefront.web import create_app

    return TestClient(create_app())


@pytest.fixture()
def signup(client):
    """Register through the API and return bearer headers plus the response body.

    The session cookie set by registration is dropped so every later request
    authenticates only through the headers it is given.
    """

    def _signup(name="Ayesha Khan", email="ayesha@example.com", password="secret123"):
        response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        client.cookies.clear()
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body

    return _signup


@pytest.fixture()
def admin_headers(client, make_user):
    make_user(name="Store Admin", email="admin@example.com", password="admin-pass", is_admin=True)
    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "admin-pass"})
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


# ---------------------------------------------------------------------------
# Ordering fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def place_order(shipping_address):
    """Place an order through the command pipeline and return its id.

    `lines` are (product, quantity) pairs.
    """
    import json

    from protean import current_domain

    from storefront.ordering.placement import PlaceOrder

    def _place(lines, user=None, guest=None, payment_method="COD", notes=None):
        command = PlaceOrder(
            user_id=user.id if user else None,
            items=json.dumps([{"product_id": product.id, "quantity": quantity} for product, quantity in lines]),
            shipping_address=json.dumps(shipping_address),
            payment_method=payment_method,
            guest_user=json.dumps(guest) if guest else None,
            notes=notes,
        )
        return current_domain.process(command, asynchronous=False)

    return _place
