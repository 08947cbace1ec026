"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas and the domain's field limits (names up to 100 characters,
postal codes up to 20, phone numbers up to 20).
"""

import random
import uuid

from faker import Faker

fake = Faker()

SKIN_TYPES = ["Dry", "Oily", "Combination", "Normal", "Sensitive", "All"]
CATEGORIES = ["Skincare", "Makeup", "Haircare", "Fragrance"]
PAYMENT_METHODS = ["COD", "Credit Card", "JazzCash", "Easypaisa"]

# ---------- Identity ----------


def unique_email() -> str:
    """Emails unique per run so registrations never collide."""
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}"


def shopper_name() -> str:
    return fake.name()[:100]


def valid_phone() -> str:
    """Pakistani mobile number, e.g. +923001234567."""
    return f"+923{random.randint(0, 4)}{random.randint(10000000, 99999999)}"


def registration_data() -> dict:
    return {
        "name": shopper_name(),
        "email": unique_email(),
        "password": fake.password(length=12),
        "phone": valid_phone(),
    }


def address_data(is_default: bool = False) -> dict:
    """AddAddressRequest payload; also valid as a shipping address."""
    return {
        "name": shopper_name(),
        "address": fake.street_address()[:255],
        "city": random.choice(["Lahore", "Karachi", "Islamabad", "Faisalabad", "Multan"]),
        "state": random.choice(["Punjab", "Sindh", "KPK", "Balochistan"]),
        "postal_code": str(random.randint(10000, 99999)),
        "country": "Pakistan",
        "phone": valid_phone(),
        "is_default": is_default,
    }


def shipping_address() -> dict:
    address = address_data()
    address.pop("is_default")
    return address


def guest_user() -> dict:
    return {"name": shopper_name(), "email": unique_email(), "phone": valid_phone()}


# ---------- Catalogue ----------


def product_data() -> dict:
    """CreateProductRequest payload with a discount on roughly a third of products."""
    word = fake.word().capitalize()
    price = float(random.randrange(500, 8000, 50))
    discount = float(int(price * random.uniform(0.6, 0.95))) if random.random() < 0.33 else None
    return {
        "name": f"{word} {random.choice(['Serum', 'Cream', 'Toner', 'Mask', 'Lipstick', 'Shampoo'])}"[:100],
        "brand": fake.company()[:100],
        "category": random.choice(CATEGORIES),
        "price": price,
        "discount_price": discount,
        "description": fake.paragraph(nb_sentences=3),
        "stock": random.randint(50, 500),
        "is_new": random.random() < 0.2,
        "skin_types": random.sample(SKIN_TYPES, k=2),
        "tags": [fake.word() for _ in range(3)],
    }


def category_data() -> dict:
    return {
        "name": f"{fake.word().capitalize()} {uuid.uuid4().hex[:4]}"[:50],
        "description": fake.sentence()[:500],
        "display_order": random.randint(0, 20),
    }


def review_data() -> dict:
    return {"rating": random.randint(1, 5), "comment": fake.sentence(nb_words=12)}


def search_params() -> dict:
    """A browse query mixing keyword, price range and sort."""
    params: dict = {"page": random.randint(1, 3), "limit": random.choice([12, 24])}
    if random.random() < 0.5:
        params["keyword"] = random.choice(["serum", "cream", "matte", "argan", "toner"])
    if random.random() < 0.3:
        params["minPrice"] = 500
        params["maxPrice"] = random.choice([2000, 4000, 8000])
    params["sort"] = random.choice(["newest", "price-asc", "price-desc", "rating", "popular"])
    return params


# ---------- Ordering ----------


def order_lines(product_ids: list[str], max_lines: int = 3) -> list[dict]:
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, max_lines)))
    return [{"product_id": product_id, "quantity": random.randint(1, 2)} for product_id in chosen]


def payment_method() -> str:
    return random.choice(PAYMENT_METHODS)
