"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Admin account, categories and sample products
"""

import argparse
import json
import os
import sys

SEED_CATEGORIES = [
    {"name": "Skincare", "description": "Cleansers, serums and moisturisers", "display_order": 1},
    {"name": "Makeup", "description": "Face, eyes and lips", "display_order": 2},
    {"name": "Haircare", "description": "Shampoos, conditioners and treatments", "display_order": 3},
    {"name": "Fragrance", "description": "Perfumes and body mists", "display_order": 4},
]

SEED_PRODUCTS = [
    {
        "name": "Hydrating Face Serum",
        "brand": "Glow Lab",
        "category": "Skincare",
        "price": 2500.0,
        "discount_price": 2100.0,
        "description": "Hyaluronic acid serum for all-day hydration.",
        "stock": 40,
        "is_featured": True,
        "skin_types": ["Dry", "Normal"],
        "tags": ["serum", "hydration"],
    },
    {
        "name": "Oil Control Cleanser",
        "brand": "Pure Skin",
        "category": "Skincare",
        "price": 1200.0,
        "description": "Gentle foaming cleanser with salicylic acid.",
        "stock": 60,
        "is_new": True,
        "skin_types": ["Oily", "Combination"],
        "tags": ["cleanser"],
    },
    {
        "name": "Velvet Matte Lipstick",
        "brand": "Colour Co",
        "category": "Makeup",
        "price": 950.0,
        "description": "Long-wear matte lipstick in twelve shades.",
        "stock": 120,
        "is_featured": True,
        "skin_types": ["All"],
        "tags": ["lipstick", "matte"],
    },
    {
        "name": "Argan Repair Shampoo",
        "brand": "Silk Roots",
        "category": "Haircare",
        "price": 1450.0,
        "description": "Sulphate-free shampoo with argan oil.",
        "stock": 35,
        "skin_types": ["All"],
        "tags": ["shampoo", "argan"],
    },
]


def _domain():
    from storefront.domain import storefront

    print("Initializing storefront domain...")
    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def seed():
    from protean.utils.globals import current_domain

    from storefront.catalogue.categories import CreateCategory
    from storefront.catalogue.category import Category
    from storefront.catalogue.management import CreateProduct
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    domain = _domain()
    with domain.domain_context():
        users = current_domain.repository_for(User)
        admin_email = os.getenv("ADMIN_EMAIL", "admin@storefront.local")
        if users.find_by_email(admin_email) is None:
            command = RegisterUser(
                name="Store Admin",
                email=admin_email,
                password=os.getenv("ADMIN_PASSWORD", "admin123"),
            )
            admin = users.get(current_domain.process(command, asynchronous=False))
            admin.grant_admin(True)
            admin.is_verified = True
            users.add(admin)
            print(f"  admin account {admin_email} created.")

        categories = current_domain.repository_for(Category)
        for category in SEED_CATEGORIES:
            if categories.find_by_name(category["name"]) is None:
                current_domain.process(CreateCategory(**category), asynchronous=False)
        print(f"  {len(SEED_CATEGORIES)} categories ready.")

        for product in SEED_PRODUCTS:
            payload = dict(product)
            for field in ("skin_types", "tags"):
                payload[field] = json.dumps(payload.get(field, []))
            current_domain.process(CreateProduct(**payload), asynchronous=False)
        print(f"  {len(SEED_PRODUCTS)} products created.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load an admin account, categories and sample products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
