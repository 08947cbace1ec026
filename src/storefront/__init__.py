"""Storefront: a beauty and skincare shop built on Protean and FastAPI."""
