"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 5000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - "test"       → in-memory providers
#   - "production" → PostgreSQL
from storefront.domain import storefront

storefront.init()

from storefront.web import create_app  # noqa: E402

app = create_app()
