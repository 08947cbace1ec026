"""FastAPI application factory.

Every request under /api runs inside the storefront domain context, and
commands are processed synchronously.
"""

from datetime import UTC, datetime
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from storefront.cart.api import cart_router
from storefront.catalogue.api import category_router, product_router
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.identity.api import auth_router, user_router
from storefront.media.api import upload_router
from storefront.ordering.api import order_router
from storefront.payments.api import payment_router
from storefront.shared.errors import register_error_handlers
from storefront.utils.logging import add_context, clear_context
from storefront.utils.ratelimit import FixedWindowRateLimiter, RateLimitMiddleware

API_PREFIX = "/api"

_ROUTERS = (
    auth_router,
    user_router,
    product_router,
    category_router,
    cart_router,
    order_router,
    payment_router,
    upload_router,
)


def create_app(limiter: FixedWindowRateLimiter | None = None) -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Storefront API",
        description="Beauty and skincare storefront: catalog, cart, checkout and accounts",
    )

    app.add_middleware(RateLimitMiddleware, limiter=limiter, prefix=API_PREFIX)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for every API request."""
        if request.url.path.startswith(API_PREFIX):
            clear_context()
            add_context(request_id=uuid4().hex[:12], method=request.method, path=request.url.path)
            with storefront.domain_context():
                return await call_next(request)
        # Static uploads, docs
        return await call_next(request)

    register_error_handlers(app)

    for router in _ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get(f"{API_PREFIX}/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "environment": settings.environment,
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )

    @app.get(API_PREFIX)
    async def root():
        return JSONResponse(
            content={
                "name": "Storefront API",
                "domain": storefront.name,
                "endpoints": {router.prefix.strip("/"): f"{API_PREFIX}{router.prefix}" for router in _ROUTERS},
            }
        )

    return app
