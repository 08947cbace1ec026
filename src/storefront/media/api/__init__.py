"""Media API package."""

from storefront.media.api.routes import upload_router

__all__ = ["upload_router"]
