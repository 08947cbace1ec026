"""Application errors that sit outside Protean's exception hierarchy, and the
FastAPI handlers that turn every error category into a JSON response."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Missing, invalid or expired credentials. Maps to 401."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)
        self.message = message


class PermissionDeniedError(Exception):
    """Authenticated but not allowed. Maps to 403."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(message)
        self.message = message


async def _authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": exc.message})


async def _permission_denied(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"detail": exc.message})


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc) or "Not found"})


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while processing request",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    """Domain exceptions through Protean, auth and catch-all handlers on top."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(AuthenticationError, _authentication_error)
    app.add_exception_handler(PermissionDeniedError, _permission_denied)
    app.add_exception_handler(Exception, _unhandled_error)
