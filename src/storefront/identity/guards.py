"""FastAPI dependencies that resolve the calling user.

A token is read from the `Authorization: Bearer` header first, then from
the `jwt` cookie. Cookie sessions close to expiry get a fresh token set on
the outgoing response.
"""

from fastapi import Depends, Request, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.tokens import (
    COOKIE_NAME,
    create_access_token,
    decode_access_token,
    expires_soon,
    set_session_cookie,
)
from storefront.identity.user import User
from storefront.shared.errors import AuthenticationError, PermissionDeniedError
from storefront.utils.logging import add_context


def _read_token(request: Request) -> tuple[str | None, bool]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None, False
    cookie = request.cookies.get(COOKIE_NAME)
    if cookie:
        return cookie, True
    return None, False


def _resolve(request: Request, response: Response) -> User:
    token, from_cookie = _read_token(request)
    if not token:
        raise AuthenticationError("Not authorized, no token")

    payload = decode_access_token(token)
    try:
        user = current_domain.repository_for(User).get(payload["sub"])
    except ObjectNotFoundError:
        raise AuthenticationError("User not found") from None

    if not user.is_active:
        raise AuthenticationError("Account has been deactivated")

    add_context(user_id=str(user.id))

    if from_cookie and expires_soon(payload):
        set_session_cookie(response, create_access_token(user.id))

    return user


async def current_user(request: Request, response: Response) -> User:
    return _resolve(request, response)


async def optional_user(request: Request, response: Response) -> User | None:
    """The caller if a valid session is present, otherwise None."""
    try:
        return _resolve(request, response)
    except AuthenticationError:
        return None


async def admin_user(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Not authorized as an admin")
    return user
