"""Signed session tokens (JWT) and the cookie that can carry them."""

from datetime import UTC, datetime, timedelta

from fastapi import Response
from jose import ExpiredSignatureError, JWTError, jwt

from storefront.config import get_settings
from storefront.shared.errors import AuthenticationError

COOKIE_NAME = "jwt"


def create_access_token(user_id: str, now: datetime | None = None) -> str:
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Return the token claims or raise `AuthenticationError`."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired, please log in again") from None
    except JWTError:
        raise AuthenticationError("Not authorized, token failed") from None

    if not payload.get("sub"):
        raise AuthenticationError("Not authorized, token failed")
    return payload


def expires_soon(payload: dict, now: datetime | None = None) -> bool:
    """True when the token expires inside the refresh window."""
    now = now or datetime.now(UTC)
    window = timedelta(hours=get_settings().jwt_refresh_window_hours)
    expires_at = datetime.fromtimestamp(payload["exp"], tz=UTC)
    return expires_at - now < window


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.jwt_cookie_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(key=COOKIE_NAME, httponly=True, secure=settings.is_production, samesite="strict")
