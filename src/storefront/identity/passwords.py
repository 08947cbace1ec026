"""Password hashing and one-time token helpers."""

import hashlib
import secrets

from passlib.context import CryptContext

from storefront.config import get_settings

MIN_PASSWORD_LENGTH = 6

_contexts: dict[int, CryptContext] = {}


def _context() -> CryptContext:
    rounds = get_settings().bcrypt_rounds
    if rounds not in _contexts:
        _contexts[rounds] = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
    return _contexts[rounds]


def hash_password(password: str) -> str:
    return _context().hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    return _context().verify(password, password_hash)


def hash_token(raw_token: str) -> str:
    """Only digests of emailed tokens are stored."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_token() -> tuple[str, str]:
    """A fresh random token and the digest to persist for it."""
    raw = secrets.token_hex(32)
    return raw, hash_token(raw)
