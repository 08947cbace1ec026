"""Environment-driven application settings.

Settings are read once and cached; tests call `reset_settings()` after
changing the environment.
"""

import os
from dataclasses import dataclass

from protean.exceptions import ConfigurationError

_TRUTHY = ("1", "true", "yes", "on")
_DEV_JWT_SECRET = "storefront-dev-secret"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    environment: str
    jwt_secret: str
    jwt_algorithm: str
    jwt_expire_days: int
    jwt_cookie_expire_days: int
    jwt_refresh_window_hours: int
    frontend_url: str
    email_backend: str
    email_host: str
    email_port: int
    email_user: str | None
    email_password: str | None
    email_from: str
    payment_gateway: str
    stripe_secret_key: str | None
    upload_backend: str
    upload_dir: str
    max_upload_bytes: int
    max_upload_files: int
    rate_limit_enabled: bool
    rate_limit_max: int
    rate_limit_window_seconds: int
    bcrypt_rounds: int
    wallet_delay_seconds: float
    verify_delay_seconds: float

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        origins = [self.frontend_url]
        if not self.is_production:
            origins.append("http://localhost:3000")
        return list(dict.fromkeys(origins))

    @classmethod
    def from_env(cls) -> "Settings":
        environment = os.getenv("PROTEAN_ENV", "development").lower()
        production = environment == "production"

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            if production:
                raise ConfigurationError("JWT_SECRET must be set when PROTEAN_ENV=production")
            jwt_secret = _DEV_JWT_SECRET

        return cls(
            environment=environment,
            jwt_secret=jwt_secret,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expire_days=int(os.getenv("JWT_EXPIRE_DAYS", "7")),
            jwt_cookie_expire_days=int(os.getenv("JWT_COOKIE_EXPIRE_DAYS", "7")),
            jwt_refresh_window_hours=int(os.getenv("JWT_REFRESH_WINDOW_HOURS", "24")),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/"),
            email_backend=os.getenv("EMAIL_BACKEND", "fake").lower(),
            email_host=os.getenv("EMAIL_HOST", "smtp.gmail.com"),
            email_port=int(os.getenv("EMAIL_PORT", "587")),
            email_user=os.getenv("EMAIL_USER"),
            email_password=os.getenv("EMAIL_PASS"),
            email_from=os.getenv("EMAIL_FROM", "Storefront <no-reply@storefront.local>"),
            payment_gateway=os.getenv("PAYMENT_GATEWAY", "fake").lower(),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY"),
            upload_backend=os.getenv("UPLOAD_BACKEND", "local").lower(),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
            max_upload_files=int(os.getenv("MAX_UPLOAD_FILES", "10")),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", "100" if production else "1000")),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            wallet_delay_seconds=float(os.getenv("WALLET_DELAY_SECONDS", "2")),
            verify_delay_seconds=float(os.getenv("VERIFY_DELAY_SECONDS", "1")),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
