import pytest
from protean.exceptions import ConfigurationError

from storefront.config import Settings


class TestSettingsFromEnv:
    def test_development_defaults(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "development")
        for name in ("RATE_LIMIT_MAX", "FRONTEND_URL", "MAX_UPLOAD_BYTES", "RATE_LIMIT_ENABLED"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.is_production is False
        assert settings.rate_limit_enabled is True
        assert settings.rate_limit_max == 1000
        assert settings.rate_limit_window_seconds == 900
        assert settings.max_upload_bytes == 5 * 1024 * 1024
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_production_tightens_limits(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("FRONTEND_URL", "https://shop.example.com/")
        monkeypatch.setenv("JWT_SECRET", "s3cret-for-prod")
        monkeypatch.delenv("RATE_LIMIT_MAX", raising=False)

        settings = Settings.from_env()

        assert settings.is_production is True
        assert settings.rate_limit_max == 100
        assert settings.cors_origins == ["https://shop.example.com"]
        assert settings.jwt_secret == "s3cret-for-prod"

    @pytest.mark.parametrize("secret", [None, ""])
    def test_production_refuses_to_start_without_jwt_secret(self, monkeypatch, secret):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        if secret is None:
            monkeypatch.delenv("JWT_SECRET", raising=False)
        else:
            monkeypatch.setenv("JWT_SECRET", secret)

        with pytest.raises(ConfigurationError):
            Settings.from_env()

    def test_development_falls_back_to_a_local_secret(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "development")
        monkeypatch.delenv("JWT_SECRET", raising=False)

        assert Settings.from_env().jwt_secret == "storefront-dev-secret"

    def test_boolean_flags(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "off")
        assert Settings.from_env().rate_limit_enabled is False

        monkeypatch.setenv("RATE_LIMIT_ENABLED", "Yes")
        assert Settings.from_env().rate_limit_enabled is True
