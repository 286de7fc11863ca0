"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds the variables listed in
.env.example and that the grouped configuration views are derived from it.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tatvivah.server.core.config import CORSConfig, EmailConfig, JWTConfig, RazorpayConfig, Settings

ACCESS_SECRET = "a" * 32
REFRESH_SECRET = "r" * 32


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


@pytest.fixture
def secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_ACCESS_SECRET", ACCESS_SECRET)
    monkeypatch.setenv("JWT_REFRESH_SECRET", REFRESH_SECRET)


def _settings() -> Settings:
    return Settings(_env_file=None)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_example_file_lists_required_keys(self, env_example_vars: dict[str, str]):
        for key in ("DATABASE_URL", "REDIS_URL", "JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET", "RAZORPAY_KEY_ID"):
            assert key in env_example_vars

    def test_server_binding(self, env_example_vars: dict[str, str], monkeypatch, secrets):
        monkeypatch.setenv("TATVIVAH_SERVER_HOST", env_example_vars["TATVIVAH_SERVER_HOST"])
        monkeypatch.setenv("TATVIVAH_SERVER_PORT", env_example_vars["TATVIVAH_SERVER_PORT"])

        settings = _settings()
        assert settings.server_host == env_example_vars["TATVIVAH_SERVER_HOST"]
        assert settings.server_port == int(env_example_vars["TATVIVAH_SERVER_PORT"])

    def test_database_url_binding(self, env_example_vars: dict[str, str], monkeypatch, secrets):
        monkeypatch.setenv("DATABASE_URL", env_example_vars["DATABASE_URL"])
        assert _settings().database_url == env_example_vars["DATABASE_URL"]

    def test_empty_redis_url_disables_cache(self, monkeypatch, secrets):
        monkeypatch.setenv("REDIS_URL", "")
        assert _settings().redis_url == ""

    def test_environment_binding(self, monkeypatch, secrets):
        monkeypatch.setenv("APP_ENV", "production")
        settings = _settings()
        assert settings.environment == "production"
        assert settings.is_production is True

    def test_short_jwt_secret_is_rejected(self, monkeypatch):
        monkeypatch.setenv("JWT_ACCESS_SECRET", "too-short")
        monkeypatch.setenv("JWT_REFRESH_SECRET", REFRESH_SECRET)
        with pytest.raises(ValidationError):
            _settings()

    def test_mock_email_flag(self, monkeypatch, secrets):
        monkeypatch.setenv("MOCK_EMAIL", "true")
        assert _settings().mock_email is True


class TestGroupedConfigs:
    def test_jwt_group(self, monkeypatch, secrets):
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "30m")
        jwt = _settings().jwt
        assert isinstance(jwt, JWTConfig)
        assert jwt.access_secret == ACCESS_SECRET
        assert jwt.refresh_secret == REFRESH_SECRET
        assert jwt.access_expiry == "30m"
        assert jwt.refresh_expiry == "7d"

    def test_email_group(self, monkeypatch, secrets):
        monkeypatch.setenv("RESEND_API_KEY", "re_123")
        monkeypatch.setenv("EMAIL_FROM", "orders@tatvivah.com")
        email = _settings().email
        assert isinstance(email, EmailConfig)
        assert (email.api_key, email.sender) == ("re_123", "orders@tatvivah.com")

    def test_razorpay_group(self, monkeypatch, secrets):
        monkeypatch.delenv("RAZORPAY_KEY_SECRET", raising=False)
        monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test")
        razorpay = _settings().razorpay
        assert isinstance(razorpay, RazorpayConfig)
        assert razorpay.configured is False

        monkeypatch.setenv("RAZORPAY_KEY_SECRET", "secret")
        assert _settings().razorpay.configured is True

    def test_cors_group_defaults(self, secrets):
        cors = _settings().cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["*"]
        assert cors.allow_credentials is True
