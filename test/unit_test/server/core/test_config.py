"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables using the
names documented in .env.example and that the grouped configuration models
are derived correctly.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from agrilink.server.core.config import CORSConfig, JWTConfig, Settings


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_every_documented_variable_is_bound(self, env_example_vars: dict[str, str]):
        aliases = {field.alias for field in Settings.model_fields.values()}

        assert set(env_example_vars) <= aliases

    def test_server_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("AGRILINK_SERVER_HOST", env_example_vars["AGRILINK_SERVER_HOST"])
        monkeypatch.setenv("AGRILINK_SERVER_PORT", "9100")
        monkeypatch.setenv("AGRILINK_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 9100
        assert settings.log_level == "DEBUG"

    def test_database_url_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("DATABASE_URL", env_example_vars["DATABASE_URL"])

        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("postgresql+asyncpg://")

    def test_checkout_binding(self, monkeypatch):
        monkeypatch.setenv("FREE_SHIPPING_THRESHOLD", "750")
        monkeypatch.setenv("FLAT_SHIPPING_COST", "25.50")
        monkeypatch.setenv("TAX_RATE", "0.18")

        settings = Settings(_env_file=None)

        assert settings.free_shipping_threshold == Decimal("750")
        assert settings.flat_shipping_cost == Decimal("25.50")
        assert settings.tax_rate == Decimal("0.18")

    def test_cors_list_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", env_example_vars["CORS_ORIGINS"])

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["http://localhost:3000"]


class TestSettingsDefaults:
    def test_defaults_without_environment(self, monkeypatch):
        for name in ("DATABASE_URL", "JWT_SECRET", "LOGFIRE_ENABLED", "AGRILINK_SERVER_PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.server_port == 8000
        assert settings.password_reset_expiry_minutes == 30
        assert settings.free_shipping_threshold == Decimal("500")
        assert settings.flat_shipping_cost == Decimal("40")
        assert settings.tax_rate == Decimal("0.05")
        assert settings.logfire_enabled is False
        assert settings.jwt_expiration_seconds == 86400


class TestGroupedConfigs:
    def test_jwt_config(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("JWT_EXPIRATION_SECONDS", "60")

        jwt = Settings(_env_file=None).jwt

        assert isinstance(jwt, JWTConfig)
        assert jwt.secret == "s3cret"
        assert jwt.algorithm == "HS256"
        assert jwt.expiration_seconds == 60

    def test_cors_config(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_CREDENTIALS", "false")

        cors = Settings(_env_file=None).cors

        assert isinstance(cors, CORSConfig)
        assert cors.allow_credentials is False
        assert cors.origins == ["*"]

    def test_cors_config_by_field_name(self):
        cors = CORSConfig(origins=["https://agrilink.example"])

        assert cors.origins == ["https://agrilink.example"]
