"""Unit tests for settings loading."""

import pytest

from tickify.config import Settings, get_settings
from tickify.errors import ConfigError


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for Settings."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-env")
        monkeypatch.setenv("JWT_EXPIRATION_TIME", "120")
        monkeypatch.setenv("PORT", "9000")

        settings = get_settings()

        assert settings.jwt_secret == "from-env"
        assert settings.jwt_expiration_time == 120
        assert settings.port == 9000

    def test_settings_cached(self):
        assert get_settings() is get_settings()

    def test_malformed_value_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("JWT_EXPIRATION_TIME", "one hour")
        with pytest.raises(ConfigError):
            get_settings()

    def test_cors_origins_list(self):
        settings = Settings(cors_allow_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("JWT_EXPIRATION_TIME", raising=False)
        settings = Settings(_env_file=None)
        assert settings.api_prefix == "/api/v1"
        assert settings.jwt_expiration_time is None
        assert settings.run_migrations_on_startup is False
