"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from scuba_admin.config import ScubaAdminConfig, get_config, reload_config


class TestScubaAdminConfig:
    """Test ScubaAdminConfig settings."""

    def test_loads_from_environment(self, test_config):
        """Test values come from the environment."""
        assert test_config.api_base_url == "http://api.test"
        assert test_config.api_email == "staff@divecenter.test"
        assert test_config.environment == "testing"
        assert test_config.debug is True
        assert test_config.bulk_concurrency == 2

    def test_defaults(self, monkeypatch):
        """Test defaults when optional variables are missing."""
        for key in ("DEFAULT_PER_PAGE", "MAX_RETRIES", "REQUEST_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)

        config = ScubaAdminConfig()

        assert config.default_per_page == 20
        assert config.max_retries == 3
        assert config.request_timeout == 15.0

    def test_trailing_slash_is_stripped(self, monkeypatch):
        """Test base URL normalisation."""
        monkeypatch.setenv("API_BASE_URL", "https://admin.divecenter.test/")

        assert ScubaAdminConfig().api_base_url == "https://admin.divecenter.test"

    def test_rejects_url_without_scheme(self, monkeypatch):
        """Test invalid base URL raises error."""
        monkeypatch.setenv("API_BASE_URL", "admin.divecenter.test")

        with pytest.raises(ValidationError, match="http:// or https://"):
            ScubaAdminConfig()

    def test_rejects_invalid_log_level(self, monkeypatch):
        """Test invalid log level raises error."""
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError, match="Log level must be one of"):
            ScubaAdminConfig()

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "info")

        assert ScubaAdminConfig().log_level == "INFO"

    def test_rejects_invalid_environment(self, monkeypatch):
        """Test invalid environment raises error."""
        monkeypatch.setenv("ENVIRONMENT", "staging")

        with pytest.raises(ValidationError, match="Environment must be one of"):
            ScubaAdminConfig()

    def test_rejects_zero_concurrency(self, monkeypatch):
        """Test bulk concurrency must be positive."""
        monkeypatch.setenv("BULK_CONCURRENCY", "0")

        with pytest.raises(ValidationError, match="bulk_concurrency must be at least 1"):
            ScubaAdminConfig()

    def test_has_credentials(self, test_config, monkeypatch):
        """Test credential detection."""
        assert test_config.has_credentials() is True

        monkeypatch.delenv("API_PASSWORD")
        assert ScubaAdminConfig().has_credentials() is False


class TestGlobalConfig:
    """Test the cached global configuration."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config_picks_up_changes(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("DEFAULT_PER_PAGE", "50")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.default_per_page == 50
        assert get_config() is reloaded

    def test_reload_from_env_file(self, tmp_path, monkeypatch):
        """Test a named .env file is read."""
        monkeypatch.setenv("REQUEST_TIMEOUT", "1")
        monkeypatch.delenv("REQUEST_TIMEOUT")
        env_file = tmp_path / "custom.env"
        env_file.write_text("REQUEST_TIMEOUT=42\n")

        config = reload_config(str(env_file))

        assert config.request_timeout == 42.0
