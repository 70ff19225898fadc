"""
Configuration management for the dive center admin client.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScubaAdminConfig(BaseSettings):
    """Configuration settings for the dive center admin client."""

    # API Configuration
    api_base_url: str = Field(default="http://localhost:8000", alias="API_BASE_URL")
    api_email: Optional[str] = Field(default=None, alias="API_EMAIL")
    api_password: Optional[str] = Field(default=None, alias="API_PASSWORD")
    request_timeout: float = Field(default=15.0, alias="REQUEST_TIMEOUT")

    # Session persistence
    session_file: str = Field(
        default=str(Path.home() / ".scuba_admin" / "session.json"),
        alias="SESSION_FILE",
    )

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Processing Configuration
    default_per_page: int = Field(default=20, alias="DEFAULT_PER_PAGE")
    bulk_concurrency: int = Field(default=4, alias="BULK_CONCURRENCY")
    max_retries: int = Field(default=3, alias="MAX_RETRIES")
    retry_delay: float = Field(default=1.0, alias="RETRY_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Ensure the API URL is http(s) and has no trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("bulk_concurrency", "default_per_page")
    @classmethod
    def validate_positive(cls, v, info):
        """Ensure counts used for paging and fan-out are at least 1."""
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return v

    def has_credentials(self) -> bool:
        """Whether both login credentials are configured."""
        return bool(self.api_email and self.api_password)


def load_config(env_file: Optional[str] = None) -> ScubaAdminConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return ScubaAdminConfig()


# Global configuration instance
_config: Optional[ScubaAdminConfig] = None


def get_config() -> ScubaAdminConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> ScubaAdminConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
