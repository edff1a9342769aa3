"""Capture client configuration via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings shared by the web and extension capture clients."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKMARKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Points at the deployed API in production
    api_base_url: str = "http://localhost:8000"
    api_token: str = ""
    request_timeout: float = 30.0
    debounce_delay: float = 0.5


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
