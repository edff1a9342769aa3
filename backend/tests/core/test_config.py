"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from capture.config import ClientSettings
from core.config import Settings


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed correctly."""
        settings = Settings(
            _env_file=None,
            CORS_ORIGINS="http://localhost:3000,chrome-extension://abcdef",
        )
        assert settings.cors_origins == [
            "http://localhost:3000",
            "chrome-extension://abcdef",
        ]

    def test_parse_origins_with_whitespace_and_trailing_comma(self) -> None:
        """Whitespace is stripped and empty entries are dropped."""
        settings = Settings(
            _env_file=None,
            CORS_ORIGINS="  http://localhost:3000 , https://example.com  ,",
        )
        assert settings.cors_origins == [
            "http://localhost:3000",
            "https://example.com",
        ]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = Settings(_env_file=None, CORS_ORIGINS="")
        assert settings.cors_origins == []


class TestDevModeSecurity:
    """DEV_MODE is only accepted with a local database."""

    def test_dev_mode_with_remote_database_rejected(self) -> None:
        with pytest.raises(ValueError, match="DEV_MODE cannot be enabled"):
            Settings(
                _env_file=None,
                database_url="postgresql+asyncpg://db.prod.example.com/app",
                dev_mode=True,
            )

    @pytest.mark.parametrize("host", ["localhost", "127.0.0.1"])
    def test_dev_mode_with_local_database_allowed(self, host: str) -> None:
        settings = Settings(
            _env_file=None,
            database_url=f"postgresql+asyncpg://postgres@{host}:5432/app",
            dev_mode=True,
        )
        assert settings.dev_mode is True

    def test_remote_database_without_dev_mode_allowed(self) -> None:
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://db.prod.example.com/app",
            dev_mode=False,
        )
        assert settings.dev_mode is False


class TestThumbnailSettings:
    """Thumbnail preset configuration."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.og_image_thumb_width == 300
        assert settings.favicon_thumb_width == 32
        assert settings.thumbnail_quality == 75
        assert settings.image_proxy_path == "/image-proxy"

    @pytest.mark.parametrize("quality", [0, 101])
    def test_quality_out_of_range_rejected(self, quality: int) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, THUMBNAIL_QUALITY=quality)


class TestAuth0Urls:
    """Derived Auth0 URLs."""

    def test_issuer_and_jwks_url(self) -> None:
        settings = Settings(_env_file=None, AUTH0_DOMAIN="tenant.auth0.com")
        assert settings.auth0_issuer == "https://tenant.auth0.com/"
        assert settings.auth0_jwks_url == "https://tenant.auth0.com/.well-known/jwks.json"


class TestClientSettings:
    """Capture client configuration."""

    def test_base_url_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKMARKS_API_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("BOOKMARKS_DEBOUNCE_DELAY", "0.25")
        settings = ClientSettings(_env_file=None)
        assert settings.api_base_url == "https://api.example.com"
        assert settings.debounce_delay == 0.25

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BOOKMARKS_API_BASE_URL", raising=False)
        settings = ClientSettings(_env_file=None)
        assert settings.api_base_url == "http://localhost:8000"
        assert settings.request_timeout == 30.0
