"""FastAPI dependencies for injection."""
from fastapi import Depends

from core.auth import get_current_user
from core.config import Settings, get_settings
from db.session import get_async_session
from services.thumbnails import ThumbnailPresets


def get_thumbnail_presets(settings: Settings = Depends(get_settings)) -> ThumbnailPresets:
    """Thumbnail widths/quality/proxy path from configuration."""
    return ThumbnailPresets(
        og_image_width=settings.og_image_thumb_width,
        favicon_width=settings.favicon_thumb_width,
        quality=settings.thumbnail_quality,
        proxy_path=settings.image_proxy_path,
    )


__all__ = [
    "get_async_session",
    "get_current_user",
    "get_settings",
    "get_thumbnail_presets",
]
