"""Thumbnail URL construction for the external image proxy."""
from dataclasses import dataclass
from urllib.parse import quote

IMAGE_PROXY_PATH = "/image-proxy"
THUMBNAIL_FORMAT = "webp"

# Characters left unescaped by JavaScript's encodeURIComponent (besides alphanumerics),
# so URLs built here match the ones the web client builds for the same image.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_thumbnail_url(
    source_url: str | None,
    width: int,
    quality: int,
    proxy_path: str = IMAGE_PROXY_PATH,
) -> str | None:
    """
    Build a relative image-proxy URL for a resized webp rendition of an image.

    Pure function with no I/O. Identical arguments always yield an identical
    string, which the proxy layer relies on as a cache key.

    Args:
        source_url: Full-resolution image URL. None or empty returns None.
        width: Target width in pixels (positive).
        quality: Encoder quality, 1-100.
        proxy_path: Path of the image proxy endpoint.

    Returns:
        The relative proxy URL, or None if there is no source image.

    Raises:
        ValueError: If width or quality are out of range.
    """
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise ValueError(f"width must be a positive integer (got {width!r})")
    if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
        raise ValueError(f"quality must be an integer between 1 and 100 (got {quality!r})")
    if not source_url:
        return None

    encoded = quote(source_url, safe=_URI_COMPONENT_SAFE)
    return f"{proxy_path}?url={encoded}&w={width}&fmt={THUMBNAIL_FORMAT}&q={quality}"


@dataclass(frozen=True)
class ThumbnailPresets:
    """Widths and quality used when deriving stored thumbnail URLs."""

    og_image_width: int = 300
    favicon_width: int = 32
    quality: int = 75
    proxy_path: str = IMAGE_PROXY_PATH

    def og_image(self, source_url: str | None) -> str | None:
        """Thumbnail for a preview image."""
        return build_thumbnail_url(source_url, self.og_image_width, self.quality, self.proxy_path)

    def favicon(self, source_url: str | None) -> str | None:
        """Thumbnail for a site icon."""
        return build_thumbnail_url(source_url, self.favicon_width, self.quality, self.proxy_path)
