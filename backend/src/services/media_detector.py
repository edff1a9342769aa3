"""Embeddable media detection from bookmark URLs."""
import re
from dataclasses import dataclass
from enum import Enum


class MediaType(str, Enum):
    """Embeddable media providers. DEFAULT means an ordinary page."""

    DEFAULT = "default"
    YOUTUBE = "youtube"
    VIMEO = "vimeo"


@dataclass(frozen=True)
class MediaMatch:
    """Detected provider and its embed identifier."""

    media_type: MediaType
    embed_id: str


NO_MEDIA = MediaMatch(media_type=MediaType.DEFAULT, embed_id="")

# Patterns are matched against the URL itself, never the fetched page.
# Order matters: the first matching pattern wins.
_PATTERNS: list[tuple[MediaType, re.Pattern[str]]] = [
    (MediaType.YOUTUBE, re.compile(r"^https?://(?:www\.|m\.|music\.)?youtube\.com/watch\?(?:.*&)?v=(?P<id>[\w-]{6,})")),  # noqa: E501
    (MediaType.YOUTUBE, re.compile(r"^https?://youtu\.be/(?P<id>[\w-]{6,})")),
    (MediaType.YOUTUBE, re.compile(r"^https?://(?:www\.|m\.)?youtube(?:-nocookie)?\.com/(?:embed|shorts|v|live)/(?P<id>[\w-]{6,})")),  # noqa: E501
    (MediaType.VIMEO, re.compile(r"^https?://player\.vimeo\.com/video/(?P<id>\d+)")),
    (MediaType.VIMEO, re.compile(r"^https?://(?:www\.)?vimeo\.com/channels/[\w-]+/(?P<id>\d+)")),
    (MediaType.VIMEO, re.compile(r"^https?://(?:www\.)?vimeo\.com/groups/[\w-]+/videos/(?P<id>\d+)")),  # noqa: E501
    (MediaType.VIMEO, re.compile(r"^https?://(?:www\.)?vimeo\.com/(?P<id>\d+)")),
]


def detect_media(url: str | None) -> MediaMatch:
    """
    Detect an embeddable media provider from a URL.

    Args:
        url: The URL the user is bookmarking.

    Returns:
        MediaMatch with the provider and embed id, or NO_MEDIA.
    """
    if not url:
        return NO_MEDIA
    candidate = url.strip()
    for media_type, pattern in _PATTERNS:
        match = pattern.match(candidate)
        if match:
            return MediaMatch(media_type=media_type, embed_id=match.group("id"))
    return NO_MEDIA
