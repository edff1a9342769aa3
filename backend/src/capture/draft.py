"""
Capture draft state and the rules both capture clients share.

The web form and the extension popup must agree on how resolved metadata is
merged into what the user typed and on which fields are sent when saving, so
those rules live here as pure functions over an immutable draft.
"""
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlparse

DEFAULT_MEDIA_TYPE = "default"
REQUIRED_FIELDS_MESSAGE = "Title and URL are required"


@dataclass(frozen=True)
class BookmarkDraft:
    """User-editable bookmark fields plus the resolver-owned imagery/media fields."""

    url: str = ""
    title: str = ""
    description: str = ""
    og_image_url: str = ""
    favicon_url: str = ""
    media_type: str = DEFAULT_MEDIA_TYPE
    media_embed_id: str = ""


EMPTY_DRAFT = BookmarkDraft()


def is_well_formed_url(url: str | None) -> bool:
    """Check that a URL is absolute http(s) with a host."""
    if not url or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def merge_metadata(draft: BookmarkDraft, metadata: Mapping[str, Any]) -> BookmarkDraft:
    """
    Merge resolved metadata into a draft without clobbering user text.

    title and description keep any non-blank text already in the draft.
    og_image_url, favicon_url, media_type, and media_embed_id are not user
    editable, so they always take the latest resolution's values.
    """
    return replace(
        draft,
        title=draft.title if draft.title.strip() else (metadata.get("title") or ""),
        description=(
            draft.description
            if draft.description.strip()
            else (metadata.get("description") or "")
        ),
        og_image_url=metadata.get("og_image_url") or "",
        favicon_url=metadata.get("favicon_url") or "",
        media_type=metadata.get("media_type") or DEFAULT_MEDIA_TYPE,
        media_embed_id=metadata.get("media_embed_id") or "",
    )


def validate_draft(draft: BookmarkDraft) -> str | None:
    """Return a validation message if the draft cannot be submitted."""
    if not draft.title.strip() or not draft.url.strip():
        return REQUIRED_FIELDS_MESSAGE
    return None


def to_create_payload(draft: BookmarkDraft) -> dict[str, str]:
    """
    Build the POST /bookmarks body for a draft.

    Optional fields are left out when empty, and media fields when the media
    type is the default, matching what the server would store anyway.
    """
    payload = {"title": draft.title.strip(), "url": draft.url.strip()}
    if draft.description.strip():
        payload["description"] = draft.description.strip()
    if draft.og_image_url:
        payload["og_image_url"] = draft.og_image_url
    if draft.favicon_url:
        payload["favicon_url"] = draft.favicon_url
    if draft.media_type and draft.media_type != DEFAULT_MEDIA_TYPE:
        payload["media_type"] = draft.media_type
        if draft.media_embed_id.strip():
            payload["media_embed_id"] = draft.media_embed_id.strip()
    return payload
