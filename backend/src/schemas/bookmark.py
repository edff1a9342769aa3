"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from core.config import get_settings

# Width of bookmarks.media_embed_id
MAX_MEDIA_EMBED_ID_LENGTH = 255


def validate_description_length(description: str | None) -> str | None:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if description is not None and len(description) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(description):,} characters).",
        )
    return description


def validate_title_length(title: str | None) -> str | None:
    """Validate that title doesn't exceed maximum length."""
    settings = get_settings()
    if title is not None and len(title.strip()) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(title.strip()):,} characters).",
        )
    return title


def validate_media_embed_id_length(media_embed_id: str | None) -> str | None:
    """Validate that the embed id fits its column."""
    if media_embed_id is not None and len(media_embed_id.strip()) > MAX_MEDIA_EMBED_ID_LENGTH:
        raise ValueError(
            f"Media embed id exceeds maximum length of {MAX_MEDIA_EMBED_ID_LENGTH} characters "
            f"(got {len(media_embed_id.strip()):,} characters).",
        )
    return media_embed_id


class BookmarkCreate(BaseModel):
    """
    Schema for creating a new bookmark.

    title and url are declared optional so that missing or blank values reach
    the service layer, which reports them as a field-specific 400. Unknown
    fields (including any client-supplied user_id) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    url: str | None = None
    description: str | None = None
    og_image_url: str | None = None
    favicon_url: str | None = None
    media_type: str | None = None
    media_embed_id: str | None = None
    category_id: UUID | None = None

    @field_validator("title")
    @classmethod
    def check_title_length(cls, v: str | None) -> str | None:
        """Validate title length."""
        return validate_title_length(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)

    @field_validator("media_embed_id")
    @classmethod
    def check_media_embed_id_length(cls, v: str | None) -> str | None:
        return validate_media_embed_id_length(v)


class CategoryResponse(BaseModel):
    """Category as embedded in bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses, joined with its category."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    description: str | None
    og_image_url: str | None
    og_image_url_thumb: str | None
    favicon_url: str | None
    favicon_url_thumb: str | None
    media_type: str | None
    media_embed_id: str | None
    category_id: UUID | None
    category: CategoryResponse | None
    created_at: datetime
    updated_at: datetime
