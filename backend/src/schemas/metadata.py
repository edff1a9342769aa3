"""Pydantic schemas for the metadata preview endpoint."""
from pydantic import BaseModel

from services.url_scraper import ResolvedMetadata


class FetchMetadataRequest(BaseModel):
    """Request body for POST /fetch-metadata."""

    url: str


class MetadataResponse(BaseModel):
    """Best-effort metadata for a URL, using the bookmark field names."""

    title: str
    description: str
    og_image_url: str | None
    favicon_url: str | None
    media_type: str
    media_embed_id: str

    @classmethod
    def from_resolved(cls, metadata: ResolvedMetadata) -> "MetadataResponse":
        """Map resolver output onto the wire field names."""
        return cls(
            title=metadata.title,
            description=metadata.description,
            og_image_url=metadata.preview_image_url,
            favicon_url=metadata.icon_url,
            media_type=metadata.media_type,
            media_embed_id=metadata.media_embed_id,
        )
