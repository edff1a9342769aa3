"""Metadata preview endpoint used by the capture clients."""
from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_settings
from core.config import Settings
from models.user import User
from schemas.metadata import FetchMetadataRequest, MetadataResponse
from services.url_scraper import resolve_metadata

router = APIRouter(tags=["metadata"])


@router.post("/fetch-metadata", response_model=MetadataResponse)
async def fetch_metadata(
    data: FetchMetadataRequest,
    _current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> MetadataResponse:
    """
    Resolve title, description, preview image, icon, and media info for a URL.

    Best-effort: unreachable or sparse pages return empty fields, never an error.
    Nothing is stored.
    """
    metadata = await resolve_metadata(data.url, timeout=settings.fetch_timeout)
    return MetadataResponse.from_resolved(metadata)
