"""Bookmark capture and listing endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user, get_thumbnail_presets
from models.user import User
from schemas.bookmark import BookmarkCreate, BookmarkResponse
from services import bookmark_service
from services.exceptions import BookmarkValidationError, StorageError
from services.thumbnails import ThumbnailPresets

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    thumbnails: ThumbnailPresets = Depends(get_thumbnail_presets),
) -> BookmarkResponse:
    """
    Create a new bookmark.

    Only non-empty optional fields are stored; thumbnail URLs are derived from
    og_image_url and favicon_url. The owner is always the authenticated user.
    """
    try:
        bookmark = await bookmark_service.create_bookmark(
            db, current_user.id, data, thumbnails,
        )
    except BookmarkValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e) or "Failed to create bookmark")
    return BookmarkResponse.model_validate(bookmark)


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    category: str | None = Query(default=None, description="Only bookmarks in this category"),
    sort_by: str | None = Query(default=None, description="created_at (default), updated_at, or title"),  # noqa: E501
    sort_order: str | None = Query(default=None, description="asc or desc (default)"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """
    List the current user's bookmarks with their categories.

    - **category**: Restrict to one category id
    - **sort_by**: created_at (default), updated_at, or title; unknown values use the default
    - **sort_order**: asc or desc (default); unknown values use the default
    """
    category_id: UUID | None = None
    if category:
        try:
            category_id = UUID(category)
        except ValueError:
            # No bookmark can belong to a malformed category id
            return []

    try:
        bookmarks = await bookmark_service.list_bookmarks(
            db=db,
            user_id=current_user.id,
            category_id=category_id,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e) or "Failed to list bookmarks")
    return [BookmarkResponse.model_validate(b) for b in bookmarks]
