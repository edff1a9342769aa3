"""Service layer for bookmark persistence: sparse-write inserts and listing."""
import logging
from typing import Any, Literal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.bookmark import Bookmark
from models.category import Category
from schemas.bookmark import BookmarkCreate
from services.exceptions import BookmarkValidationError, StorageError
from services.media_detector import MediaType
from services.thumbnails import ThumbnailPresets

logger = logging.getLogger(__name__)

SortField = Literal["created_at", "updated_at", "title"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("created_at", "updated_at", "title")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")
DEFAULT_SORT_BY: SortField = "created_at"
DEFAULT_SORT_ORDER: SortOrder = "desc"

_MEDIA_TYPES = {media_type.value for media_type in MediaType}


def normalize_sort(sort_by: str | None, sort_order: str | None) -> tuple[SortField, SortOrder]:
    """
    Normalize sort parameters, falling back to defaults for unrecognized values.

    Invalid sort input is never an error: anything outside the allowed fields or
    directions becomes created_at / desc.
    """
    field = sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_BY
    order = sort_order if sort_order in SORT_ORDERS else DEFAULT_SORT_ORDER
    return field, order  # type: ignore[return-value]


def _stripped(value: str | None) -> str:
    return value.strip() if value else ""


def build_insert_values(
    user_id: UUID,
    data: BookmarkCreate,
    thumbnails: ThumbnailPresets,
) -> dict[str, Any]:
    """
    Build the column values for a new bookmark row (sparse-write policy).

    Pure function with no I/O. Required fields are trimmed and validated; every
    optional field is included only when it has a non-empty value, so absent
    input is omitted rather than written as NULL or "":

    - description: trimmed, omitted when blank
    - og_image_url / favicon_url: each written together with its derived
      thumbnail URL, or neither is written
    - media_type: omitted when absent or "default"
    - media_embed_id: only written alongside a non-default media_type

    user_id always comes from the authenticated caller.

    Raises:
        BookmarkValidationError: If title or url is missing/blank, or media_type
            is not a known provider.
    """
    title = _stripped(data.title)
    url = _stripped(data.url)
    if not title:
        raise BookmarkValidationError("title", "Title is required")
    if not url:
        raise BookmarkValidationError("url", "URL is required")

    values: dict[str, Any] = {"user_id": user_id, "title": title, "url": url}

    description = _stripped(data.description)
    if description:
        values["description"] = description

    og_image_url = _stripped(data.og_image_url)
    if og_image_url:
        values["og_image_url"] = og_image_url
        values["og_image_url_thumb"] = thumbnails.og_image(og_image_url)

    favicon_url = _stripped(data.favicon_url)
    if favicon_url:
        values["favicon_url"] = favicon_url
        values["favicon_url_thumb"] = thumbnails.favicon(favicon_url)

    media_type = _stripped(data.media_type).lower()
    if media_type and media_type not in _MEDIA_TYPES:
        raise BookmarkValidationError("media_type", f"Unsupported media type: '{media_type}'")
    if media_type and media_type != MediaType.DEFAULT.value:
        values["media_type"] = media_type
        media_embed_id = _stripped(data.media_embed_id)
        if media_embed_id:
            values["media_embed_id"] = media_embed_id

    if data.category_id is not None:
        values["category_id"] = data.category_id

    return values


async def _category_owned_by(db: AsyncSession, user_id: UUID, category_id: UUID) -> bool:
    result = await db.execute(
        select(Category.id).where(Category.id == category_id, Category.user_id == user_id),
    )
    return result.scalar_one_or_none() is not None


async def create_bookmark(
    db: AsyncSession,
    user_id: UUID,
    data: BookmarkCreate,
    thumbnails: ThumbnailPresets,
) -> Bookmark:
    """
    Create a new bookmark for a user.

    Saves exactly what is provided (after trimming and the sparse-write policy);
    no URL scraping happens here. Duplicate URLs for the same user are allowed.

    Args:
        db: Database session.
        user_id: Authenticated user's ID; never taken from the request body.
        data: Bookmark creation data.
        thumbnails: Presets used to derive thumbnail URLs.

    Returns:
        The created bookmark with id, timestamps, and category loaded.

    Raises:
        BookmarkValidationError: If required fields are blank or the category
            does not belong to the user.
        StorageError: If the database rejects the insert.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    values = build_insert_values(user_id, data, thumbnails)

    try:
        if data.category_id is not None and not await _category_owned_by(
            db, user_id, data.category_id,
        ):
            raise BookmarkValidationError("category_id", "Category not found")

        bookmark = Bookmark(**values)
        db.add(bookmark)
        await db.flush()
        await db.refresh(bookmark)
        await db.refresh(bookmark, attribute_names=["category"])
    except SQLAlchemyError as e:
        logger.exception("Bookmark insert failed for user %s", user_id)
        raise StorageError(str(getattr(e, "orig", None) or e)) from e
    return bookmark


async def list_bookmarks(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID | None = None,
    sort_by: str | None = DEFAULT_SORT_BY,
    sort_order: str | None = DEFAULT_SORT_ORDER,
) -> list[Bookmark]:
    """
    List all bookmarks owned by a user, joined with their category.

    Args:
        db: Database session.
        user_id: User ID to scope bookmarks.
        category_id: Restrict to one category when given.
        sort_by: created_at, updated_at, or title; anything else means created_at.
        sort_order: asc or desc; anything else means desc.

    Returns:
        Bookmarks in the requested order (id breaks ties).

    Raises:
        StorageError: If the query fails.
    """
    field, order = normalize_sort(sort_by, sort_order)

    query = (
        select(Bookmark)
        .options(selectinload(Bookmark.category))
        .where(Bookmark.user_id == user_id)
    )
    if category_id is not None:
        query = query.where(Bookmark.category_id == category_id)

    sort_columns = {
        "created_at": Bookmark.created_at,
        "updated_at": Bookmark.updated_at,
        "title": Bookmark.title,
    }
    sort_column = sort_columns[field]
    if order == "desc":
        query = query.order_by(sort_column.desc(), Bookmark.id.desc())
    else:
        query = query.order_by(sort_column.asc(), Bookmark.id.asc())

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.exception("Bookmark listing failed for user %s", user_id)
        raise StorageError(str(getattr(e, "orig", None) or e)) from e
    return list(result.scalars().all())
