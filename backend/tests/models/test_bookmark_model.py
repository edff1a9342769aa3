"""Tests for database-level invariants on the bookmarks table."""
import pytest
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.category import Category
from models.user import User


async def _insert(db_session: AsyncSession, bookmark: Bookmark) -> None:
    db_session.add(bookmark)
    await db_session.flush()


class TestBookmarkConstraints:
    """CHECK constraints backing the sparse-write rules."""

    async def test__thumb_without_image_rejected(
        self, db_session: AsyncSession, test_user: User,
    ) -> None:
        with pytest.raises(IntegrityError, match="ck_bookmarks_og_image_thumb_pair"):
            await _insert(
                db_session,
                Bookmark(
                    user_id=test_user.id,
                    url="https://e.com",
                    title="T",
                    og_image_url_thumb="/image-proxy?url=x&w=300&fmt=webp&q=75",
                ),
            )

    async def test__favicon_thumb_without_favicon_rejected(
        self, db_session: AsyncSession, test_user: User,
    ) -> None:
        with pytest.raises(IntegrityError, match="ck_bookmarks_favicon_thumb_pair"):
            await _insert(
                db_session,
                Bookmark(
                    user_id=test_user.id,
                    url="https://e.com",
                    title="T",
                    favicon_url_thumb="/image-proxy?url=x&w=32&fmt=webp&q=75",
                ),
            )

    async def test__default_media_type_rejected(
        self, db_session: AsyncSession, test_user: User,
    ) -> None:
        with pytest.raises(IntegrityError, match="ck_bookmarks_media_type_not_default"):
            await _insert(
                db_session,
                Bookmark(user_id=test_user.id, url="https://e.com", title="T", media_type="default"),
            )


class TestBookmarkRelationships:
    """Ownership and category links."""

    async def test__category_delete_uncategorizes_bookmark(
        self, db_session: AsyncSession, test_user: User,
    ) -> None:
        category = Category(user_id=test_user.id, title="Temp")
        db_session.add(category)
        await db_session.flush()
        bookmark = Bookmark(
            user_id=test_user.id, url="https://e.com", title="T", category_id=category.id,
        )
        await _insert(db_session, bookmark)

        await db_session.execute(delete(Category).where(Category.id == category.id))
        await db_session.refresh(bookmark)

        assert bookmark.category_id is None

    async def test__created_and_updated_at_set_by_database(
        self, db_session: AsyncSession, test_user: User,
    ) -> None:
        bookmark = Bookmark(user_id=test_user.id, url="https://e.com", title="T")
        await _insert(db_session, bookmark)
        await db_session.refresh(bookmark)

        assert bookmark.created_at is not None
        assert bookmark.updated_at is not None
        assert bookmark.id.version == 7
