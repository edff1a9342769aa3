"""Bookmark model for storing captured URLs with enrichment metadata."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.category import Category
    from models.user import User


class Bookmark(Base, UUIDv7Mixin, TimestampMixin):
    """
    Bookmark model - a saved URL plus resolved metadata.

    Thumbnail columns are derived from their full-resolution counterpart and are
    only ever written together with it. media_type is NULL for ordinary pages;
    the "default" media type is never stored.
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        CheckConstraint(
            "og_image_url_thumb IS NULL OR og_image_url IS NOT NULL",
            name="ck_bookmarks_og_image_thumb_pair",
        ),
        CheckConstraint(
            "favicon_url_thumb IS NULL OR favicon_url IS NOT NULL",
            name="ck_bookmarks_favicon_thumb_pair",
        ),
        CheckConstraint(
            "media_type IS NULL OR media_type <> 'default'",
            name="ck_bookmarks_media_type_not_default",
        ),
        # Composite index for the default listing order
        Index("ix_bookmarks_user_id_created_at", "user_id", "created_at"),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    og_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    og_image_url_thumb: Mapped[str | None] = mapped_column(Text, nullable=True)
    favicon_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    favicon_url_thumb: Mapped[str | None] = mapped_column(Text, nullable=True)

    media_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    media_embed_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    user: Mapped["User"] = relationship(back_populates="bookmarks")
    category: Mapped["Category | None"] = relationship(back_populates="bookmarks")
