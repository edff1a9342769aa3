"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.bookmark import Bookmark
from models.category import Category
from models.user import User

__all__ = [
    "Base",
    "Bookmark",
    "Category",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
]
