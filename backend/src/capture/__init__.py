"""Capture clients for the Bookmarks API (web form and browser extension)."""

from .api_client import BookmarksApiClient
from .draft import BookmarkDraft, merge_metadata, to_create_payload
from .errors import ApiError, AuthenticationError, StorageError, TransportError, ValidationError
from .extension import ExtensionCaptureCoordinator, PopupState
from .web import WebCaptureCoordinator

__all__ = [
    "ApiError",
    "AuthenticationError",
    "BookmarkDraft",
    "BookmarksApiClient",
    "ExtensionCaptureCoordinator",
    "PopupState",
    "StorageError",
    "TransportError",
    "ValidationError",
    "WebCaptureCoordinator",
    "merge_metadata",
    "to_create_payload",
]
