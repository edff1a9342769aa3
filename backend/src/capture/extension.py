"""Capture controller for the browser-extension popup."""
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from capture.api_client import BookmarksApiClient
from capture.draft import BookmarkDraft, merge_metadata, to_create_payload
from capture.errors import ApiError, AuthenticationError, TransportError

logger = logging.getLogger(__name__)

TAB_URL_ERROR = "Could not get current tab URL."
UNEXPECTED_ERROR = "An unexpected error occurred."
NO_DESCRIPTION = "No description available."

TabQuery = Callable[[], Awaitable[str | None]]


class PopupState(str, Enum):
    """Screens of the extension popup."""

    LOADING = "loading"
    LOGIN_REQUIRED = "login_required"
    FORM = "form"
    SUCCESS = "success"
    ERROR = "error"


class ExtensionCaptureCoordinator:
    """
    Single-shot capture flow for the active browser tab.

    activate() reads the tab URL, checks authentication, and resolves metadata
    exactly once; save() submits the bookmark. The preview is read-only apart
    from the notes field, which replaces the description when filled in.
    """

    def __init__(self, api: BookmarksApiClient, tab_query: TabQuery) -> None:
        self._api = api
        self._tab_query = tab_query

        self.state = PopupState.LOADING
        self.url = ""
        self.draft = BookmarkDraft()
        self.notes = ""
        self.is_saving = False
        self.error_message: str | None = None

    @property
    def preview_title(self) -> str:
        """Resolved title, or the page's host when none was found."""
        return self.draft.title or urlparse(self.url).hostname or self.url

    @property
    def preview_description(self) -> str:
        return self.draft.description or NO_DESCRIPTION

    @property
    def can_save(self) -> bool:
        return self.state == PopupState.FORM and not self.is_saving

    def _fail(self, message: str) -> None:
        self.state = PopupState.ERROR
        self.error_message = message

    async def activate(self) -> PopupState:
        """Run the popup's startup flow and return the resulting state."""
        self.state = PopupState.LOADING
        self.error_message = None

        try:
            tab_url = await self._tab_query()
        except Exception:
            logger.exception("Active tab query failed")
            tab_url = None
        if not tab_url:
            self._fail(TAB_URL_ERROR)
            return self.state
        self.url = tab_url

        try:
            await self._api.list_bookmarks()
        except AuthenticationError:
            self.state = PopupState.LOGIN_REQUIRED
            return self.state
        except (ApiError, TransportError) as e:
            logger.warning("Authentication check failed: %s", e)
            self._fail(UNEXPECTED_ERROR)
            return self.state

        metadata: dict[str, Any]
        try:
            metadata = await self._api.fetch_metadata(tab_url)
        except (ApiError, TransportError) as e:
            logger.warning("Metadata fetch failed for %s: %s", tab_url, e)
            metadata = {}

        self.draft = merge_metadata(BookmarkDraft(url=tab_url), metadata)
        self.state = PopupState.FORM
        return self.state

    def set_notes(self, notes: str) -> None:
        self.notes = notes

    def build_payload(self) -> dict[str, str]:
        """{url, title, description} where filled-in notes replace the description."""
        description = self.notes if self.notes.strip() else self.draft.description
        return to_create_payload(
            BookmarkDraft(url=self.url, title=self.preview_title, description=description),
        )

    async def save(self) -> bool:
        """
        Save the bookmark. On failure the server's message is kept in
        error_message and saving is re-enabled.
        """
        if not self.can_save:
            return False

        self.is_saving = True
        self.error_message = None
        try:
            await self._api.create_bookmark(self.build_payload())
        except (ApiError, TransportError) as e:
            self.error_message = e.message
            return False
        finally:
            self.is_saving = False

        self.state = PopupState.SUCCESS
        return True
