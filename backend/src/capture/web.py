"""Capture controller for the web app's add-bookmark form."""
import asyncio
import logging
from dataclasses import replace
from typing import Any

from capture.api_client import BookmarksApiClient
from capture.config import ClientSettings, get_client_settings
from capture.draft import (
    EMPTY_DRAFT,
    BookmarkDraft,
    is_well_formed_url,
    merge_metadata,
    to_create_payload,
    validate_draft,
)
from capture.errors import ApiError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_DELAY = 0.5


class WebCaptureCoordinator:
    """
    Drives the web capture form: debounced metadata resolution, merge, submit.

    URL edits restart a debounce timer; only the last timer resolves. Every
    resolution gets a sequence number and its result is merged only if it is
    still the latest one and the draft's URL has not changed since, so a slow
    response for an old URL can never overwrite newer metadata.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        api: BookmarksApiClient,
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
    ) -> None:
        self._api = api
        self._debounce_delay = debounce_delay
        self._debounce_task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._sequence = 0

        self.draft: BookmarkDraft = EMPTY_DRAFT
        self.is_open = False
        self.is_fetching = False
        self.is_submitting = False
        self.error: str | None = None
        self.last_created: dict[str, Any] | None = None

    @classmethod
    def from_settings(
        cls,
        api: BookmarksApiClient,
        settings: ClientSettings | None = None,
    ) -> "WebCaptureCoordinator":
        """Create a coordinator with the configured debounce delay."""
        settings = settings or get_client_settings()
        return cls(api, debounce_delay=settings.debounce_delay)

    def open(self) -> None:
        """Show the capture surface."""
        self.is_open = True

    def close(self) -> None:
        """Hide the capture surface; the draft is kept."""
        self.is_open = False

    def reset(self) -> None:
        """Clear the draft and drop any pending or in-flight resolution."""
        self._cancel_debounce()
        self._sequence += 1
        self.is_fetching = False
        self.draft = EMPTY_DRAFT
        self.error = None

    def set_title(self, title: str) -> None:
        self.draft = replace(self.draft, title=title)

    def set_description(self, description: str) -> None:
        self.draft = replace(self.draft, description=description)

    def set_url(self, url: str) -> None:
        """Update the URL and (re)start the debounce timer for resolving it."""
        self.draft = replace(self.draft, url=url)
        self._cancel_debounce()
        if url:
            self._debounce_task = asyncio.get_running_loop().create_task(self._debounce(url))

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self, url: str) -> None:
        await asyncio.sleep(self._debounce_delay)
        if not is_well_formed_url(url):
            # The user may still be typing
            return
        self._sequence += 1
        task = asyncio.get_running_loop().create_task(self._resolve(url, self._sequence))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _resolve(self, url: str, sequence: int) -> None:
        self.is_fetching = True
        try:
            metadata = await self._api.fetch_metadata(url)
        except (ApiError, TransportError) as e:
            logger.warning("Failed to fetch metadata for %s: %s", url, e)
            return
        finally:
            if sequence == self._sequence:
                self.is_fetching = False

        if sequence != self._sequence or self.draft.url != url:
            logger.debug("Discarding stale metadata for %s", url)
            return
        self.draft = merge_metadata(self.draft, metadata)

    async def wait_idle(self) -> None:
        """Wait until no debounce timer or resolution is outstanding."""
        while True:
            pending = [
                task
                for task in (self._debounce_task, *self._in_flight)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def submit(self) -> bool:
        """
        Save the draft as a new bookmark.

        Returns True on success, after which the draft is cleared and the form
        closed. On failure the message is left in `error` and the draft is kept
        so the user can retry. Returns False without sending anything while
        a previous submit is still in flight.
        """
        if self.is_submitting:
            return False

        message = validate_draft(self.draft)
        if message:
            self.error = message
            return False

        self.error = None
        self.is_submitting = True
        try:
            self.last_created = await self._api.create_bookmark(to_create_payload(self.draft))
        except (ApiError, TransportError) as e:
            self.error = e.message
            return False
        finally:
            self.is_submitting = False

        self.reset()
        self.close()
        return True

    async def aclose(self) -> None:
        """Cancel the debounce timer and wait for in-flight resolutions to finish."""
        self._cancel_debounce()
        await self.wait_idle()
