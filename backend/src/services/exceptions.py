"""Shared exceptions for service layer operations."""


class BookmarkValidationError(Exception):
    """
    Raised when a bookmark candidate fails validation (e.g. a blank required field).

    The message is field-specific and safe to return to the caller.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class StorageError(Exception):
    """Raised when the database rejects or fails a read or write."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
