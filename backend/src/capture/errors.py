"""Errors raised by the capture clients at the API boundary."""

TRANSPORT_ERROR_MESSAGE = "Could not reach the bookmarks service."
INVALID_RESPONSE_MESSAGE = "Invalid response from the bookmarks service"


class ApiError(Exception):
    """The API answered with an error status; message is the server's detail."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ValidationError(ApiError):
    """400: a required field is missing or blank."""

    pass


class AuthenticationError(ApiError):
    """401: no session, or the session has expired."""

    pass


class StorageError(ApiError):
    """5xx: the server could not read or write bookmarks."""

    pass


class TransportError(Exception):
    """The API itself could not be reached (network failure, timeout)."""

    def __init__(self, message: str = TRANSPORT_ERROR_MESSAGE) -> None:
        self.message = message
        super().__init__(message)
