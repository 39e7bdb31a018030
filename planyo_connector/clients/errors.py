"""Exceptions raised by the Planyo API client."""

from typing import Optional


class PlanyoClientError(Exception):
    """Base exception for Planyo API client errors."""

    pass


class PlanyoEndpointError(PlanyoClientError):
    """Raised when a request URL cannot be built from the query parameters."""

    pass


class PlanyoTransportError(PlanyoClientError):
    """Raised when the HTTP round trip to Planyo fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PlanyoInvalidStatusError(PlanyoTransportError):
    """Raised when Planyo answers with a non-200 HTTP status."""

    def __init__(self, status_code: int):
        super().__init__(f"Unexpected HTTP status {status_code}", status_code=status_code)


class PlanyoTimeoutError(PlanyoTransportError):
    """Raised when a request exceeds the configured timeout."""

    pass


class PlanyoResponseTooLargeError(PlanyoTransportError):
    """Raised when a response body exceeds the allowed size."""

    pass


class PlanyoDecodeError(PlanyoClientError):
    """Raised when a response payload does not match the expected shape."""

    def __init__(self, message: str, payload: Optional[str] = None):
        super().__init__(message)
        self.payload = payload


class PlanyoRemoteError(PlanyoClientError):
    """Raised when Planyo understood the request but returned a non-zero response code."""

    def __init__(self, message: str, response_code: int):
        super().__init__(message)
        self.message = message
        self.response_code = response_code
