class FluentHTTPError(Exception):
    """Base exception for the fluenthttp package."""


class HttpRequestException(FluentHTTPError):
    """Raised when the transport fails to complete a request."""

    def __init__(self, error: str = "") -> None:
        super().__init__(error)
        self.error = error


RequestError = HttpRequestException


class ResponseError(FluentHTTPError):
    """Raised when response content cannot be decoded."""


class HTTPStatusError(ResponseError):
    """
    Raised by ``HttpResponse.raise_for_status`` for a 4xx or 5xx response.
    The response stays reachable through ``.response``.
    """

    def __init__(self, response) -> None:
        self.response = response
        self.status_code = response.status_code
        reason = response.reason or "Unknown error"
        super().__init__(f"HTTP {self.status_code}: {reason} ({response.url})")
