"""Structured exceptions for Zoom API errors.

These exceptions are used inside the library. The request executor converts
transport and HTTP errors into ``Failure`` envelopes, so callers of the public
operations only ever see credential and authentication errors raised.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from zoom_client.errors.models import ErrorBody


class ZoomError(Exception):
    """Base exception for everything raised by zoom_client."""

    pass


class TransportError(ZoomError):
    """The request never produced an HTTP response (timeout, DNS, refused connection)."""

    pass


class APIError(ZoomError):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        error_body: "ErrorBody | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.error_body = error_body


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ValidationError(ClientError):
    """422 Unprocessable Entity (validation errors)."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass


class ResponseDecodeError(APIError):
    """A successful response whose body is not valid JSON."""

    pass


class RetryBudgetExceeded(ZoomError):
    """Raised by a pagination walk once its consecutive failure budget is spent."""

    def __init__(self, failures: int, max_errors: int):
        super().__init__(f"Pagination gave up after {failures} consecutive failures (budget {max_errors})")
        self.failures = failures
        self.max_errors = max_errors


class RequestBuildError(ZoomError):
    """The request could not be built (unencodable body, invalid URL)."""

    pass
