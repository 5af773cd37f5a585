"""Error handling utilities for HTTP responses."""

import httpx

from zoom_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from zoom_client.errors.models import ErrorBody


def raise_for_status(response: httpx.Response) -> None:
    """Raise appropriate exception for HTTP error responses.

    Parses the Zoom error body if present, otherwise uses standard
    HTTP status code to exception mapping.

    Args:
        response: HTTP response object

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    error_body = ErrorBody.from_response(response)

    status_code = response.status_code

    exception_map = {
        400: BadRequestError,
        401: UnauthorizedError,
        403: ForbiddenError,
        404: NotFoundError,
        409: ConflictError,
        422: ValidationError,
        429: RateLimitError,
    }

    if status_code in exception_map:
        exc_class = exception_map[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    if error_body:
        message = f"HTTP {status_code}: {error_body.to_exception_message()}"
    else:
        response_text = response.text[:200]
        message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    if exc_class == RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        raise exc_class(
            message=message,
            retry_after=retry_after,
            status_code=status_code,
            response=response,
            error_body=error_body,
        )

    if exc_class == ValidationError:
        validation_errors = error_body.errors if error_body else None
        raise exc_class(
            message=message,
            validation_errors=validation_errors,
            status_code=status_code,
            response=response,
            error_body=error_body,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        error_body=error_body,
    )
