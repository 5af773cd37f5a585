"""Error taxonomy and Zoom error body parsing."""

from zoom_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    RequestBuildError,
    ResponseDecodeError,
    RetryBudgetExceeded,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
    ZoomError,
)
from zoom_client.errors.handler import raise_for_status
from zoom_client.errors.models import ErrorBody

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ErrorBody",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "RequestBuildError",
    "ResponseDecodeError",
    "RetryBudgetExceeded",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "ZoomError",
    "raise_for_status",
]
