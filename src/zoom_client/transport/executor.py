"""Single-request execution against the Zoom REST API.

``RequestExecutor`` is the boundary where exceptions stop: transport errors,
non-2xx responses and undecodable bodies are raised internally as
``ZoomError`` subclasses and turned into ``Failure`` envelopes here.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from zoom_client.errors.exceptions import RequestBuildError, ResponseDecodeError, TransportError, ZoomError
from zoom_client.errors.handler import raise_for_status
from zoom_client.result import Failure, Result, Success

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong"

QueryParams = Sequence[tuple[str, Any]]


@dataclass(frozen=True)
class RequestSpec:
    """Description of one API request.

    ``params`` is an ordered sequence of pairs rather than a mapping so that
    repeated keys (``channel_sources=voice&channel_sources=chat``) survive.
    ``path`` is relative to the API base URL.
    """

    method: str
    path: str
    params: QueryParams = field(default_factory=tuple)
    body: Any = None

    def with_params(self, extra: Iterable[tuple[str, Any]] | Mapping[str, Any]) -> "RequestSpec":
        """Return a copy with ``extra`` appended to the query parameters."""
        pairs = extra.items() if isinstance(extra, Mapping) else extra
        return replace(self, params=(*self.params, *pairs))


def decode_json(response: httpx.Response) -> Any:
    """Decode a response body, treating an empty body as ``None``.

    Raises:
        ResponseDecodeError: If the body is not valid JSON.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            f"Invalid JSON in HTTP {response.status_code} response: {e}",
            status_code=response.status_code,
            response=response,
        ) from e


class RequestExecutor:
    """Issue requests through an authenticated ``httpx.Client``.

    The client is expected to carry the base URL and the
    ``Authorization: Bearer`` / ``Content-Type: application/json`` headers.

    Example:
        ```python
        executor = RequestExecutor(http_client)
        result = executor.execute(RequestSpec("GET", "meetings/123"))
        ```
    """

    def __init__(self, client: httpx.Client):
        self._client = client

    def send(self, spec: RequestSpec) -> httpx.Response:
        """Send the request and return the raw response.

        Raises:
            TransportError: If no response was received.
            RequestBuildError: If the URL or JSON body cannot be encoded.
            APIError: Subclass matching a non-2xx status code.
        """
        logger.debug(f"{spec.method} {spec.path} params={list(spec.params)}")
        try:
            response = self._client.request(
                spec.method,
                spec.path,
                params=list(spec.params) or None,
                json=spec.body,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{spec.method} {spec.path} failed: {e}") from e
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError(f"{spec.method} {spec.path} could not be built: {e}") from e

        raise_for_status(response)
        return response

    def execute(self, spec: RequestSpec) -> Result:
        """Send the request and wrap the decoded body in an envelope."""
        try:
            response = self.send(spec)
            return Success(data=decode_json(response))
        except ZoomError as e:
            logger.warning(f"{spec.method} {spec.path} failed: {e}")
            return Failure(message=str(e))

    def execute_for_status(
        self,
        spec: RequestSpec,
        *,
        success_message: str,
        expected_status: int = 204,
    ) -> Result:
        """Send a request whose success is signalled by the status code alone.

        Returns ``Success(message=success_message)`` iff the response status is
        exactly ``expected_status``; any other successful status yields the
        generic failure message.
        """
        try:
            response = self.send(spec)
        except ZoomError as e:
            logger.warning(f"{spec.method} {spec.path} failed: {e}")
            return Failure(message=str(e))

        if response.status_code == expected_status:
            return Success(message=success_message)

        logger.warning(f"{spec.method} {spec.path} returned {response.status_code}, expected {expected_status}")
        return Failure(message=GENERIC_FAILURE_MESSAGE)
