"""Testing utilities for code built on zoom_client.

Provides canned credentials, responses and an ``httpx.MockTransport`` router
that answers the token exchange and lets tests script API responses.

Example:
    ```python
    from zoom_client import ZoomClient
    from zoom_client.testing import MOCK_CREDENTIALS, ZoomMockRouter, create_page_response

    router = ZoomMockRouter()
    router.add("GET", "/v2/contact_center/queues", create_page_response("queues", [{"queue_id": "q1"}]))

    client = ZoomClient(**MOCK_CREDENTIALS, transport=router.transport())
    assert client.get_contact_center_queues().data == [{"queue_id": "q1"}]
    ```
"""

from collections import defaultdict, deque
from collections.abc import Callable, Iterable
from typing import Any

import httpx

MOCK_CREDENTIALS = {
    "account_id": "test-account-id",
    "client_id": "test-client-id",
    "client_secret": "test-client-secret",
}

MOCK_ACCESS_TOKEN = "test-access-token"

Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]


def create_token_response(access_token: str = MOCK_ACCESS_TOKEN, expires_in: int = 3600) -> httpx.Response:
    """Successful OAuth token response."""
    return httpx.Response(
        200,
        json={
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": expires_in,
            "scope": "meeting:read meeting:write",
        },
    )


def create_page_response(
    result_key: str | None,
    items: list[Any],
    next_page_token: str | None = "",
    **extra: Any,
) -> httpx.Response:
    """One page of a list endpoint. ``next_page_token=None`` omits the field."""
    body: dict[str, Any] = dict(extra)
    if result_key is not None:
        body[result_key] = items
    if next_page_token is not None:
        body["next_page_token"] = next_page_token
    return httpx.Response(200, json=body)


def create_error_response(status_code: int, message: str = "Error", code: int | None = None) -> httpx.Response:
    """Zoom-style error response (``{"code": ..., "message": ...}``)."""
    return httpx.Response(status_code, json={"code": code if code is not None else status_code, "message": message})


class ZoomMockRouter:
    """Route requests by method and path to scripted responses.

    Responses registered for the same route are served in order; the last
    one repeats once the queue is down to a single entry. A responder may be
    a callable taking the request, which lets tests raise transport errors.
    Every handled request is recorded in ``requests``.
    """

    def __init__(self, token_response: httpx.Response | None = None):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], deque[Responder]] = defaultdict(deque)
        self.add("POST", "/oauth/token", token_response or create_token_response())

    def add(self, method: str, path: str, *responses: Responder) -> "ZoomMockRouter":
        self._routes[(method.upper(), path)].extend(responses)
        return self

    def requests_for(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"code": 404, "message": f"No mock for {request.method} {request.url.path}"})

        responder = queue.popleft() if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        # Fresh copy so a repeated response is never shared between requests
        return httpx.Response(responder.status_code, headers=responder.headers, content=responder.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def query_values(request: httpx.Request, key: str) -> list[str]:
    """All values of a (possibly repeated) query parameter."""
    return request.url.params.get_list(key)


def paths(requests: Iterable[httpx.Request]) -> list[str]:
    return [r.url.path for r in requests]


__all__ = [
    "MOCK_ACCESS_TOKEN",
    "MOCK_CREDENTIALS",
    "ZoomMockRouter",
    "create_error_response",
    "create_page_response",
    "create_token_response",
    "paths",
    "query_values",
]
