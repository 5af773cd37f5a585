"""Cursor-following pagination with a bounded retry budget.

Zoom list endpoints return one page at a time together with an opaque
``next_page_token``. A missing or empty token means the last page was reached.

``Paginator`` walks such an endpoint lazily. Iterating it yields one
``Success`` envelope per page, in the vendor's order; a page is only requested
when the consumer asks for the next item, so abandoning the loop early is
always safe.

Failed requests are not yielded. The same cursor is retried immediately and
the failure is counted; once more than ``max_errors`` consecutive failures
pile up, the walk stops as if the data had run out. Consumers who need to
tell the two apart can look at ``termination`` afterwards:

    ```python
    pages = Paginator(executor, RequestSpec("GET", "contact_center/queues"), page_size=300, result_key="queues")
    for page in pages:
        handle(page.data)

    if pages.termination is Termination.ABORTED:
        log.error(pages.last_failure.message)
    ```

The ``collect()`` and ``last_page()`` helpers drive the same walk eagerly and
return a single envelope.
"""

import enum
import logging
import threading
from collections.abc import Iterator
from typing import Any

from zoom_client.errors.exceptions import RetryBudgetExceeded
from zoom_client.result import Failure, Result, Success
from zoom_client.transport.executor import RequestExecutor, RequestSpec

logger = logging.getLogger(__name__)

DEFAULT_MAX_ERRORS = 5

CANCELLED_MESSAGE = "Pagination cancelled"


class Termination(enum.Enum):
    """Why a pagination walk ended."""

    EXHAUSTED = "exhausted"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


class RetryBudget:
    """Counts consecutive failures of a single walk."""

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS):
        self.max_errors = max_errors
        self.failures = 0

    def record_failure(self) -> None:
        """Count a failure.

        Raises:
            RetryBudgetExceeded: Once the count goes past ``max_errors``.
        """
        self.failures += 1
        if self.failures > self.max_errors:
            raise RetryBudgetExceeded(self.failures, self.max_errors)

    def record_success(self) -> None:
        self.failures = 0


def next_cursor(body: Any) -> str | None:
    """Read ``next_page_token`` from a decoded page; empty and absent both mean ``None``."""
    if not isinstance(body, dict):
        return None
    return body.get("next_page_token") or None


class Paginator:
    """Lazy sequence of page envelopes for one list endpoint.

    Args:
        executor: Executor used for every page request
        spec: Base request; ``page_size`` and ``next_page_token`` are appended per page
        page_size: Number of items requested per page
        result_key: Body field holding the page's items. ``None`` yields the whole body.
        max_errors: Consecutive failures tolerated before the walk is abandoned
        start_token: Cursor to start from instead of the first page
        cancel: Checked before every request; once set the walk ends

    Attributes:
        termination: How the last walk ended, ``None`` while it is running
        error_count: Consecutive failures at the time the walk ended
        last_failure: The most recent failed envelope, if any
        pages_fetched: Number of envelopes yielded by the last walk
    """

    def __init__(
        self,
        executor: RequestExecutor,
        spec: RequestSpec,
        *,
        page_size: int,
        result_key: str | None = None,
        max_errors: int = DEFAULT_MAX_ERRORS,
        start_token: str | None = None,
        cancel: threading.Event | None = None,
    ):
        self._executor = executor
        self.spec = spec
        self.page_size = page_size
        self.result_key = result_key
        self.max_errors = max_errors
        self.start_token = start_token
        self.cancel = cancel

        self.termination: Termination | None = None
        self.error_count = 0
        self.last_failure: Failure | None = None
        self.pages_fetched = 0

    def __iter__(self) -> Iterator[Result]:
        return self._walk()

    def _page_spec(self, cursor: str | None) -> RequestSpec:
        params: list[tuple[str, Any]] = [("page_size", self.page_size)]
        if cursor:
            params.append(("next_page_token", cursor))
        return self.spec.with_params(params)

    def _items(self, body: Any) -> Any:
        if self.result_key is None:
            return body
        if isinstance(body, dict):
            return body.get(self.result_key) or []
        return []

    def _walk(self) -> Iterator[Result]:
        self.termination = None
        self.error_count = 0
        self.last_failure = None
        self.pages_fetched = 0

        budget = RetryBudget(self.max_errors)
        cursor = self.start_token or None

        while True:
            if self.cancel is not None and self.cancel.is_set():
                logger.debug(f"Pagination of {self.spec.path} cancelled after {self.pages_fetched} pages")
                self.termination = Termination.CANCELLED
                return

            result = self._executor.execute(self._page_spec(cursor))

            if isinstance(result, Failure):
                self.last_failure = result
                try:
                    budget.record_failure()
                except RetryBudgetExceeded as e:
                    logger.warning(f"Giving up on {self.spec.path}: {e}")
                    self.termination = Termination.ABORTED
                    return
                finally:
                    self.error_count = budget.failures
                logger.warning(
                    f"Page request for {self.spec.path} failed "
                    f"({budget.failures}/{self.max_errors}), retrying: {result.message}"
                )
                continue

            budget.record_success()
            self.error_count = 0
            body = result.data
            self.pages_fetched += 1
            yield Success(data=self._items(body))

            cursor = next_cursor(body)
            if cursor is None:
                self.termination = Termination.EXHAUSTED
                return

    def _unfinished(self) -> Failure | None:
        if self.termination is Termination.ABORTED:
            message = self.last_failure.message if self.last_failure else "Pagination aborted"
            return Failure(message=message)
        if self.termination is Termination.CANCELLED:
            return Failure(message=CANCELLED_MESSAGE)
        return None

    def collect(self) -> Result:
        """Walk every page and concatenate the items into one list.

        Returns:
            ``Success`` with all items, or ``Failure`` if the walk was aborted
            or cancelled before the last page, or a page held something other
            than a list under ``result_key``.

        Raises:
            ValueError: If the paginator has no ``result_key`` to collect.
        """
        if self.result_key is None:
            raise ValueError("collect() needs a result_key to know which items to concatenate")

        items: list[Any] = []
        for page in self:
            if not isinstance(page.data, list):
                message = f"Expected a list under '{self.result_key}', got {type(page.data).__name__}"
                logger.warning(f"Cannot collect {self.spec.path}: {message}")
                return Failure(message=message)
            items.extend(page.data)

        return self._unfinished() or Success(data=items)

    def last_page(self) -> Result:
        """Walk every page and return only the data of the final one."""
        data = None
        for page in self:
            data = page.data

        return self._unfinished() or Success(data=data)
