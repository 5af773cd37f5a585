"""Rate-limit aware retry transport.

Zoom enforces per-second and daily request limits and answers with
``429 Too Many Requests`` once they are hit. ``RateLimitAwareRetry`` wraps a
synchronous httpx transport and:

| Condition | Retried methods | Delay |
|-----------|-----------------|-------|
| 429 | all methods | ``Retry-After`` (seconds or HTTP-date), else exponential backoff |
| 502 / 503 / 504 | GET, HEAD, PUT, DELETE, OPTIONS, TRACE | exponential backoff |
| network errors | GET, HEAD, PUT, DELETE, OPTIONS, TRACE | exponential backoff |

Delays are capped at ``max_backoff``.

The transport is opt-in (``ZoomClient(retry_rate_limits=True)``). Without it
every failure reaches the paginator's retry budget directly.

```python
import httpx
from zoom_client.transport.retry import RateLimitAwareRetry

transport = RateLimitAwareRetry(
    wrapped_transport=httpx.HTTPTransport(),
    max_retries=5,
    max_backoff=60,
)

with httpx.Client(transport=transport) as client:
    response = client.get("https://api.zoom.us/v2/users/me")
```
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)


class RateLimitAwareRetry(httpx.BaseTransport):
    """Retry transport that handles rate limiting and server errors.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 5)
        backoff_factor: Multiplier for exponential backoff (default: 1.0)
        max_backoff: Maximum backoff time in seconds (default: 60)
        retry_5xx_status_codes: Set of 5xx codes to retry (default: 502, 503, 504)
        sleep: Function used to wait between attempts (default: time.sleep)
    """

    # Idempotent HTTP methods (per RFC 7231) - safe to retry on 5xx
    IDEMPOTENT_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "PUT", "DELETE", "OPTIONS", "TRACE"])

    DEFAULT_RETRY_5XX_STATUS_CODES: frozenset[int] = frozenset([502, 503, 504])

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        max_retries: int = 5,
        backoff_factor: float = 1.0,
        max_backoff: float = 60.0,
        retry_5xx_status_codes: frozenset[int] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.retry_5xx_status_codes = retry_5xx_status_codes or self.DEFAULT_RETRY_5XX_STATUS_CODES
        self._sleep = sleep

    def close(self) -> None:
        self._wrapped_transport.close()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Handle request with retry logic for rate limiting and server errors."""
        retries = 0

        while True:
            try:
                response = self._wrapped_transport.handle_request(request)
            except httpx.TransportError as e:
                # Network errors, timeouts, etc. - only retry idempotent methods
                if retries >= self.max_retries or request.method not in self.IDEMPOTENT_METHODS:
                    raise

                retries += 1
                delay = self._calculate_backoff_delay(retries)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e}, "
                    f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
                )
                self._sleep(delay)
                continue

            should_retry, delay = self._should_retry_with_delay(request, response, retries)
            if not should_retry:
                return response

            response.close()
            retries += 1
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            self._sleep(delay)

    def _should_retry_with_delay(
        self, request: httpx.Request, response: httpx.Response, current_retries: int
    ) -> tuple[bool, float]:
        """Determine if request should be retried and calculate delay.

        Returns:
            Tuple of (should_retry, delay_in_seconds)
        """
        if current_retries >= self.max_retries:
            return False, 0.0

        if response.status_code == 429:
            delay = self._parse_retry_after(response)
            if delay is None:
                delay = self._calculate_backoff_delay(current_retries + 1)
            return True, delay

        if response.status_code in self.retry_5xx_status_codes and request.method in self.IDEMPOTENT_METHODS:
            return True, self._calculate_backoff_delay(current_retries + 1)

        return False, 0.0

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse Retry-After header from response.

        Supports both formats:
        - Delay-seconds: "120" (integer seconds)
        - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

        Returns:
            Delay in seconds, or None if header is missing or invalid
        """
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = int(retry_after)
            if delay < 0:
                return None
            return float(min(delay, self.max_backoff))
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delay = (retry_date - datetime.now(UTC)).total_seconds()

            # Clock skew can put the date in the past
            if delay < 0:
                return None

            return float(min(delay, self.max_backoff))
        except (ValueError, TypeError):
            pass

        return None

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Exponential backoff: min(backoff_factor * 2 ** (retry_number - 1), max_backoff)."""
        delay = self.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.max_backoff)
