"""Transport layer: request execution and the optional retry transport.

Modules:
    executor: ``RequestSpec`` and ``RequestExecutor`` (exceptions → envelopes)
    retry: ``RateLimitAwareRetry`` httpx transport
"""

from zoom_client.transport.executor import GENERIC_FAILURE_MESSAGE, RequestExecutor, RequestSpec, decode_json
from zoom_client.transport.retry import RateLimitAwareRetry

__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "RateLimitAwareRetry",
    "RequestExecutor",
    "RequestSpec",
    "decode_json",
]
