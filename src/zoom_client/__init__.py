"""zoom-client - Zoom REST API client with cursor pagination and result envelopes.

This library provides:
- Multi-source credential resolution and the OAuth account-credentials exchange
- Meeting, user, SMS and contact-center operations returning ``Success``/``Failure``
- Lazy cursor pagination with a bounded retry budget
- Optional rate-limit aware retry transport
- Testing utilities

Example:
    ```python
    from zoom_client import ZoomClient

    zoom = ZoomClient(account_id="...", client_id="...", client_secret="...")
    result = zoom.get_meeting("85746065432")
    print(result.to_dict())
    ```
"""

from zoom_client.client import ZoomClient
from zoom_client.pagination import Paginator, Termination
from zoom_client.result import Failure, Result, Success

__version__ = "0.1.0"

__all__ = [
    "Failure",
    "Paginator",
    "Result",
    "Success",
    "Termination",
    "ZoomClient",
    "__version__",
]
