"""Zoom REST API client.

``ZoomClient`` resolves credentials, exchanges them for a bearer token once,
and exposes the meeting, user, SMS and contact-center operations. Every
operation returns a ``Success``/``Failure`` envelope; list endpoints are
backed by ``Paginator``.

Example:
    ```python
    from zoom_client import ZoomClient

    with ZoomClient() as zoom:
        result = zoom.end_meeting("85746065432")
        if not result.status:
            print(result.message)

        for page in zoom.get_engagements(from_="2024-01-01", to="2024-01-31"):
            for engagement in page.data["engagements"]:
                print(engagement["engagement_id"])
    ```
"""

import logging
import threading
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import httpx

from zoom_client.auth.credentials import CredentialResolver, CredentialSource
from zoom_client.auth.exceptions import AuthError
from zoom_client.auth.token import DEFAULT_OAUTH_URL, TokenProvider
from zoom_client.pagination import Paginator
from zoom_client.result import Failure, Result, Success
from zoom_client.transport.executor import RequestExecutor, RequestSpec
from zoom_client.transport.retry import RateLimitAwareRetry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.zoom.us/v2/"
DEFAULT_TIMEOUT = 30.0

BASE_URL_ENV = "ZOOM_API_BASE_URL"
OAUTH_URL_ENV = "ZOOM_OAUTH_URL"
TIMEOUT_ENV = "ZOOM_TIMEOUT"


class ZoomClient:
    """Client for the Zoom REST API.

    Credentials are resolved in this order: explicit arguments, the
    ``session`` credential source, then ``ZOOM_ACCOUNT_ID`` /
    ``ZOOM_CLIENT_ID`` / ``ZOOM_CLIENT_SECRET`` from the environment or ``.env``.

    Args:
        account_id: Zoom account ID
        client_id: Server-to-server OAuth app client ID
        client_secret: Server-to-server OAuth app client secret
        session: Credentials attached to the current authenticated session
        resolver: Resolver for credentials and settings (default: loads ``.env``)
        transport: httpx transport for both the token exchange and API calls
        base_url: API base URL (default: ``ZOOM_API_BASE_URL`` or https://api.zoom.us/v2/)
        oauth_url: Token endpoint (default: ``ZOOM_OAUTH_URL`` or https://zoom.us/oauth/token)
        timeout: Request timeout in seconds (default: ``ZOOM_TIMEOUT`` or 30)
        retry_rate_limits: Wrap the transport in ``RateLimitAwareRetry``

    Raises:
        CredentialNotFoundError: If a credential cannot be resolved.
        AuthError: If the token exchange fails.
    """

    def __init__(
        self,
        account_id: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        session: CredentialSource | None = None,
        resolver: CredentialResolver | None = None,
        transport: httpx.BaseTransport | None = None,
        base_url: str | None = None,
        oauth_url: str | None = None,
        timeout: float | None = None,
        retry_rate_limits: bool = False,
    ):
        resolver = resolver or CredentialResolver()
        self.credentials = resolver.resolve_credentials(
            account_id=account_id,
            client_id=client_id,
            client_secret=client_secret,
            session=session,
        )
        self.base_url = resolver.resolve(
            value=base_url, env_var_name=BASE_URL_ENV, default=DEFAULT_BASE_URL, mask_in_logs=False
        )
        oauth_url = resolver.resolve(
            value=oauth_url, env_var_name=OAUTH_URL_ENV, default=DEFAULT_OAUTH_URL, mask_in_logs=False
        )
        if timeout is None:
            timeout = float(
                resolver.resolve(env_var_name=TIMEOUT_ENV, default=str(DEFAULT_TIMEOUT), mask_in_logs=False)
            )

        owned_transport = None
        if retry_rate_limits:
            if transport is None:
                transport = owned_transport = httpx.HTTPTransport()
            transport = RateLimitAwareRetry(wrapped_transport=transport)

        try:
            self.access_token = TokenProvider(oauth_url, transport=transport, timeout=timeout).fetch(self.credentials)
        except AuthError:
            if owned_transport is not None:
                owned_transport.close()
            raise

        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.access_token.value}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self._executor = RequestExecutor(self._http)
        logger.debug(f"Zoom client ready for account {self.credentials.account_id} at {self.base_url}")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ZoomClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _paginate(
        self,
        path: str,
        *,
        page_size: int,
        result_key: str | None,
        params: Sequence[tuple[str, Any]] = (),
        start_token: str | None = None,
        cancel: threading.Event | None = None,
    ) -> Paginator:
        return Paginator(
            self._executor,
            RequestSpec("GET", path, params=tuple(params)),
            page_size=page_size,
            result_key=result_key,
            start_token=start_token,
            cancel=cancel,
        )

    # Contact center engagements

    def get_engagements(
        self,
        *,
        page_size: int = 100,
        next_page_token: str | None = None,
        timezone: str | None = None,
        from_: str | None = None,
        to: str | None = None,
        queue_id: str | None = None,
        user_id: str | None = None,
        consumer_number: str | None = None,
        direction: str | None = None,
        channel_sources: Sequence[str] | None = None,
        cancel: threading.Event | None = None,
    ) -> Paginator:
        """List engagements, one envelope per page holding the whole page body.

        https://developers.zoom.us/docs/api/contact-center/#tag/engagements/get/contact_center/engagements

        Args:
            page_size: Items per page (max 100)
            next_page_token: Cursor to resume from
            timezone: The call's timezone (default on Zoom's side: UTC)
            from_: Start date, yyyy-mm-dd or yyyy-MM-dd'T'HH:mm:ss'Z'
            to: End date, same formats as ``from_``
            queue_id: Restrict to one queue
            user_id: Restrict to one agent
            consumer_number: The customer's phone number
            direction: ``inbound`` or ``outbound``
            channel_sources: Sent as repeated ``channel_sources`` parameters
            cancel: Stops the walk before the next request once set
        """
        filters = {
            "timezone": timezone,
            "from": from_,
            "to": to,
            "queue_id": queue_id,
            "user_id": user_id,
            "consumer_number": consumer_number,
            "direction": direction,
        }
        params = [(key, value) for key, value in filters.items() if value not in (None, "")]
        params.extend(("channel_sources", source) for source in channel_sources or ())

        return self._paginate(
            "contact_center/engagements",
            page_size=page_size,
            result_key=None,
            params=params,
            start_token=next_page_token,
            cancel=cancel,
        )

    def get_engagement(self, engagement_id: str) -> Result:
        return self._executor.execute(RequestSpec("GET", f"contact_center/engagements/{engagement_id}"))

    def get_engagement_survey(self, engagement_id: str) -> Result:
        """Get an engagement's survey."""
        return self._executor.execute(RequestSpec("GET", f"contact_center/engagements/{engagement_id}/survey"))

    # Meetings

    def create_meeting(self, data: dict[str, Any]) -> Result:
        return self._executor.execute(RequestSpec("POST", "users/me/meetings", body=data))

    def update_meeting(self, meeting_id: str, data: dict[str, Any]) -> Result:
        return self._executor.execute(RequestSpec("PATCH", f"meetings/{meeting_id}", body=data))

    def get_meeting(self, meeting_id: str) -> Result:
        return self._executor.execute(RequestSpec("GET", f"meetings/{meeting_id}"))

    def get_all_meetings(self) -> Result:
        return self._executor.execute(RequestSpec("GET", "users/me/meetings"))

    def get_upcoming_meetings(self) -> Result:
        return self._executor.execute(RequestSpec("GET", "users/me/meetings", params=(("type", "upcoming"),)))

    def get_previous_meetings(self, now: datetime | None = None) -> Result:
        """Meetings from ``get_all_meetings`` whose start time lies before ``now``.

        Meetings without a ``start_time`` (recurring meetings with no fixed
        time) are skipped.
        """
        result = self.get_all_meetings()
        if isinstance(result, Failure):
            return result

        now = now or datetime.now(UTC)
        previous = []
        body = result.data if isinstance(result.data, dict) else {}
        for meeting in body.get("meetings") or []:
            start_time = meeting.get("start_time")
            if not start_time:
                continue
            try:
                started = datetime.fromisoformat(start_time)
            except (TypeError, ValueError):
                logger.warning(f"Skipping meeting {meeting.get('id')} with unparseable start_time {start_time!r}")
                continue
            if started.tzinfo is None:
                started = started.replace(tzinfo=UTC)
            if started < now:
                previous.append(meeting)

        return Success(data=previous)

    def reschedule_meeting(self, meeting_id: str, data: dict[str, Any]) -> Result:
        return self._executor.execute_for_status(
            RequestSpec("PATCH", f"meetings/{meeting_id}", body=data),
            success_message="Meeting Rescheduled Successfully",
        )

    def end_meeting(self, meeting_id: str) -> Result:
        return self._executor.execute_for_status(
            RequestSpec("PUT", f"meetings/{meeting_id}/status", body={"action": "end"}),
            success_message="Meeting Ended Successfully",
        )

    def delete_meeting(self, meeting_id: str) -> Result:
        return self._executor.execute_for_status(
            RequestSpec("DELETE", f"meetings/{meeting_id}"),
            success_message="Meeting Deleted Successfully",
        )

    def recover_meeting(self, meeting_id: str) -> Result:
        return self._executor.execute_for_status(
            RequestSpec("PUT", f"meetings/{meeting_id}/status", body={"action": "recover"}),
            success_message="Meeting Recovered Successfully",
        )

    # Users

    def get_users(self, page_size: int = 300, status: str = "active", page_number: int = 1) -> Result:
        """One page of users, summarised.

        Returns ``{current_page, profile, last_page, per_page, total}`` where
        ``profile`` is the first user on the page.
        """
        result = self._executor.execute(
            RequestSpec(
                "GET",
                "users",
                params=(("page_size", page_size), ("status", status), ("page_number", page_number)),
            )
        )
        if isinstance(result, Failure):
            return result

        body = result.data or {}
        users = body.get("users") or []
        return Success(
            data={
                "current_page": body.get("page_number"),
                "profile": users[0] if users else None,
                "last_page": body.get("page_count"),
                "per_page": body.get("page_size"),
                "total": body.get("total_records"),
            }
        )

    # Phone

    def send_sms_message(
        self,
        sender_user_id: str,
        sender_phone_number: str,
        recipient_phone_number: str,
        message: str,
        attachments: list[dict[str, Any]] | None = None,
    ) -> Result:
        body = {
            "sender": {"user_id": sender_user_id, "phone_number": sender_phone_number},
            "to_members": [{"phone_number": recipient_phone_number}],
            "message": message,
            "attachments": attachments or [],
        }
        return self._executor.execute(RequestSpec("POST", "phone/sms/messages", body=body))

    def iter_phone_call_queues(self, *, cancel: threading.Event | None = None) -> Paginator:
        """https://developers.zoom.us/docs/api/phone/#tag/call-queues/get/phone/call_queues"""
        return self._paginate("phone/call_queues", page_size=100, result_key="call_queues", cancel=cancel)

    def get_phone_call_queues(self) -> Result:
        return self.iter_phone_call_queues().collect()

    def iter_phone_call_queue_analytics(
        self, from_: str, to: str, *, cancel: threading.Event | None = None
    ) -> Paginator:
        """Call queue analytics between two GMT timestamps (yyyy-MM-dd'T'HH:mm:ss'Z').

        Zoom keeps at most two years of history. Each page yields only the
        ``call_queues`` list; page-level fields such as ``total_records`` and
        the ``from``/``to`` echo are dropped. Iterate
        ``Paginator(..., result_key=None)`` over the same path for whole bodies.
        """
        return self._paginate(
            "phone/call_queue_analytics",
            page_size=300,
            result_key="call_queues",
            params=(("from", from_), ("to", to)),
            cancel=cancel,
        )

    def get_phone_call_queue_analytics(self, from_: str, to: str) -> Result:
        return self.iter_phone_call_queue_analytics(from_, to).collect()

    # Contact center analytics and configuration

    def iter_historical_engagements(self, *, cancel: threading.Event | None = None) -> Paginator:
        """https://developers.zoom.us/docs/api/contact-center/#tag/reports-v2cx-analytics"""
        return self._paginate(
            "contact_center/analytics/dataset/historical/engagement",
            page_size=300,
            result_key="engagements",
            cancel=cancel,
        )

    def get_contact_center_analytics_dataset_historical_engagement(self) -> Result:
        return self.iter_historical_engagements().collect()

    def iter_contact_center_queues(self, *, cancel: threading.Event | None = None) -> Paginator:
        return self._paginate("contact_center/queues", page_size=300, result_key="queues", cancel=cancel)

    def get_contact_center_queues(self) -> Result:
        return self.iter_contact_center_queues().collect()

    def iter_contact_center_queue_agents(self, queue_id: str, *, cancel: threading.Event | None = None) -> Paginator:
        return self._paginate(
            f"contact_center/queues/{queue_id}/agents", page_size=300, result_key="agents", cancel=cancel
        )

    def get_contact_center_queue_agents(self, queue_id: str) -> Result:
        return self.iter_contact_center_queue_agents(queue_id).collect()

    def get_contact_center_queue_operating_hours(self, queue_id: str) -> Result:
        """A queue's operating hours.

        Only the first page is read; the cursor is stripped from the returned body.
        """
        result = self._executor.execute(
            RequestSpec("GET", f"contact_center/queues/{queue_id}/operating_hours", params=(("page_size", 300),))
        )
        if isinstance(result, Failure) or not isinstance(result.data, dict):
            return result

        body = {key: value for key, value in result.data.items() if key != "next_page_token"}
        return Success(data=body)

    def iter_contact_center_business_hours(self, *, cancel: threading.Event | None = None) -> Paginator:
        return self._paginate(
            "contact_center/business_hours", page_size=300, result_key="business_hours", cancel=cancel
        )

    def get_contact_center_business_hours_list(self) -> Result:
        return self.iter_contact_center_business_hours().collect()

    def iter_contact_center_closures(self, *, cancel: threading.Event | None = None) -> Paginator:
        return self._paginate("contact_center/closures", page_size=300, result_key="closure_sets", cancel=cancel)

    def get_contact_center_closures_list(self) -> Result:
        return self.iter_contact_center_closures().collect()
