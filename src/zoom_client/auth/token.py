"""OAuth account-credentials token exchange.

Zoom server-to-server apps trade ``client_id:client_secret`` (HTTP Basic) plus
the account ID for a bearer token:

    POST https://zoom.us/oauth/token
    Authorization: Basic base64(client_id:client_secret)
    grant_type=account_credentials&account_id=<account_id>

The token is fetched once per client and never refreshed.
"""

import logging
from dataclasses import dataclass, field

import httpx

from zoom_client.auth.credentials import Credentials
from zoom_client.auth.exceptions import AuthError

logger = logging.getLogger(__name__)

DEFAULT_OAUTH_URL = "https://zoom.us/oauth/token"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token returned by the exchange."""

    value: str = field(repr=False)
    token_type: str = "bearer"
    expires_in: int | None = None
    scope: str | None = None

    def __str__(self) -> str:
        return self.value


class TokenProvider:
    """Exchange credentials for an access token.

    Args:
        oauth_url: Token endpoint (default: https://zoom.us/oauth/token)
        transport: Optional httpx transport, mainly for tests
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        oauth_url: str = DEFAULT_OAUTH_URL,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.oauth_url = oauth_url
        self._transport = transport
        self.timeout = timeout

    def fetch(self, credentials: Credentials) -> AccessToken:
        """Perform the exchange.

        Raises:
            AuthError: If the request fails, the response is not 2xx or not JSON,
                or the body has no ``access_token``.
        """
        logger.debug(f"Requesting access token for account {credentials.account_id} from {self.oauth_url}")

        client = httpx.Client(transport=self._transport, timeout=self.timeout)
        try:
            response = client.post(
                self.oauth_url,
                auth=httpx.BasicAuth(credentials.client_id, credentials.client_secret),
                data={"grant_type": "account_credentials", "account_id": credentials.account_id},
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Token exchange failed: {e}") from e
        finally:
            # A caller-supplied transport is shared with the API client and must stay open
            if self._transport is None:
                client.close()

        if not response.is_success:
            raise AuthError(
                f"Token exchange failed with HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                response=response,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise AuthError(
                "Token exchange returned a non-JSON body", status_code=response.status_code, response=response
            ) from e

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            raise AuthError(
                "Token exchange response has no access_token", status_code=response.status_code, response=response
            )

        logger.debug(f"Obtained access token (***), expires in {body.get('expires_in')}s")
        return AccessToken(
            value=access_token,
            token_type=body.get("token_type", "bearer"),
            expires_in=body.get("expires_in"),
            scope=body.get("scope"),
        )
