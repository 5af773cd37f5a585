"""Custom exceptions for credential resolution and authentication.

Credential and authentication failures are the only errors that escape
``ZoomClient`` construction; everything after that is reported through
result envelopes.

Example:
    ```python
    from zoom_client.auth.exceptions import CredentialNotFoundError

    if not client_id:
        raise CredentialNotFoundError("Client ID not found", env_var_name="ZOOM_CLIENT_ID")
    ```
"""

from typing import TYPE_CHECKING

from zoom_client.errors.exceptions import ZoomError

if TYPE_CHECKING:
    import httpx


class CredentialError(ZoomError):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
        missing: Names of every credential field that could not be resolved.

    Example:
        ```python
        try:
            credentials = resolver.resolve_credentials()
        except CredentialNotFoundError as e:
            print(f"Missing credentials: {', '.join(e.missing)}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None, missing: list[str] | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name
        self.missing = missing if missing is not None else []


class CredentialFileError(CredentialError):
    """Raised when credential file cannot be read.

    Example:
        ```python
        try:
            secret = resolver.resolve_from_file(file_path="~/.config/zoom/client_secret", required=True)
        except CredentialFileError as e:
            print(f"Cannot read credential file: {e}")
        ```
    """

    pass


class AuthError(CredentialError):
    """Raised when the OAuth account-credentials exchange fails.

    This is fatal to client construction: without a bearer token no
    API call can be made.

    Attributes:
        status_code: HTTP status of the token response, if one was received.
        response: The token response, if one was received.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
