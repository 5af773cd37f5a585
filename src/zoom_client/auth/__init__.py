"""Authentication components for the Zoom client.

This module provides:
- Multi-source credential resolution (value → session → env → .env → default)
- The OAuth account-credentials token exchange

Example:
    ```python
    from zoom_client.auth import CredentialResolver, TokenProvider

    credentials = CredentialResolver().resolve_credentials()
    token = TokenProvider().fetch(credentials)
    ```
"""

from zoom_client.auth.credentials import (
    CredentialResolver,
    Credentials,
    CredentialSource,
    MappingCredentialSource,
)
from zoom_client.auth.exceptions import (
    AuthError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from zoom_client.auth.token import AccessToken, TokenProvider

__all__ = [
    "AccessToken",
    "AuthError",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "CredentialSource",
    "Credentials",
    "MappingCredentialSource",
    "TokenProvider",
]
