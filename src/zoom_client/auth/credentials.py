"""Multi-source credential resolution for the Zoom client.

Zoom server-to-server OAuth needs three values: an account ID, a client ID
and a client secret. Each of them can come from several places, which are
tried in priority order.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Authenticated session (a ``CredentialSource``)
3. Environment variable (``.env`` files are loaded into the environment by python-dotenv)
4. Default value

The client secret additionally falls back to a file named by
``ZOOM_CLIENT_SECRET_FILE``.

Example:
    ```python
    from zoom_client.auth import CredentialResolver, MappingCredentialSource

    resolver = CredentialResolver()

    # Everything from ZOOM_ACCOUNT_ID / ZOOM_CLIENT_ID / ZOOM_CLIENT_SECRET
    credentials = resolver.resolve_credentials()

    # Per-user app credentials win over the static configuration
    session = MappingCredentialSource({"client_id": user.zoom_client_id})
    credentials = resolver.resolve_credentials(session=session)
    ```

Security Considerations:
    - Credentials are never logged in full (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based credentials have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Protocol, runtime_checkable

from dotenv import load_dotenv

from zoom_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

ACCOUNT_ID_ENV = "ZOOM_ACCOUNT_ID"
CLIENT_ID_ENV = "ZOOM_CLIENT_ID"
CLIENT_SECRET_ENV = "ZOOM_CLIENT_SECRET"
CLIENT_SECRET_FILE_ENV = "ZOOM_CLIENT_SECRET_FILE"


@dataclass(frozen=True)
class Credentials:
    """Resolved account credentials, immutable for the lifetime of a client."""

    account_id: str
    client_id: str
    client_secret: str = field(repr=False)


@runtime_checkable
class CredentialSource(Protocol):
    """Credentials attached to an authenticated session.

    Implementations return ``None`` for keys they don't know about, so the
    resolver can fall through to the static configuration.
    Keys are ``"account_id"``, ``"client_id"`` and ``"client_secret"``.
    """

    def lookup(self, key: str) -> str | None: ...


class MappingCredentialSource:
    """``CredentialSource`` backed by a plain mapping."""

    def __init__(self, values: Mapping[str, str | None]):
        self._values = dict(values)

    def lookup(self, key: str) -> str | None:
        value = self._values.get(key)
        return value or None


class CredentialResolver:
    """Resolve credentials from multiple sources with priority ordering.

    The resolver uses a priority-based system where explicitly provided values
    take precedence over the session, which takes precedence over environment
    variables (including values loaded from ``.env``), which finally take
    precedence over defaults.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.

    Example:
        ```python
        resolver = CredentialResolver()

        # Simple resolution from environment
        account_id = resolver.resolve(env_var_name="ZOOM_ACCOUNT_ID")

        # With fallback default
        timeout = resolver.resolve(env_var_name="ZOOM_TIMEOUT", default="30")

        # Required credential (raises if not found)
        secret = resolver.resolve(env_var_name="ZOOM_CLIENT_SECRET", required=True)
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize credential resolver.

        Args:
            dotenv_path: Path to .env file. If None, searches parent directories
                for .env file (default behavior of python-dotenv).
            load_dotenv: Whether to load .env file. Set to False to skip
                .env file loading (useful for testing or when not using .env).
                Default is True.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Ensure .env file is loaded (thread-safe).

        Uses a lock so the .env file is only loaded once.
        """
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            # Double-check pattern for thread safety
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                self._dotenv_loaded = True
                logger.debug("Loaded .env file for credential resolution")
            except Exception as e:
                logger.warning(f"Failed to load .env file: {e}")
                # Continue without .env
                self._dotenv_loaded = True

    def _mask_credential(self, value: str | None) -> str:
        """Mask a credential value for safe logging.

        Returns:
            Masked string ("***") if value exists, "None" otherwise.
        """
        if value is None:
            return "None"
        return "***"

    def resolve(
        self,
        *,
        value: str | None = None,
        session: CredentialSource | None = None,
        session_key: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve one value, first match wins.

        Order: ``value``, then ``session.lookup(session_key)``, then the
        ``env_var_name`` environment variable (which includes anything loaded
        from ``.env``), then ``default``.

        Args:
            value: Explicit value; short-circuits every other source
            session: Per-session credential source
            session_key: Key passed to ``session.lookup``
            env_var_name: Environment variable to read, e.g. ``ZOOM_ACCOUNT_ID``
            default: Fallback when nothing else matched
            required: Raise instead of returning ``None``
            mask_in_logs: Log ``***`` instead of the value. Turn off for URLs and timeouts.

        Raises:
            CredentialNotFoundError: If ``required`` and no source had a value.
        """
        result = None
        source = None
        session_value = session.lookup(session_key) if session is not None and session_key else None

        if value is not None:
            result = value
            source = "explicit parameter"

        elif session_value is not None:
            result = session_value
            source = f"session key '{session_key}'"

        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"

        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = self._mask_credential(result) if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a value from a file, typically a mounted client secret.

        The path comes from ``file_path`` or from the ``env_var_name``
        environment variable (``ZOOM_CLIENT_SECRET_FILE``). ``~`` and ``$VAR``
        are expanded and surrounding whitespace is stripped from the contents.

        Raises:
            CredentialFileError: If ``required`` and the file cannot be read.
        """
        path_to_use = None

        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_from_env = self.resolve(env_var_name=env_var_name, required=False, mask_in_logs=False)
            if path_from_env:
                path_to_use = path_from_env

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        expanded_path = os.path.expanduser(os.path.expandvars(path_to_use))
        path_obj = Path(expanded_path)

        try:
            content = path_obj.read_text().strip()
            logger.debug(f"Resolved credential from file: {path_obj} (***)")
            return content

        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None

        except PermissionError:
            error_msg = f"Permission denied reading credential file: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.warning(error_msg)
            return None

        except Exception as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

    def resolve_credentials(
        self,
        *,
        account_id: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        session: CredentialSource | None = None,
    ) -> Credentials:
        """Resolve the three Zoom OAuth values.

        Each field goes through :meth:`resolve` with its ``ZOOM_*`` environment
        variable. The client secret additionally falls back to the file named by
        ``ZOOM_CLIENT_SECRET_FILE``.

        Raises:
            CredentialNotFoundError: If any field is still missing; ``missing``
                lists every field that could not be resolved.
        """
        resolved_account_id = self.resolve(
            value=account_id, session=session, session_key="account_id", env_var_name=ACCOUNT_ID_ENV
        )
        resolved_client_id = self.resolve(
            value=client_id, session=session, session_key="client_id", env_var_name=CLIENT_ID_ENV
        )
        resolved_client_secret = self.resolve(
            value=client_secret, session=session, session_key="client_secret", env_var_name=CLIENT_SECRET_ENV
        )
        if resolved_client_secret is None:
            resolved_client_secret = self.resolve_from_file(env_var_name=CLIENT_SECRET_FILE_ENV)

        missing = [
            name
            for name, resolved in (
                (ACCOUNT_ID_ENV, resolved_account_id),
                (CLIENT_ID_ENV, resolved_client_id),
                (CLIENT_SECRET_ENV, resolved_client_secret),
            )
            if not resolved
        ]
        if missing:
            raise CredentialNotFoundError(
                f"Required Zoom credentials not found: {', '.join(missing)}",
                env_var_name=missing[0],
                missing=missing,
            )

        return Credentials(
            account_id=resolved_account_id,
            client_id=resolved_client_id,
            client_secret=resolved_client_secret,
        )
