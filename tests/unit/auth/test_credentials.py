"""Tests for multi-source credential resolution.

This module tests the CredentialResolver class which resolves Zoom credentials
from explicit values, the authenticated session, the environment and files.
"""

import logging

import pytest

from zoom_client.auth import CredentialResolver, Credentials, CredentialSource, MappingCredentialSource
from zoom_client.auth.exceptions import CredentialFileError, CredentialNotFoundError


class TestCredentialResolverInit:
    """Test CredentialResolver initialization."""

    def test_init_default(self):
        """Test default initialization."""
        resolver = CredentialResolver()
        assert resolver._dotenv_loaded

    def test_init_skip_dotenv(self):
        """Test initialization with dotenv loading disabled."""
        resolver = CredentialResolver(load_dotenv=False)
        assert not resolver._dotenv_loaded

    def test_init_with_custom_dotenv_path(self, tmp_path):
        """Test initialization with custom dotenv path."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_VAR=test_value\n")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))
        assert resolver._dotenv_loaded


class TestCredentialResolverResolve:
    """Test basic credential resolution."""

    def test_resolve_from_explicit_value(self, resolver):
        """Test resolving from explicitly provided value (highest priority)."""
        assert resolver.resolve(value="explicit-value-123") == "explicit-value-123"

    def test_resolve_from_environment_variable(self, monkeypatch, resolver):
        """Test resolving from environment variable."""
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-value-456")

        assert resolver.resolve(env_var_name="ZOOM_CLIENT_ID") == "env-value-456"

    def test_resolve_from_dotenv_file(self, tmp_path, monkeypatch):
        """Test resolving from .env file."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("ZOOM_ACCOUNT_ID=dotenv-account\n")
        monkeypatch.delenv("ZOOM_ACCOUNT_ID", raising=False)

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))
        result = resolver.resolve(env_var_name="ZOOM_ACCOUNT_ID")

        # python-dotenv writes into os.environ; undo it for the other tests
        monkeypatch.delenv("ZOOM_ACCOUNT_ID", raising=False)
        assert result == "dotenv-account"

    def test_resolve_with_default_value(self, resolver):
        """Test resolving with default value when nothing else is set."""
        assert resolver.resolve(env_var_name="NONEXISTENT_VAR", default="default-value-999") == "default-value-999"

    def test_resolve_returns_none_when_not_found(self, resolver):
        """Test that resolve returns None when credential not found and not required."""
        assert resolver.resolve(env_var_name="NONEXISTENT_VAR") is None

    def test_resolve_raises_when_required_and_not_found(self, resolver):
        """Test that resolve raises error when required=True and not found."""
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolver.resolve(env_var_name="NONEXISTENT_VAR", required=True)

        assert "Required credential not found" in str(exc_info.value)
        assert exc_info.value.env_var_name == "NONEXISTENT_VAR"


class TestCredentialResolverPriority:
    """Test credential resolution priority ordering."""

    def test_explicit_value_overrides_all(self, monkeypatch, resolver):
        """Test that explicit value takes priority over everything."""
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-value")
        session = MappingCredentialSource({"client_id": "session-value"})

        result = resolver.resolve(
            value="explicit-value",
            session=session,
            session_key="client_id",
            env_var_name="ZOOM_CLIENT_ID",
            default="default-value",
        )

        assert result == "explicit-value"

    def test_session_overrides_environment(self, monkeypatch, resolver):
        """Test that the session takes priority over the environment."""
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-value")
        session = MappingCredentialSource({"client_id": "session-value"})

        result = resolver.resolve(session=session, session_key="client_id", env_var_name="ZOOM_CLIENT_ID")

        assert result == "session-value"

    def test_session_without_key_falls_through(self, monkeypatch, resolver):
        """Test that a session that doesn't know the key defers to the environment."""
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-value")
        session = MappingCredentialSource({"client_secret": "session-secret"})

        result = resolver.resolve(session=session, session_key="client_id", env_var_name="ZOOM_CLIENT_ID")

        assert result == "env-value"

    def test_environment_overrides_default(self, monkeypatch, resolver):
        """Test that environment variable takes priority over default."""
        monkeypatch.setenv("ZOOM_TIMEOUT", "10")

        assert resolver.resolve(env_var_name="ZOOM_TIMEOUT", default="30") == "10"


class TestMappingCredentialSource:
    """Test the mapping-backed session source."""

    def test_is_credential_source(self):
        """Test that it satisfies the CredentialSource protocol."""
        assert isinstance(MappingCredentialSource({}), CredentialSource)

    def test_empty_values_are_unknown(self):
        """Test that empty strings are reported as missing."""
        source = MappingCredentialSource({"client_id": "", "account_id": "acc"})

        assert source.lookup("client_id") is None
        assert source.lookup("account_id") == "acc"
        assert source.lookup("client_secret") is None


class TestResolveCredentials:
    """Test resolution of the full Zoom credential set."""

    def test_resolves_from_explicit_values(self, resolver):
        """Test that explicit values produce Credentials."""
        credentials = resolver.resolve_credentials(account_id="acc", client_id="cid", client_secret="secret")

        assert credentials == Credentials(account_id="acc", client_id="cid", client_secret="secret")

    def test_resolves_from_environment(self, monkeypatch, resolver):
        """Test that ZOOM_* environment variables are used."""
        monkeypatch.setenv("ZOOM_ACCOUNT_ID", "env-acc")
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-cid")
        monkeypatch.setenv("ZOOM_CLIENT_SECRET", "env-secret")

        credentials = resolver.resolve_credentials()

        assert credentials.account_id == "env-acc"
        assert credentials.client_id == "env-cid"
        assert credentials.client_secret == "env-secret"

    def test_mixes_sources_per_field(self, monkeypatch, resolver):
        """Test that each field is resolved independently."""
        monkeypatch.setenv("ZOOM_ACCOUNT_ID", "env-acc")
        monkeypatch.setenv("ZOOM_CLIENT_ID", "env-cid")
        monkeypatch.setenv("ZOOM_CLIENT_SECRET", "env-secret")
        session = MappingCredentialSource({"client_id": "session-cid"})

        credentials = resolver.resolve_credentials(account_id="explicit-acc", session=session)

        assert credentials.account_id == "explicit-acc"
        assert credentials.client_id == "session-cid"
        assert credentials.client_secret == "env-secret"

    def test_secret_falls_back_to_file(self, tmp_path, monkeypatch, resolver):
        """Test that ZOOM_CLIENT_SECRET_FILE is read when the secret is not set."""
        secret_file = tmp_path / "client_secret"
        secret_file.write_text("file-secret\n")
        monkeypatch.setenv("ZOOM_CLIENT_SECRET_FILE", str(secret_file))

        credentials = resolver.resolve_credentials(account_id="acc", client_id="cid")

        assert credentials.client_secret == "file-secret"

    def test_missing_fields_are_reported(self, resolver):
        """Test that every missing field is listed."""
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolver.resolve_credentials(client_id="cid")

        assert exc_info.value.missing == ["ZOOM_ACCOUNT_ID", "ZOOM_CLIENT_SECRET"]
        assert "ZOOM_ACCOUNT_ID" in str(exc_info.value)

    def test_secret_not_in_repr(self, resolver):
        """Test that the client secret is left out of the dataclass repr."""
        credentials = resolver.resolve_credentials(account_id="acc", client_id="cid", client_secret="hunter2")

        assert "hunter2" not in repr(credentials)


class TestCredentialResolverFromFile:
    """Test file-based credential resolution."""

    def test_resolve_from_file_with_explicit_path(self, tmp_path, resolver):
        """Test resolving credential from file with explicit path."""
        cred_file = tmp_path / "client_secret.txt"
        cred_file.write_text("  file-credential-abc123  \n")

        assert resolver.resolve_from_file(file_path=str(cred_file)) == "file-credential-abc123"

    def test_resolve_from_file_with_env_var_path(self, tmp_path, monkeypatch, resolver):
        """Test resolving credential from file path specified in env var."""
        cred_file = tmp_path / "secret.txt"
        cred_file.write_text("secret-from-env-path")
        monkeypatch.setenv("ZOOM_CLIENT_SECRET_FILE", str(cred_file))

        assert resolver.resolve_from_file(env_var_name="ZOOM_CLIENT_SECRET_FILE") == "secret-from-env-path"

    def test_resolve_from_file_with_tilde_expansion(self, tmp_path, monkeypatch, resolver):
        """Test file path expansion with ~ (home directory)."""
        fake_home = tmp_path / "home"
        cred_file = fake_home / ".config" / "zoom_secret"
        cred_file.parent.mkdir(parents=True)
        cred_file.write_text("home-dir-credential")
        monkeypatch.setenv("HOME", str(fake_home))

        assert resolver.resolve_from_file(file_path="~/.config/zoom_secret") == "home-dir-credential"

    def test_resolve_from_file_with_env_var_expansion(self, tmp_path, monkeypatch, resolver):
        """Test file path expansion with $VAR environment variables."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "zoom_secret").write_text("env-var-expanded-credential")
        monkeypatch.setenv("CONFIG_DIR", str(config_dir))

        assert resolver.resolve_from_file(file_path="$CONFIG_DIR/zoom_secret") == "env-var-expanded-credential"

    def test_resolve_from_file_returns_none_when_not_found(self, resolver):
        """Test that resolve_from_file returns None when file not found and not required."""
        assert resolver.resolve_from_file(file_path="/nonexistent/path/to/file.txt") is None

    def test_resolve_from_file_raises_when_required_and_not_found(self, resolver):
        """Test that resolve_from_file raises error when file not found and required=True."""
        with pytest.raises(CredentialFileError) as exc_info:
            resolver.resolve_from_file(file_path="/nonexistent/path/to/file.txt", required=True)

        assert "not found" in str(exc_info.value)

    def test_resolve_from_file_with_general_read_error(self, tmp_path, resolver):
        """Test handling of general read errors (a directory instead of a file)."""
        not_a_file = tmp_path / "dir_not_file"
        not_a_file.mkdir()

        assert resolver.resolve_from_file(file_path=str(not_a_file)) is None
        with pytest.raises(CredentialFileError):
            resolver.resolve_from_file(file_path=str(not_a_file), required=True)

    def test_resolve_from_file_no_path_provided(self, resolver):
        """Test resolve_from_file when no path is provided."""
        assert resolver.resolve_from_file() is None

        with pytest.raises(CredentialFileError) as exc_info:
            resolver.resolve_from_file(env_var_name="ZOOM_CLIENT_SECRET_FILE", required=True)

        assert "ZOOM_CLIENT_SECRET_FILE" in str(exc_info.value)


class TestCredentialMasking:
    """Test credential masking in logs."""

    def test_credential_value_is_masked_in_debug_logs(self, caplog, resolver):
        """Test that credential values are masked in log messages."""
        caplog.set_level(logging.DEBUG)

        resolver.resolve(value="super-secret-key-123", mask_in_logs=True)

        assert "super-secret-key-123" not in caplog.text
        assert "***" in caplog.text

    def test_credential_masking_can_be_disabled(self, caplog, resolver):
        """Test that masking can be disabled for non-sensitive values."""
        caplog.set_level(logging.DEBUG)

        resolver.resolve(value="https://api.zoom.us/v2/", mask_in_logs=False)

        assert "https://api.zoom.us/v2/" in caplog.text

    def test_session_values_are_masked(self, caplog, resolver):
        """Test that session-provided secrets are masked and the source named."""
        caplog.set_level(logging.DEBUG)
        session = MappingCredentialSource({"client_secret": "session-secret-xyz"})

        resolver.resolve(session=session, session_key="client_secret")

        assert "session-secret-xyz" not in caplog.text
        assert "session key 'client_secret'" in caplog.text

    def test_file_credentials_are_masked(self, tmp_path, caplog, resolver):
        """Test that credentials from files are masked in logs."""
        caplog.set_level(logging.DEBUG)
        cred_file = tmp_path / "secret.txt"
        cred_file.write_text("file-secret-xyz")

        resolver.resolve_from_file(file_path=str(cred_file))

        assert "file-secret-xyz" not in caplog.text
        assert "***" in caplog.text


class TestThreadSafety:
    """Test thread-safe dotenv loading."""

    def test_dotenv_loaded_only_once(self, tmp_path):
        """Test that .env file is loaded only once even with multiple calls."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_VAR=test_value\n")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))
        resolver._ensure_dotenv_loaded()
        resolver._ensure_dotenv_loaded()

        assert resolver._dotenv_loaded is True

    def test_dotenv_loading_error_handled_gracefully(self, tmp_path):
        """Test that errors during dotenv loading are handled gracefully."""
        dotenv_path = tmp_path / "not_a_file"
        dotenv_path.mkdir()

        resolver = CredentialResolver(dotenv_path=str(dotenv_path))

        assert resolver._dotenv_loaded is True
        assert resolver.resolve(value="works") == "works"
