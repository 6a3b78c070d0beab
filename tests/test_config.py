"""Tests for client configuration and environment settings."""

import logging

import pytest
from pydantic import ValidationError

from anthropic_auth.core.config import (
    DEFAULT_CLIENT_ID,
    AuthSettings,
    OAuthConfig,
)
from anthropic_auth.core.logging_config import setup_logging
from anthropic_auth.utils.errors import ConfigurationError


class TestOAuthConfig:
    """Tests for the explicit client configuration."""

    def test_defaults(self) -> None:
        """Test the default client id and local redirect URI."""
        config = OAuthConfig()

        assert config.client_id == DEFAULT_CLIENT_ID
        assert config.redirect_uri == "http://localhost:1455/callback"

    def test_empty_client_id_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="client_id"):
            OAuthConfig(client_id="")

    def test_empty_redirect_uri_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="redirect_uri"):
            OAuthConfig(redirect_uri="")

    def test_config_is_immutable(self) -> None:
        config = OAuthConfig()
        with pytest.raises(AttributeError):
            config.client_id = "other"  # type: ignore[misc]


class TestOAuthConfigBuilder:
    """Tests for the config builder."""

    def test_build_with_defaults(self) -> None:
        """Test an untouched builder yields the default config."""
        assert OAuthConfig.builder().build() == OAuthConfig()

    def test_client_id_and_port(self) -> None:
        """Test overriding client id and redirect port."""
        config = OAuthConfig.builder().client_id("my-client").redirect_port(8080).build()

        assert config.client_id == "my-client"
        assert config.redirect_uri == "http://localhost:8080/callback"

    def test_explicit_redirect_uri(self) -> None:
        config = OAuthConfig.builder().redirect_uri("http://127.0.0.1:9999/cb").build()
        assert config.redirect_uri == "http://127.0.0.1:9999/cb"

    def test_last_redirect_setting_wins(self) -> None:
        """Test redirect_port and redirect_uri overwrite each other in order."""
        config = (
            OAuthConfig.builder()
            .redirect_uri("http://127.0.0.1:9999/cb")
            .redirect_port(2000)
            .build()
        )
        assert config.redirect_uri == "http://localhost:2000/callback"

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_invalid_port(self, port: int) -> None:
        with pytest.raises(ConfigurationError, match="port"):
            OAuthConfig.builder().redirect_port(port)

    def test_empty_client_id_fails_at_build(self) -> None:
        with pytest.raises(ConfigurationError):
            OAuthConfig.builder().client_id("").build()


class TestAuthSettings:
    """Tests for environment-driven settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch) -> None:
        """Remove any ANTHROPIC_AUTH_* variables from the environment."""
        for name in (
            "ANTHROPIC_AUTH_CLIENT_ID",
            "ANTHROPIC_AUTH_REDIRECT_PORT",
            "ANTHROPIC_AUTH_CALLBACK_HOST",
            "ANTHROPIC_AUTH_HTTP_TIMEOUT",
            "ANTHROPIC_AUTH_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self) -> None:
        settings = AuthSettings(_env_file=None)

        assert settings.client_id == DEFAULT_CLIENT_ID
        assert settings.redirect_port == 1455
        assert settings.callback_host == "localhost"
        assert settings.http_timeout == 30.0
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch) -> None:
        """Test values come from ANTHROPIC_AUTH_* variables."""
        monkeypatch.setenv("ANTHROPIC_AUTH_CLIENT_ID", "env-client")
        monkeypatch.setenv("ANTHROPIC_AUTH_REDIRECT_PORT", "8765")
        monkeypatch.setenv("ANTHROPIC_AUTH_HTTP_TIMEOUT", "5.5")

        settings = AuthSettings(_env_file=None)

        assert settings.client_id == "env-client"
        assert settings.redirect_port == 8765
        assert settings.http_timeout == 5.5

    def test_reads_env_file(self, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ANTHROPIC_AUTH_CLIENT_ID=file-client\n")

        settings = AuthSettings(_env_file=env_file)

        assert settings.client_id == "file-client"

    def test_invalid_port(self, monkeypatch) -> None:
        monkeypatch.setenv("ANTHROPIC_AUTH_REDIRECT_PORT", "70000")
        with pytest.raises(ValidationError, match="redirect_port"):
            AuthSettings(_env_file=None)

    def test_invalid_timeout(self, monkeypatch) -> None:
        monkeypatch.setenv("ANTHROPIC_AUTH_HTTP_TIMEOUT", "0")
        with pytest.raises(ValidationError, match="http_timeout"):
            AuthSettings(_env_file=None)

    def test_to_oauth_config(self, monkeypatch) -> None:
        """Test settings produce the explicit client configuration."""
        monkeypatch.setenv("ANTHROPIC_AUTH_CLIENT_ID", "env-client")
        monkeypatch.setenv("ANTHROPIC_AUTH_REDIRECT_PORT", "8765")

        config = AuthSettings(_env_file=None).to_oauth_config()

        assert config == OAuthConfig(
            client_id="env-client", redirect_uri="http://localhost:8765/callback"
        )

    def test_redirect_uri_uses_callback_host(self, monkeypatch) -> None:
        """Test the redirect URI names the interface the listener binds."""
        monkeypatch.setenv("ANTHROPIC_AUTH_CALLBACK_HOST", "127.0.0.1")

        config = AuthSettings(_env_file=None).to_oauth_config()

        assert config.redirect_uri == "http://127.0.0.1:1455/callback"


class TestSetupLogging:
    """Tests for logging configuration."""

    def test_returns_named_logger(self) -> None:
        logger = setup_logging("anthropic_auth.test", level="DEBUG")

        assert logger.name == "anthropic_auth.test"
        assert logging.getLogger().level == logging.DEBUG

    def test_level_defaults_to_settings(self, monkeypatch) -> None:
        """Test the level falls back to ANTHROPIC_AUTH_LOG_LEVEL."""
        monkeypatch.setenv("ANTHROPIC_AUTH_LOG_LEVEL", "warning")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_log_file(self, tmp_path) -> None:
        """Test a file handler is attached and its directory created."""
        log_file = tmp_path / "logs" / "auth.log"
        setup_logging(level="INFO", log_file=log_file)

        assert log_file.parent.is_dir()
        assert any(
            isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers
        )
