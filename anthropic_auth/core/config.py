"""Configuration for the Anthropic OAuth client.

Two layers:

- :class:`OAuthConfig` is the explicit, immutable value threaded through the
  flow engine (client id and local redirect URI).
- :class:`AuthSettings` loads process-level knobs from environment variables
  (``ANTHROPIC_AUTH_*``) or a ``.env`` file and turns them into an
  :class:`OAuthConfig` on request.
"""

from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.errors import ConfigurationError

DEFAULT_CLIENT_ID = "9d1c250a-e61b-44d9-88ed-5944d1962f5e"
DEFAULT_REDIRECT_PORT = 1455
DEFAULT_CALLBACK_HOST = "localhost"


def _local_redirect_uri(port: int, host: str = DEFAULT_CALLBACK_HOST) -> str:
    if not 1 <= port <= 65535:
        raise ConfigurationError(f"redirect port must be between 1 and 65535, got {port}")
    return f"http://{host}:{port}/callback"


@dataclass(frozen=True)
class OAuthConfig:
    """Client configuration for the Anthropic OAuth provider.

    Attributes:
        client_id: Registered OAuth client ID
        redirect_uri: Redirect URI sent in the authorization request
    """

    client_id: str = DEFAULT_CLIENT_ID
    redirect_uri: str = _local_redirect_uri(DEFAULT_REDIRECT_PORT)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.client_id:
            raise ConfigurationError("client_id cannot be empty")
        if not self.redirect_uri:
            raise ConfigurationError("redirect_uri cannot be empty")

    @classmethod
    def builder(cls) -> "OAuthConfigBuilder":
        """Create a new config builder starting from the defaults."""
        return OAuthConfigBuilder()


class OAuthConfigBuilder:
    """Builder for :class:`OAuthConfig`.

    Example:
        config = OAuthConfig.builder().client_id("my-client").redirect_port(8080).build()
    """

    def __init__(self) -> None:
        self._client_id: str | None = None
        self._redirect_uri: str | None = None

    def client_id(self, client_id: str) -> "OAuthConfigBuilder":
        """Set the OAuth client ID."""
        self._client_id = client_id
        return self

    def redirect_uri(self, redirect_uri: str) -> "OAuthConfigBuilder":
        """Set the redirect URI."""
        self._redirect_uri = redirect_uri
        return self

    def redirect_port(
        self, port: int, host: str = DEFAULT_CALLBACK_HOST
    ) -> "OAuthConfigBuilder":
        """Set the redirect URI to the local callback on ``host:port``."""
        self._redirect_uri = _local_redirect_uri(port, host)
        return self

    def build(self) -> OAuthConfig:
        """Build the OAuthConfig, filling unset values with defaults."""
        defaults = OAuthConfig()
        return OAuthConfig(
            client_id=self._client_id if self._client_id is not None else defaults.client_id,
            redirect_uri=(
                self._redirect_uri if self._redirect_uri is not None else defaults.redirect_uri
            ),
        )


class AuthSettings(BaseSettings):
    """Settings loaded from ``ANTHROPIC_AUTH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ANTHROPIC_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    client_id: str = Field(default=DEFAULT_CLIENT_ID, description="OAuth client ID")
    redirect_port: int = Field(
        default=DEFAULT_REDIRECT_PORT, description="Port for the local callback listener"
    )
    callback_host: str = Field(
        default=DEFAULT_CALLBACK_HOST,
        description="Callback listener interface, also used as the redirect URI host",
    )
    http_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("redirect_port")
    @classmethod
    def validate_redirect_port(cls, v: int) -> int:
        """Validate that the port is usable for a TCP listener."""
        if not 1 <= v <= 65535:
            raise ValueError(f"redirect_port must be between 1 and 65535, got {v}")
        return v

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Validate that the timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout must be positive")
        return v

    def to_oauth_config(self) -> OAuthConfig:
        """Build the explicit client configuration from these settings.

        The redirect URI points at ``callback_host:redirect_port`` so it always
        names the address the callback listener binds.
        """
        return (
            OAuthConfig.builder()
            .client_id(self.client_id)
            .redirect_port(self.redirect_port, self.callback_host)
            .build()
        )
