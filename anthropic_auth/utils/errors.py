"""Error types for Anthropic OAuth authentication."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http_errors import HttpErrorKind


class AnthropicAuthError(Exception):
    """Base exception for all anthropic_auth errors."""

    pass


class ConfigurationError(AnthropicAuthError):
    """Raised when client configuration is missing or invalid."""

    pass


# Local validation errors (raised before any network call)
class ValidationError(AnthropicAuthError):
    """Raised when an input fails local validation."""

    pass


class InvalidAuthorizationCodeError(ValidationError):
    """Raised when an authorization code is empty or obviously truncated."""

    def __init__(self, message: str = "Authorization code is empty or too short"):
        super().__init__(message)


class InvalidStateError(ValidationError):
    """Raised when a CSRF state token is empty."""

    def __init__(self, message: str = "State token is empty"):
        super().__init__(message)


class InvalidPkceVerifierError(ValidationError):
    """Raised when a PKCE verifier is empty or has an invalid length."""

    pass


class InvalidTokenError(ValidationError):
    """Raised when a token is empty or a token set is malformed."""

    pass


class CsrfStateMismatchError(AnthropicAuthError):
    """Raised when the returned state does not match the flow's state.

    Never retryable: start a fresh flow.
    """

    def __init__(self, expected: str, received: str | None):
        # Only prefixes so full state values never end up in logs or tracebacks
        expected_hint = f"{expected[:6]}****"
        received_hint = f"{received[:6]}****" if received else "<missing>"
        super().__init__(
            f"State mismatch - possible CSRF attack "
            f"(expected {expected_hint}, got {received_hint})"
        )


# Provider-side outcomes
class ProviderDeniedError(AnthropicAuthError):
    """Raised when the provider redirected back with an OAuth error."""

    def __init__(self, error: str, error_description: str | None = None):
        self.error = error
        self.error_description = error_description
        message = f"{error}: {error_description}" if error_description else error
        super().__init__(f"OAuth error: {message}")


class MissingCodeError(AnthropicAuthError):
    """Raised when a validated callback carried no authorization code."""

    def __init__(self):
        super().__init__("No authorization code received in callback")


class HttpError(AnthropicAuthError):
    """Raised when the provider answered with a non-2xx status.

    Attributes:
        status: HTTP status code
        body: Raw response body
        kind: Classified error kind (see :mod:`anthropic_auth.utils.http_errors`)
        hint: Remediation hint, or None when unclassified
    """

    def __init__(
        self, status: int, body: str, kind: "HttpErrorKind", hint: str | None = None
    ):
        self.status = status
        self.body = body
        self.kind = kind
        self.hint = hint
        message = f"HTTP {status} - {body}"
        if hint:
            message = f"{message}\nHint: {hint}"
        super().__init__(message)


class TransportError(AnthropicAuthError):
    """Raised on network-level failures or unreadable response bodies."""

    pass


class InvalidApiKeyError(AnthropicAuthError):
    """Raised when a successful key-issuance response carries no usable key."""

    pass


class SessionModeError(AnthropicAuthError):
    """Raised when an operation is attempted on a session of the wrong mode."""

    pass


# Callback listener errors (environment problems, not user decisions)
class ListenerError(AnthropicAuthError):
    """Base exception for callback listener failures."""

    pass


class ListenerBindError(ListenerError):
    """Raised when the callback listener cannot bind its port."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        super().__init__(f"Failed to bind callback listener to {host}:{port}: {reason}")


class ListenerShutdownError(ListenerError):
    """Raised when the listener stopped before delivering any outcome."""

    def __init__(self, message: str = "Callback listener shut down unexpectedly"):
        super().__init__(message)


class BrowserLaunchError(AnthropicAuthError):
    """Raised when the system browser could not be opened.

    Non-fatal: the authorization URL can always be visited manually.
    """

    pass
