"""Error taxonomy and HTTP error classification."""

from .errors import (
    AnthropicAuthError,
    BrowserLaunchError,
    ConfigurationError,
    CsrfStateMismatchError,
    HttpError,
    InvalidApiKeyError,
    InvalidAuthorizationCodeError,
    InvalidPkceVerifierError,
    InvalidStateError,
    InvalidTokenError,
    ListenerBindError,
    ListenerError,
    ListenerShutdownError,
    MissingCodeError,
    ProviderDeniedError,
    SessionModeError,
    TransportError,
    ValidationError,
)
from .http_errors import HttpErrorKind, classify_http_error, classify_status

__all__ = [
    "AnthropicAuthError",
    "BrowserLaunchError",
    "ConfigurationError",
    "CsrfStateMismatchError",
    "HttpError",
    "HttpErrorKind",
    "InvalidApiKeyError",
    "InvalidAuthorizationCodeError",
    "InvalidPkceVerifierError",
    "InvalidStateError",
    "InvalidTokenError",
    "ListenerBindError",
    "ListenerError",
    "ListenerShutdownError",
    "MissingCodeError",
    "ProviderDeniedError",
    "SessionModeError",
    "TransportError",
    "ValidationError",
    "classify_http_error",
    "classify_status",
]
