"""Anthropic Auth - OAuth 2.0 with PKCE for Claude subscriptions and API key issuance."""

__version__ = "0.1.0"

from .core.config import AuthSettings, OAuthConfig, OAuthConfigBuilder
from .core.logging_config import setup_logging
from .oauth import (
    AsyncHttpxTransport,
    AsyncOAuthClient,
    CallbackListener,
    CallbackOutcome,
    CallbackResult,
    FlowContext,
    HttpxTransport,
    KeyIssuanceSession,
    OAuthClient,
    OAuthFlowEngine,
    OAuthMode,
    Session,
    SubscriptionSession,
    TokenSet,
    open_browser,
    run_callback_listener,
    run_callback_listener_blocking,
)
from .utils.errors import (
    AnthropicAuthError,
    BrowserLaunchError,
    CsrfStateMismatchError,
    HttpError,
    InvalidAuthorizationCodeError,
    InvalidPkceVerifierError,
    InvalidTokenError,
    ListenerBindError,
    ListenerShutdownError,
    TransportError,
)
from .utils.http_errors import HttpErrorKind

__all__ = [
    # Configuration
    "AuthSettings",
    "OAuthConfig",
    "OAuthConfigBuilder",
    "setup_logging",
    # Flow
    "OAuthFlowEngine",
    "OAuthMode",
    "FlowContext",
    "OAuthClient",
    "AsyncOAuthClient",
    "HttpxTransport",
    "AsyncHttpxTransport",
    "Session",
    "SubscriptionSession",
    "KeyIssuanceSession",
    "TokenSet",
    # Callback listener
    "CallbackListener",
    "CallbackOutcome",
    "CallbackResult",
    "run_callback_listener",
    "run_callback_listener_blocking",
    "open_browser",
    # Errors
    "AnthropicAuthError",
    "BrowserLaunchError",
    "CsrfStateMismatchError",
    "HttpError",
    "HttpErrorKind",
    "InvalidAuthorizationCodeError",
    "InvalidPkceVerifierError",
    "InvalidTokenError",
    "ListenerBindError",
    "ListenerShutdownError",
    "TransportError",
]
