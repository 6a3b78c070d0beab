"""OAuth 2.0 authorization code flow with PKCE for Anthropic.

This package provides:
- PKCE and CSRF state generation and authorization URL construction
- Code exchange, token refresh and API key creation
- Blocking and non-blocking clients over pluggable transports
- A single-use local callback listener
"""

from .browser import open_browser
from .callback_server import (
    CallbackListener,
    CallbackOutcome,
    CallbackResult,
    OneShotChannel,
    run_callback_listener,
    run_callback_listener_blocking,
)
from .oauth_client import (
    AsyncOAuthClient,
    KeyIssuanceSession,
    OAuthClient,
    Session,
    SubscriptionSession,
)
from .oauth_flow import (
    FlowContext,
    OAuthFlowEngine,
    OAuthMode,
    generate_pkce_pair,
    generate_state,
)
from .oauth_tokens import TokenSet
from .transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    PreparedRequest,
    SyncTransport,
    TransportResponse,
)

__all__ = [
    # Flow engine
    "OAuthFlowEngine",
    "OAuthMode",
    "FlowContext",
    "generate_pkce_pair",
    "generate_state",
    # Clients
    "OAuthClient",
    "AsyncOAuthClient",
    "Session",
    "SubscriptionSession",
    "KeyIssuanceSession",
    # Tokens
    "TokenSet",
    # Transports
    "SyncTransport",
    "AsyncTransport",
    "HttpxTransport",
    "AsyncHttpxTransport",
    "PreparedRequest",
    "TransportResponse",
    # Callback listener
    "CallbackListener",
    "CallbackOutcome",
    "CallbackResult",
    "OneShotChannel",
    "run_callback_listener",
    "run_callback_listener_blocking",
    # Browser
    "open_browser",
]
