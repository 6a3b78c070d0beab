"""Blocking and non-blocking Anthropic OAuth clients.

Both clients share :class:`~anthropic_auth.oauth.oauth_flow.OAuthFlowEngine`
for validation, request shaping and response handling; they differ only in
how the single outbound POST of each operation is executed.

Example (blocking):
    with OAuthClient() as client:
        flow = client.start_flow(OAuthMode.SUBSCRIPTION)
        print(f"Visit: {flow.authorization_url}")
        tokens = client.exchange_code(input("code#state: "), flow.csrf_state, flow.pkce_verifier)
"""

import logging
import time
from dataclasses import dataclass

from ..core.config import OAuthConfig
from ..utils.errors import SessionModeError
from .oauth_flow import FlowContext, OAuthFlowEngine, OAuthMode
from .oauth_tokens import Clock, TokenSet
from .transport import AsyncHttpxTransport, AsyncTransport, HttpxTransport, SyncTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionSession:
    """Tokens obtained through a subscription-mode flow."""

    tokens: TokenSet
    mode = OAuthMode.SUBSCRIPTION


@dataclass(frozen=True)
class KeyIssuanceSession:
    """Tokens obtained through a key-issuance-mode flow.

    Only this session kind can mint API keys.
    """

    tokens: TokenSet
    mode = OAuthMode.KEY_ISSUANCE


Session = SubscriptionSession | KeyIssuanceSession


def session_for(mode: OAuthMode, tokens: TokenSet) -> Session:
    """Wrap tokens in the session variant matching ``mode``."""
    if mode is OAuthMode.KEY_ISSUANCE:
        return KeyIssuanceSession(tokens)
    return SubscriptionSession(tokens)


def _require_key_issuance(session: object) -> KeyIssuanceSession:
    if not isinstance(session, KeyIssuanceSession):
        raise SessionModeError(
            "API keys can only be created from a key-issuance session; "
            "start the flow with OAuthMode.KEY_ISSUANCE"
        )
    return session


class OAuthClient:
    """Blocking OAuth client. Every operation runs on the calling thread."""

    def __init__(
        self,
        config: OAuthConfig | None = None,
        transport: SyncTransport | None = None,
        clock: Clock = time.time,
    ):
        """Initialize the client.

        Args:
            config: Client configuration (defaults to the registered client)
            transport: Blocking transport (defaults to an httpx-backed one)
            clock: Time source used to anchor token expiry
        """
        self.engine = OAuthFlowEngine(config, clock=clock)
        self._owns_transport = transport is None
        self.transport: SyncTransport = transport or HttpxTransport()

    @property
    def config(self) -> OAuthConfig:
        return self.engine.config

    def start_flow(self, mode: OAuthMode) -> FlowContext:
        """Start an authorization flow. Performs no I/O."""
        return self.engine.start_flow(mode)

    def exchange_code(self, response: str, expected_state: str, verifier: str) -> TokenSet:
        """Exchange an authorization response for tokens.

        Args:
            response: ``code#state`` as shown by the provider, or a bare code
                whose state was already validated elsewhere
            expected_state: ``csrf_state`` of the flow
            verifier: ``pkce_verifier`` of the flow

        Returns:
            Validated TokenSet

        Raises:
            CsrfStateMismatchError: If the returned state does not match
            ValidationError: If inputs are malformed (nothing is sent)
            HttpError: If the provider rejects the exchange
            TransportError: On network failure
        """
        request = self.engine.prepare_exchange(response, expected_state, verifier)
        logger.info("Exchanging authorization code for tokens")
        return self.engine.parse_token_response(self.transport.post(request))

    def refresh_token(self, refresh_token: str) -> TokenSet:
        """Obtain a new token set with a refresh token. Single attempt."""
        request = self.engine.prepare_refresh(refresh_token)
        logger.info("Refreshing access token")
        return self.engine.parse_token_response(self.transport.post(request))

    def create_api_key(self, access_token: str) -> str:
        """Create an API key with a key-issuance access token."""
        request = self.engine.prepare_api_key(access_token)
        logger.info("Creating API key")
        return self.engine.parse_api_key_response(self.transport.post(request))

    def complete_flow(self, flow: FlowContext, response: str) -> Session:
        """Exchange the response for ``flow`` and wrap tokens in a session."""
        tokens = self.exchange_code(response, flow.csrf_state, flow.pkce_verifier)
        return session_for(flow.mode, tokens)

    def refresh_session(self, session: Session) -> Session:
        """Refresh a session, keeping its mode."""
        return session_for(session.mode, self.refresh_token(session.tokens.refresh_token))

    def issue_api_key(self, session: KeyIssuanceSession) -> str:
        """Create an API key from a key-issuance session.

        Raises:
            SessionModeError: If the session is not a KeyIssuanceSession
        """
        session = _require_key_issuance(session)
        return self.create_api_key(session.tokens.access_token)

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            self.transport.close()

    def __enter__(self) -> "OAuthClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncOAuthClient:
    """Non-blocking OAuth client.

    Operations suspend only while the HTTP request is in flight.
    """

    def __init__(
        self,
        config: OAuthConfig | None = None,
        transport: AsyncTransport | None = None,
        clock: Clock = time.time,
    ):
        """Initialize the client.

        Args:
            config: Client configuration (defaults to the registered client)
            transport: Suspending transport (defaults to an httpx-backed one)
            clock: Time source used to anchor token expiry
        """
        self.engine = OAuthFlowEngine(config, clock=clock)
        self._owns_transport = transport is None
        self.transport: AsyncTransport = transport or AsyncHttpxTransport()

    @property
    def config(self) -> OAuthConfig:
        return self.engine.config

    def start_flow(self, mode: OAuthMode) -> FlowContext:
        """Start an authorization flow. Synchronous: there is nothing to await."""
        return self.engine.start_flow(mode)

    async def exchange_code(self, response: str, expected_state: str, verifier: str) -> TokenSet:
        """Exchange an authorization response for tokens.

        See :meth:`OAuthClient.exchange_code`.
        """
        request = self.engine.prepare_exchange(response, expected_state, verifier)
        logger.info("Exchanging authorization code for tokens")
        return self.engine.parse_token_response(await self.transport.post(request))

    async def refresh_token(self, refresh_token: str) -> TokenSet:
        """Obtain a new token set with a refresh token. Single attempt."""
        request = self.engine.prepare_refresh(refresh_token)
        logger.info("Refreshing access token")
        return self.engine.parse_token_response(await self.transport.post(request))

    async def create_api_key(self, access_token: str) -> str:
        """Create an API key with a key-issuance access token."""
        request = self.engine.prepare_api_key(access_token)
        logger.info("Creating API key")
        return self.engine.parse_api_key_response(await self.transport.post(request))

    async def complete_flow(self, flow: FlowContext, response: str) -> Session:
        """Exchange the response for ``flow`` and wrap tokens in a session."""
        tokens = await self.exchange_code(response, flow.csrf_state, flow.pkce_verifier)
        return session_for(flow.mode, tokens)

    async def refresh_session(self, session: Session) -> Session:
        """Refresh a session, keeping its mode."""
        tokens = await self.refresh_token(session.tokens.refresh_token)
        return session_for(session.mode, tokens)

    async def issue_api_key(self, session: KeyIssuanceSession) -> str:
        """Create an API key from a key-issuance session.

        Raises:
            SessionModeError: If the session is not a KeyIssuanceSession
        """
        session = _require_key_issuance(session)
        return await self.create_api_key(session.tokens.access_token)

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self.transport, AsyncHttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> "AsyncOAuthClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
