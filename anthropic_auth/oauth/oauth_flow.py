"""OAuth authorization flow with PKCE.

This module implements the transport-independent core of the OAuth 2.0
authorization code flow with PKCE for the Anthropic provider. The engine
generates flow material, shapes outbound requests and interprets responses;
:mod:`anthropic_auth.oauth.oauth_client` pairs it with a blocking or
suspending transport.
"""

import hashlib
import logging
import secrets
import time
from base64 import urlsafe_b64encode
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

from ..core.config import OAuthConfig
from ..utils.errors import InvalidApiKeyError, TransportError
from ..utils.http_errors import classify_http_error
from .oauth_requests import (
    API_KEY_URL,
    SCOPE,
    TOKEN_URL,
    bearer_headers,
    build_api_key_request,
    build_refresh_request,
    build_token_request,
    parse_code_and_state,
    validate_access_token,
    validate_code,
    validate_refresh_token,
    validate_state,
    validate_verifier,
)
from .oauth_tokens import Clock, TokenSet
from .transport import PreparedRequest, TransportResponse

logger = logging.getLogger(__name__)

STATE_BYTES = 32


class OAuthMode(str, Enum):
    """Authorization context, selecting the provider's authorization host."""

    SUBSCRIPTION = "subscription"
    KEY_ISSUANCE = "key_issuance"

    @property
    def authorization_host(self) -> str:
        """Host serving the authorization page for this mode."""
        return _AUTHORIZATION_HOSTS[self]


_AUTHORIZATION_HOSTS = {
    OAuthMode.SUBSCRIPTION: "claude.ai",
    OAuthMode.KEY_ISSUANCE: "console.anthropic.com",
}


def generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE code verifier and challenge.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    # Generate code verifier (43-128 characters)
    code_verifier = urlsafe_b64encode(secrets.token_bytes(32)).decode("utf-8").rstrip("=")

    # Generate code challenge (SHA256 hash of verifier)
    code_challenge = (
        urlsafe_b64encode(hashlib.sha256(code_verifier.encode("utf-8")).digest())
        .decode("utf-8")
        .rstrip("=")
    )

    return code_verifier, code_challenge


def generate_state() -> str:
    """Generate a CSRF state token, independent of any PKCE material."""
    return urlsafe_b64encode(secrets.token_bytes(STATE_BYTES)).decode("utf-8").rstrip("=")


@dataclass(frozen=True)
class FlowContext:
    """A started authorization flow.

    Created once per attempt, consumed by exactly one exchange, never persisted.

    Attributes:
        authorization_url: URL the user must visit to authorize
        pkce_verifier: Secret PKCE verifier, sent only in the token exchange
        csrf_state: Opaque state that must round-trip through the redirect
        mode: Authorization mode the flow was started for
        code_challenge: S256 challenge embedded in the authorization URL
    """

    authorization_url: str
    pkce_verifier: str = field(repr=False)
    csrf_state: str = field(repr=False)
    mode: OAuthMode
    code_challenge: str = field(repr=False)


class OAuthFlowEngine:
    """Transport-independent OAuth flow logic.

    Every ``prepare_*`` method validates its inputs locally and raises before
    anything is sent. Every ``parse_*`` method turns a transport response into
    a result or a classified error. No method retries.
    """

    def __init__(self, config: OAuthConfig | None = None, clock: Clock = time.time):
        """Initialize the flow engine.

        Args:
            config: Client configuration (defaults to the registered client)
            clock: Time source used to anchor token expiry
        """
        self.config = config or OAuthConfig()
        self.clock = clock

    def start_flow(self, mode: OAuthMode) -> FlowContext:
        """Generate fresh PKCE and CSRF material and build the authorization URL.

        Performs no I/O.
        """
        code_verifier, code_challenge = generate_pkce_pair()
        state = generate_state()

        auth_params = {
            "code": "true",
            "client_id": self.config.client_id,
            "response_type": "code",
            "redirect_uri": self.config.redirect_uri,
            "scope": SCOPE,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
            "state": state,
        }
        auth_url = f"https://{mode.authorization_host}/oauth/authorize?{urlencode(auth_params)}"

        logger.info(f"Started {mode.value} authorization flow (state {state[:6]}****)")
        return FlowContext(
            authorization_url=auth_url,
            pkce_verifier=code_verifier,
            csrf_state=state,
            mode=mode,
            code_challenge=code_challenge,
        )

    def prepare_exchange(
        self, response: str, expected_state: str, verifier: str
    ) -> PreparedRequest:
        """Parse the authorization response and build the token exchange request.

        Args:
            response: ``code#state`` as shown by the provider, or a bare code
            expected_state: State of the flow being completed
            verifier: PKCE verifier of the flow being completed

        Raises:
            CsrfStateMismatchError: If the response carries a different state
            ValidationError: If code, state or verifier are malformed
        """
        code, state = parse_code_and_state(response, expected_state)
        validate_code(code)
        validate_state(state)
        validate_verifier(verifier)
        return PreparedRequest(
            url=TOKEN_URL,
            json=build_token_request(code, state, verifier, self.config.client_id),
        )

    def prepare_refresh(self, refresh_token: str) -> PreparedRequest:
        """Build the refresh grant request.

        Raises:
            InvalidTokenError: If the refresh token is empty
        """
        validate_refresh_token(refresh_token)
        return PreparedRequest(
            url=TOKEN_URL,
            json=build_refresh_request(refresh_token, self.config.client_id),
        )

    def prepare_api_key(self, access_token: str) -> PreparedRequest:
        """Build the bearer-authenticated API key creation request.

        Raises:
            InvalidTokenError: If the access token is empty
        """
        validate_access_token(access_token)
        return PreparedRequest(
            url=API_KEY_URL,
            json=build_api_key_request(),
            headers=bearer_headers(access_token),
        )

    def parse_token_response(self, response: TransportResponse) -> TokenSet:
        """Turn a token endpoint response into a validated :class:`TokenSet`.

        Raises:
            HttpError: If the status is not 2xx
            TransportError: If the body is not a JSON object
            InvalidTokenError: If the token set fails structural validation
        """
        self._raise_for_status(response)
        data = response.json()
        if not isinstance(data, dict):
            raise TransportError("Token response is not a JSON object")

        tokens = TokenSet.from_oauth_response(data, clock=self.clock)
        tokens.validate(clock=self.clock)
        logger.info(f"Obtained tokens (expire in {tokens.expires_in(self.clock)}s)")
        return tokens

    def parse_api_key_response(self, response: TransportResponse) -> str:
        """Extract the raw API key from a key-issuance response.

        Raises:
            HttpError: If the status is not 2xx
            TransportError: If the body is not a JSON object
            InvalidApiKeyError: If the response carries an empty key
        """
        self._raise_for_status(response)
        data = response.json()
        if not isinstance(data, dict):
            raise TransportError("API key response is not a JSON object")

        raw_key = data.get("raw_key")
        if not raw_key or not isinstance(raw_key, str):
            raise InvalidApiKeyError("Received empty API key from server")

        logger.info("Created API key")
        return raw_key

    def _raise_for_status(self, response: TransportResponse) -> None:
        if response.is_success:
            return
        error = classify_http_error(response.status_code, response.text)
        logger.error(f"Provider returned HTTP {response.status_code} ({error.kind.value})")
        raise error
