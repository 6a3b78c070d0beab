"""Request builders and input validators for the Anthropic OAuth endpoints.

Everything here is pure: no network access and no randomness.
"""

import hmac
import logging
from typing import Any

from ..utils.errors import (
    CsrfStateMismatchError,
    InvalidAuthorizationCodeError,
    InvalidPkceVerifierError,
    InvalidStateError,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)

# Provider endpoints (fixed, not configurable)
SCOPE = "org:create_api_key user:profile user:inference"
TOKEN_URL = "https://console.anthropic.com/v1/oauth/token"
API_KEY_URL = "https://api.anthropic.com/api/oauth/claude_cli/create_api_key"
# Redirect URI registered with the provider and sent in the token exchange body
TOKEN_REDIRECT_URI = "https://console.anthropic.com/oauth/code/callback"

# Codes shorter than this are almost certainly truncated copy-paste
MIN_CODE_LENGTH = 10

# RFC 7636 section 4.1
MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128


def build_token_request(code: str, state: str, verifier: str, client_id: str) -> dict[str, Any]:
    """Build the authorization-code exchange request body."""
    return {
        "code": code,
        "state": state,
        "grant_type": "authorization_code",
        "client_id": client_id,
        "redirect_uri": TOKEN_REDIRECT_URI,
        "code_verifier": verifier,
    }


def build_refresh_request(refresh_token: str, client_id: str) -> dict[str, Any]:
    """Build the refresh-token grant request body."""
    return {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": client_id,
    }


def build_api_key_request() -> dict[str, Any]:
    """Build the (empty) API key creation request body."""
    return {}


def bearer_headers(access_token: str) -> dict[str, str]:
    """Authorization header for bearer-authenticated requests."""
    return {"authorization": f"Bearer {access_token}"}


def validate_code(code: str) -> None:
    """Validate authorization code format.

    Raises:
        InvalidAuthorizationCodeError: If the code is empty or too short
    """
    if not code:
        raise InvalidAuthorizationCodeError("Authorization code is empty")
    if len(code) < MIN_CODE_LENGTH:
        raise InvalidAuthorizationCodeError(
            f"Authorization code is too short ({len(code)} characters), "
            f"it may have been truncated"
        )


def validate_state(state: str) -> None:
    """Validate state token format.

    Raises:
        InvalidStateError: If the state is empty
    """
    if not state:
        raise InvalidStateError()


def validate_verifier(verifier: str) -> None:
    """Validate PKCE verifier format.

    Raises:
        InvalidPkceVerifierError: If the verifier is empty or not 43-128 characters
    """
    if not verifier:
        raise InvalidPkceVerifierError("PKCE verifier is empty")
    if not MIN_VERIFIER_LENGTH <= len(verifier) <= MAX_VERIFIER_LENGTH:
        raise InvalidPkceVerifierError(
            "PKCE verifier has invalid length (must be 43-128 characters)"
        )


def validate_access_token(token: str) -> None:
    """Validate access token format.

    Raises:
        InvalidTokenError: If the token is empty
    """
    if not token:
        raise InvalidTokenError("Access token is empty")


def validate_refresh_token(token: str) -> None:
    """Validate refresh token format.

    Raises:
        InvalidTokenError: If the token is empty
    """
    if not token:
        raise InvalidTokenError("Refresh token is empty")


def states_match(received: str | None, expected: str) -> bool:
    """Compare a received state to the expected one in constant time."""
    if received is None:
        return False
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


def parse_code_and_state(response: str, expected_state: str) -> tuple[str, str]:
    """Parse the provider's ``code#state`` response.

    The provider's code page shows the result as ``code#state``. The string is
    split at the first ``#`` and the returned state must equal
    ``expected_state`` exactly.

    A bare code (no ``#``) is accepted and paired with ``expected_state``.
    That path performs no CSRF check of its own: it is only safe when the
    caller already validated state through another channel, such as the
    callback listener.

    Args:
        response: Pasted response, ``code#state`` or a bare code
        expected_state: State from the flow that produced the authorization URL

    Returns:
        Tuple of (code, state)

    Raises:
        CsrfStateMismatchError: If the returned state differs from expected_state
    """
    code, sep, returned_state = response.partition("#")
    if not sep:
        logger.debug("No state in authorization response, trusting caller-supplied state")
        return response, expected_state

    if not states_match(returned_state, expected_state):
        logger.warning("State mismatch in authorization response")
        raise CsrfStateMismatchError(expected_state, returned_state)

    return code, returned_state
