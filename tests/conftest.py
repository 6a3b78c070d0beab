"""Pytest configuration and fixtures for anthropic_auth tests."""

import json
from typing import Any

import pytest

from anthropic_auth.core.config import OAuthConfig
from anthropic_auth.oauth.oauth_tokens import TokenSet
from anthropic_auth.oauth.transport import PreparedRequest, TransportResponse

FIXED_NOW = 1_700_000_000


def fixed_clock() -> float:
    """Clock pinned to a known instant."""
    return float(FIXED_NOW)


def json_response(payload: Any, status_code: int = 200) -> TransportResponse:
    """Build a transport response with a JSON body."""
    return TransportResponse(status_code=status_code, text=json.dumps(payload))


class FakeSyncTransport:
    """Blocking transport that records requests and replays canned responses."""

    def __init__(self, *responses: TransportResponse):
        self.responses = list(responses)
        self.requests: list[PreparedRequest] = []

    def post(self, request: PreparedRequest) -> TransportResponse:
        self.requests.append(request)
        return self.responses.pop(0)


class FakeAsyncTransport:
    """Suspending counterpart of :class:`FakeSyncTransport`."""

    def __init__(self, *responses: TransportResponse):
        self.responses = list(responses)
        self.requests: list[PreparedRequest] = []

    async def post(self, request: PreparedRequest) -> TransportResponse:
        self.requests.append(request)
        return self.responses.pop(0)


@pytest.fixture
def clock():
    """Deterministic time source."""
    return fixed_clock


@pytest.fixture
def config() -> OAuthConfig:
    """Client configuration using the default client id and local redirect."""
    return OAuthConfig()


@pytest.fixture
def token_payload() -> dict[str, Any]:
    """Successful token endpoint response body."""
    return {
        "access_token": "sk-ant-REDACTED",
        "refresh_token": "sk-ant-REDACTED",
        "expires_in": 3600,
        "token_type": "Bearer",
    }


@pytest.fixture
def valid_tokens() -> TokenSet:
    """A token set valid for one hour from the fixed clock."""
    return TokenSet(
        access_token="sk-ant-REDACTED",
        refresh_token="sk-ant-REDACTED",
        expires_at=FIXED_NOW + 3600,
    )


@pytest.fixture
def respond():
    """Factory for JSON transport responses."""
    return json_response


@pytest.fixture
def make_sync_transport():
    """Factory for recording blocking transports."""
    return FakeSyncTransport


@pytest.fixture
def make_async_transport():
    """Factory for recording suspending transports."""
    return FakeAsyncTransport
