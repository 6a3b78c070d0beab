"""Tests for the OAuth token set."""

import pytest

from anthropic_auth.oauth.oauth_tokens import (
    DEFAULT_EXPIRES_IN,
    EXPIRY_BUFFER_SECONDS,
    MAX_TOKEN_LIFETIME_SECONDS,
    TokenSet,
)
from anthropic_auth.utils.errors import InvalidTokenError


def make_tokens(expires_at: int, access: str = "access", refresh: str = "refresh") -> TokenSet:
    return TokenSet(access_token=access, refresh_token=refresh, expires_at=expires_at)


class TestExpiry:
    """Tests for expiry arithmetic."""

    def test_expires_in_counts_down(self, clock) -> None:
        """Test expires_in is the distance from now to expires_at."""
        tokens = make_tokens(int(clock()) + 1000)
        assert tokens.expires_in(clock) == 1000

    def test_expires_in_floors_at_zero(self, clock) -> None:
        """Test expires_in never goes negative for past expiry."""
        tokens = make_tokens(int(clock()) - 50)
        assert tokens.expires_in(clock) == 0

    def test_not_expired_outside_buffer(self, clock) -> None:
        """Test a token with more than five minutes left is not expired."""
        tokens = make_tokens(int(clock()) + EXPIRY_BUFFER_SECONDS + 1)
        assert tokens.is_expired(clock) is False

    def test_expired_at_buffer_boundary(self, clock) -> None:
        """Test a token with exactly five minutes left is due for renewal."""
        tokens = make_tokens(int(clock()) + EXPIRY_BUFFER_SECONDS)
        assert tokens.is_expired(clock) is True

    def test_expired_in_past(self, clock) -> None:
        """Test a token already past expiry is expired."""
        tokens = make_tokens(int(clock()) - 1)
        assert tokens.is_expired(clock) is True

    def test_uses_wall_clock_by_default(self) -> None:
        """Test expiry checks fall back to the system clock."""
        tokens = make_tokens(2**40)
        assert tokens.is_expired() is False


class TestValidate:
    """Tests for structural validation."""

    def test_valid_tokens_pass(self, valid_tokens: TokenSet, clock) -> None:
        """Test a well-formed token set validates."""
        valid_tokens.validate(clock)

    def test_empty_access_token(self, clock) -> None:
        """Test empty access token is rejected."""
        with pytest.raises(InvalidTokenError, match="access_token"):
            make_tokens(int(clock()) + 3600, access="").validate(clock)

    def test_empty_refresh_token(self, clock) -> None:
        """Test empty refresh token is rejected."""
        with pytest.raises(InvalidTokenError, match="refresh_token"):
            make_tokens(int(clock()) + 3600, refresh="").validate(clock)

    @pytest.mark.parametrize(
        "access,refresh",
        [(12345, "refresh"), ("access", ["r"]), (None, "refresh")],
    )
    def test_non_string_tokens(self, clock, access, refresh) -> None:
        """Test token values of the wrong type are rejected."""
        with pytest.raises(InvalidTokenError, match="not a string"):
            make_tokens(int(clock()) + 3600, access=access, refresh=refresh).validate(clock)

    @pytest.mark.parametrize("expires_at", [0, -1])
    def test_non_positive_expiry(self, clock, expires_at: int) -> None:
        """Test zero or negative expires_at is rejected."""
        with pytest.raises(InvalidTokenError, match="invalid"):
            make_tokens(expires_at).validate(clock)

    def test_expiry_in_past(self, clock) -> None:
        """Test expiry before now is rejected."""
        with pytest.raises(InvalidTokenError, match="past"):
            make_tokens(int(clock()) - 1).validate(clock)

    def test_expiry_exactly_now_is_accepted(self, clock) -> None:
        """Test the lower bound of the plausible window is inclusive."""
        make_tokens(int(clock())).validate(clock)

    def test_expiry_at_one_year_is_accepted(self, clock) -> None:
        """Test the upper bound of the plausible window is inclusive."""
        make_tokens(int(clock()) + MAX_TOKEN_LIFETIME_SECONDS).validate(clock)

    def test_expiry_beyond_one_year(self, clock) -> None:
        """Test expiry more than a year out is rejected."""
        with pytest.raises(InvalidTokenError, match="future"):
            make_tokens(int(clock()) + MAX_TOKEN_LIFETIME_SECONDS + 1).validate(clock)


class TestFromOAuthResponse:
    """Tests for building tokens from a token endpoint response."""

    def test_anchors_expiry_to_clock(self, token_payload, clock) -> None:
        """Test relative expires_in becomes an absolute timestamp."""
        tokens = TokenSet.from_oauth_response(token_payload, clock=clock)

        assert tokens.access_token == token_payload["access_token"]
        assert tokens.refresh_token == token_payload["refresh_token"]
        assert tokens.expires_at == int(clock()) + 3600

    def test_missing_expires_in_defaults_to_one_hour(self, token_payload, clock) -> None:
        """Test a missing expires_in is treated as one hour."""
        del token_payload["expires_in"]
        tokens = TokenSet.from_oauth_response(token_payload, clock=clock)
        assert tokens.expires_at == int(clock()) + DEFAULT_EXPIRES_IN

    def test_string_expires_in_is_coerced(self, token_payload, clock) -> None:
        """Test numeric strings are accepted for expires_in."""
        token_payload["expires_in"] = "120"
        tokens = TokenSet.from_oauth_response(token_payload, clock=clock)
        assert tokens.expires_in(clock) == 120

    def test_non_numeric_expires_in(self, token_payload, clock) -> None:
        """Test garbage expires_in is reported as an invalid token."""
        token_payload["expires_in"] = "soon"
        with pytest.raises(InvalidTokenError, match="expires_in"):
            TokenSet.from_oauth_response(token_payload, clock=clock)

    def test_missing_tokens_fail_validation(self, clock) -> None:
        """Test missing token fields surface through validate()."""
        tokens = TokenSet.from_oauth_response({"expires_in": 3600}, clock=clock)

        assert tokens.access_token == ""
        with pytest.raises(InvalidTokenError):
            tokens.validate(clock)


class TestSerialization:
    """Tests for dict conversion and repr masking."""

    def test_dict_round_trip(self, valid_tokens: TokenSet) -> None:
        """Test to_dict/from_dict preserve every field."""
        assert TokenSet.from_dict(valid_tokens.to_dict()) == valid_tokens

    def test_repr_masks_secrets(self, valid_tokens: TokenSet) -> None:
        """Test token values never appear in repr."""
        text = repr(valid_tokens)

        assert valid_tokens.access_token not in text
        assert valid_tokens.refresh_token not in text
        assert str(valid_tokens.expires_at) in text

    def test_token_set_is_immutable(self, valid_tokens: TokenSet) -> None:
        """Test token sets cannot be mutated in place."""
        with pytest.raises(AttributeError):
            valid_tokens.access_token = "other"  # type: ignore[misc]
