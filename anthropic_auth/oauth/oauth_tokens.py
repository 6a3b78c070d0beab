"""OAuth token set with expiry arithmetic and structural validation."""

import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from ..utils.errors import InvalidTokenError

# Tokens within this many seconds of expiry are due for renewal
EXPIRY_BUFFER_SECONDS = 300

# Expiry further out than this is treated as nonsensical
MAX_TOKEN_LIFETIME_SECONDS = 365 * 24 * 60 * 60

# Used when the provider omits expires_in
DEFAULT_EXPIRES_IN = 3600

Clock = Callable[[], float]


@dataclass(frozen=True)
class TokenSet:
    """OAuth access/refresh token pair.

    Replaced wholesale on refresh; never mutated.

    Attributes:
        access_token: Short-lived API credential
        refresh_token: Credential used to obtain a new token set
        expires_at: Absolute expiry as Unix timestamp (seconds)
    """

    access_token: str
    refresh_token: str
    expires_at: int

    def expires_in(self, clock: Clock = time.time) -> int:
        """Seconds until the access token expires, floored at zero."""
        return max(0, self.expires_at - int(clock()))

    def is_expired(self, clock: Clock = time.time) -> bool:
        """Check if the token is expired or will expire within 5 minutes.

        The buffer guards against the token expiring between check and use.
        """
        return self.expires_in(clock) <= EXPIRY_BUFFER_SECONDS

    def validate(self, clock: Clock = time.time) -> None:
        """Validate the token structure.

        Raises:
            InvalidTokenError: If a token is empty or not a string, or the
                expiry is not plausible
        """
        for name in ("access_token", "refresh_token"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise InvalidTokenError(f"{name} is not a string")
            if not value:
                raise InvalidTokenError(f"{name} is empty")
        if not isinstance(self.expires_at, int) or isinstance(self.expires_at, bool):
            raise InvalidTokenError("expires_at is not an integer")
        if self.expires_at <= 0:
            raise InvalidTokenError("expires_at is invalid")
        now = int(clock())
        if self.expires_at < now:
            raise InvalidTokenError("expires_at is in the past")
        if self.expires_at > now + MAX_TOKEN_LIFETIME_SECONDS:
            raise InvalidTokenError("expires_at is too far in the future")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenSet":
        """Create from dictionary."""
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
        )

    @classmethod
    def from_oauth_response(
        cls, response_data: dict[str, Any], clock: Clock = time.time
    ) -> "TokenSet":
        """Create from an OAuth token endpoint response.

        The relative ``expires_in`` is converted to an absolute timestamp at
        receipt time. Missing fields become empty values so that
        :meth:`validate` reports them.

        Args:
            response_data: JSON response from token endpoint
            clock: Time source returning the current Unix timestamp

        Returns:
            TokenSet with expires_at anchored to the current time
        """
        expires_in = response_data.get("expires_in")
        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(f"expires_in is not a number: {expires_in!r}") from e

        return cls(
            access_token=response_data.get("access_token") or "",
            refresh_token=response_data.get("refresh_token") or "",
            expires_at=int(clock()) + expires_in,
        )

    def __repr__(self) -> str:
        return f"TokenSet(access_token='****', refresh_token='****', expires_at={self.expires_at})"
