"""Classification of failed provider responses.

Classification is advisory: it attaches a remediation hint to the raw
status/body so a UI layer can show something actionable. It never changes
retry behavior.
"""

from enum import Enum

from .errors import HttpError


class HttpErrorKind(str, Enum):
    """Categories of failed HTTP responses."""

    BAD_REQUEST = "bad_request"
    AUTHENTICATION_FAILED = "authentication_failed"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    UNCLASSIFIED = "unclassified"


_HINTS: dict[HttpErrorKind, str] = {
    HttpErrorKind.AUTHENTICATION_FAILED: (
        "Authentication failed - the access token may be invalid or expired."
    ),
    HttpErrorKind.FORBIDDEN: (
        "Access forbidden - you may not have permission to perform this action."
    ),
    HttpErrorKind.NOT_FOUND: "Endpoint not found - the API URL may have changed.",
    HttpErrorKind.RATE_LIMITED: "Rate limit exceeded - please wait before retrying.",
    HttpErrorKind.SERVER_ERROR: (
        "Server error - this is an issue on Anthropic's side. Please try again later."
    ),
}


def _bad_request_hint(body: str) -> str:
    """Pick a 400 hint based on which parameter the body complains about."""
    if "code" in body:
        return (
            "The authorization code may be invalid, expired, or already used. "
            "Please try the flow again."
        )
    if "verifier" in body:
        return (
            "The PKCE verifier doesn't match. "
            "Make sure you're using the verifier from the same flow."
        )
    if "state" in body:
        return "The state parameter is invalid. This could indicate a security issue."
    return "Bad request - check that all parameters are correct."


def classify_status(status: int) -> HttpErrorKind:
    """Map an HTTP status code to an :class:`HttpErrorKind`."""
    if status == 400:
        return HttpErrorKind.BAD_REQUEST
    if status == 401:
        return HttpErrorKind.AUTHENTICATION_FAILED
    if status == 403:
        return HttpErrorKind.FORBIDDEN
    if status == 404:
        return HttpErrorKind.NOT_FOUND
    if status == 429:
        return HttpErrorKind.RATE_LIMITED
    if 500 <= status <= 599:
        return HttpErrorKind.SERVER_ERROR
    return HttpErrorKind.UNCLASSIFIED


def classify_http_error(status: int, body: str) -> HttpError:
    """Build a classified :class:`HttpError` for a failed response.

    Args:
        status: HTTP status code of the response
        body: Response body text

    Returns:
        HttpError carrying the kind and remediation hint
    """
    kind = classify_status(status)
    if kind is HttpErrorKind.BAD_REQUEST:
        hint: str | None = _bad_request_hint(body)
    else:
        hint = _HINTS.get(kind)
    return HttpError(status=status, body=body, kind=kind, hint=hint)
