"""Local callback listener for the OAuth redirect.

The listener is a short-lived aiohttp server exposing ``GET /callback``. It
validates exactly one inbound redirect against the flow's CSRF state, hands
the outcome to the waiting caller through a :class:`OneShotChannel`, and is
then torn down. Requests arriving after the outcome was delivered get a
generic page and cannot change it.

The listener has no timeout of its own; wrap :meth:`CallbackListener.wait`
(or :func:`run_callback_listener`) in :func:`asyncio.wait_for` to bound the
wait. Cancellation stops the listener and releases the port.
"""

import asyncio
import html
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from aiohttp import web

from ..core.config import DEFAULT_REDIRECT_PORT
from ..utils.errors import (
    CsrfStateMismatchError,
    ListenerBindError,
    ListenerShutdownError,
    MissingCodeError,
    ProviderDeniedError,
)
from .oauth_requests import states_match

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
CALLBACK_PATH = "/callback"

T = TypeVar("T")


class CallbackOutcome(str, Enum):
    """Terminal outcome of a callback listener."""

    SUCCESS = "success"
    PROVIDER_DENIED = "provider_denied"
    STATE_MISMATCH = "state_mismatch"
    MISSING_CODE = "missing_code"


@dataclass(frozen=True)
class CallbackResult:
    """Parsed outcome of the provider's redirect.

    Attributes:
        outcome: Which terminal transition the listener took
        code: Authorization code (SUCCESS only)
        state: State received in the redirect, if any
        error: OAuth error code (PROVIDER_DENIED only)
        error_description: Provider's error description, if any
    """

    outcome: CallbackOutcome
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is CallbackOutcome.SUCCESS

    def unwrap(self, expected_state: str | None = None) -> tuple[str, str]:
        """Return ``(code, state)`` or raise the error matching the outcome.

        Args:
            expected_state: Used only to word a state-mismatch error

        Raises:
            ProviderDeniedError: If the provider returned an OAuth error
            CsrfStateMismatchError: If the state did not match
            MissingCodeError: If no code was present
        """
        if self.outcome is CallbackOutcome.SUCCESS and self.code and self.state:
            return self.code, self.state
        if self.outcome is CallbackOutcome.PROVIDER_DENIED:
            raise ProviderDeniedError(self.error or "unknown_error", self.error_description)
        if self.outcome is CallbackOutcome.STATE_MISMATCH:
            raise CsrfStateMismatchError(expected_state or "", self.state)
        raise MissingCodeError()


_ABANDONED = object()


class OneShotChannel(Generic[T]):
    """Single-use, exactly-once handoff between a producer and one waiter.

    The first :meth:`send` wins; later sends are no-ops. :meth:`abandon`
    closes the channel without a value, and the waiter then gets
    :class:`ListenerShutdownError`. Must be created inside a running loop.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def closed(self) -> bool:
        """True once a value was delivered or the channel was abandoned."""
        return self._future.done()

    def send(self, value: T) -> bool:
        """Deliver ``value`` if nothing was delivered yet.

        Returns:
            True if this call delivered the value, False if it was a no-op
        """
        if self._future.done():
            return False
        self._future.set_result(value)
        return True

    def abandon(self) -> bool:
        """Close the channel without delivering a value.

        Returns:
            True if this call closed the channel, False if already closed
        """
        if self._future.done():
            return False
        self._future.set_result(_ABANDONED)
        return True

    async def receive(self) -> T:
        """Wait for the delivered value.

        Cancelling the waiter does not close the channel.

        Raises:
            ListenerShutdownError: If the channel was abandoned
        """
        value = await asyncio.shield(self._future)
        if value is _ABANDONED:
            raise ListenerShutdownError()
        return value


_PAGE_STYLE = "font-family: sans-serif; text-align: center; padding: 50px;"


def _render_page(title: str, heading: str, color: str, *paragraphs: str) -> str:
    body = "\n".join(f"<p>{p}</p>" for p in paragraphs)
    return f"""<html>
<head><title>{title}</title></head>
<body style="{_PAGE_STYLE}">
    <h1 style="color: {color};">{heading}</h1>
    {body}
</body>
</html>"""


def _failure_page(*paragraphs: str) -> str:
    return _render_page(
        "Authorization Failed",
        "Authorization Failed",
        "red",
        *paragraphs,
        "You can close this window.",
    )


SUCCESS_PAGE = _render_page(
    "Authorization Successful",
    "Authorization Successful!",
    "green",
    "You have successfully authorized the application.",
    "You can close this window and return to the terminal.",
)
STATE_MISMATCH_PAGE = _failure_page("Security validation failed. Please try again.")
MISSING_CODE_PAGE = _failure_page("No authorization code received.")
ALREADY_COMPLETED_PAGE = _render_page(
    "Authorization Already Completed",
    "Authorization Already Completed",
    "gray",
    "This authorization request has already been handled.",
    "You can close this window.",
)


class CallbackListener:
    """Single-use local HTTP endpoint receiving the OAuth redirect.

    Example:
        async with CallbackListener(flow.csrf_state, port=1455) as listener:
            open_browser(flow.authorization_url)
            result = await asyncio.wait_for(listener.wait(), timeout=300)
    """

    def __init__(
        self,
        expected_state: str,
        port: int = DEFAULT_REDIRECT_PORT,
        host: str = DEFAULT_HOST,
    ):
        """Initialize the listener (nothing is bound until :meth:`start`).

        Args:
            expected_state: CSRF state of the flow being completed
            port: TCP port to bind (0 picks a free port)
            host: Interface to bind
        """
        self.expected_state = expected_state
        self.host = host
        self._requested_port = port
        self._runner: web.AppRunner | None = None
        self._channel: OneShotChannel[CallbackResult] | None = None

    @property
    def port(self) -> int:
        """Port actually bound (differs from the requested one for port 0)."""
        if self._runner is not None and self._runner.addresses:
            return self._runner.addresses[0][1]
        return self._requested_port

    @property
    def callback_url(self) -> str:
        return f"http://{self.host}:{self.port}{CALLBACK_PATH}"

    async def start(self) -> None:
        """Bind the port and start serving.

        Raises:
            ListenerBindError: If the port cannot be bound
        """
        if self._runner is not None:
            raise RuntimeError("Callback listener already started")

        self._channel = OneShotChannel()

        app = web.Application()
        app.router.add_get(CALLBACK_PATH, self._handle_callback)

        # No access log: the query string carries the authorization code
        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self._requested_port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            self._channel.abandon()
            raise ListenerBindError(self.host, self._requested_port, str(e)) from e

        self._runner = runner
        logger.info(f"Callback listener waiting on {self.callback_url}")

    async def wait(self) -> CallbackResult:
        """Wait for the single outcome, then stop the listener.

        Raises:
            ListenerShutdownError: If the listener stopped without an outcome
        """
        if self._channel is None:
            raise ListenerShutdownError("Callback listener was never started")
        try:
            result = await self._channel.receive()
        finally:
            await self.stop()
        logger.info(f"Callback listener finished: {result.outcome.value}")
        return result

    async def stop(self) -> None:
        """Stop accepting connections and release the port. Idempotent."""
        if self._channel is not None and self._channel.abandon():
            logger.warning("Callback listener stopped before receiving a redirect")
        if self._runner is not None:
            runner, self._runner = self._runner, None
            await runner.cleanup()
            logger.debug("Callback listener released its port")

    async def __aenter__(self) -> "CallbackListener":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()

    def _evaluate(self, query) -> CallbackResult:
        error = query.get("error")
        state = query.get("state")
        code = query.get("code")

        if error is not None:
            return CallbackResult(
                outcome=CallbackOutcome.PROVIDER_DENIED,
                state=state,
                error=error,
                error_description=query.get("error_description"),
            )
        if not states_match(state, self.expected_state):
            return CallbackResult(outcome=CallbackOutcome.STATE_MISMATCH, state=state)
        if not code:
            return CallbackResult(outcome=CallbackOutcome.MISSING_CODE, state=state)
        return CallbackResult(outcome=CallbackOutcome.SUCCESS, code=code, state=state)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        channel = self._channel
        if channel is None or channel.closed:
            logger.debug("Ignoring redirect received after the outcome was delivered")
            return web.Response(text=ALREADY_COMPLETED_PAGE, status=409, content_type="text/html")

        result = self._evaluate(request.query)
        if not channel.send(result):
            return web.Response(text=ALREADY_COMPLETED_PAGE, status=409, content_type="text/html")

        if result.outcome is CallbackOutcome.SUCCESS:
            logger.info("Received authorization code")
            return web.Response(text=SUCCESS_PAGE, content_type="text/html")

        if result.outcome is CallbackOutcome.PROVIDER_DENIED:
            logger.error(f"Authorization error: {result.error}")
            details = [f"<strong>Error:</strong> {html.escape(result.error or '')}"]
            if result.error_description:
                details.append(html.escape(result.error_description))
            page = _failure_page(*details)
        elif result.outcome is CallbackOutcome.STATE_MISMATCH:
            logger.warning("State mismatch in callback - possible CSRF attack")
            page = STATE_MISMATCH_PAGE
        else:
            logger.error("No authorization code in callback")
            page = MISSING_CODE_PAGE

        return web.Response(text=page, status=400, content_type="text/html")


async def run_callback_listener(
    port: int,
    expected_state: str,
    host: str = DEFAULT_HOST,
    on_ready: Callable[[int], None] | None = None,
) -> CallbackResult:
    """Run a callback listener until it receives one redirect.

    Args:
        port: TCP port to bind
        expected_state: CSRF state of the flow being completed
        host: Interface to bind
        on_ready: Called with the bound port once the listener accepts
            connections (e.g. to open the browser)

    Returns:
        CallbackResult describing the single outcome

    Raises:
        ListenerBindError: If the port cannot be bound
        ListenerShutdownError: If the listener stopped without an outcome
    """
    listener = CallbackListener(expected_state, port=port, host=host)
    await listener.start()
    try:
        if on_ready is not None:
            on_ready(listener.port)
        return await listener.wait()
    finally:
        await listener.stop()


def run_callback_listener_blocking(
    port: int,
    expected_state: str,
    timeout: float | None = None,
    host: str = DEFAULT_HOST,
    on_ready: Callable[[int], None] | None = None,
) -> CallbackResult:
    """Blocking variant of :func:`run_callback_listener`.

    Runs its own event loop, so it must not be called from inside one.

    Args:
        timeout: Seconds to wait for the redirect (None waits forever)

    Raises:
        TimeoutError: If no redirect arrived within ``timeout``
    """
    return asyncio.run(
        asyncio.wait_for(
            run_callback_listener(port, expected_state, host=host, on_ready=on_ready),
            timeout=timeout,
        )
    )
