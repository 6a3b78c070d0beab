"""Open the authorization URL in the user's browser."""

import logging
import webbrowser

from ..utils.errors import BrowserLaunchError

logger = logging.getLogger(__name__)


def open_browser(url: str) -> None:
    """Open ``url`` in the default web browser.

    Failure is never fatal to a flow: callers should fall back to showing
    the URL for manual use.

    Raises:
        BrowserLaunchError: If no browser could be launched
    """
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise BrowserLaunchError(f"Failed to open browser: {e}") from e

    if not opened:
        raise BrowserLaunchError("Failed to open browser: no runnable browser found")
    logger.debug("Opened authorization URL in browser")
