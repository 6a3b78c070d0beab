"""Logging setup for scripts built on anthropic_auth.

Library modules only create module loggers; handlers are configured here,
once, by the calling script.
"""

import logging
from pathlib import Path

from .config import AuthSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    name: str = "anthropic_auth",
    level: str | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the root logger.

    Args:
        name: Logger name to return (typically __name__ of the caller)
        level: Log level; defaults to ``ANTHROPIC_AUTH_LOG_LEVEL`` (INFO)
        log_file: Also write log records to this file

    Returns:
        Logger named ``name``
    """
    if level is None:
        level = AuthSettings().log_level

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger(name)
