"""Configuration and logging setup."""

from .config import (
    DEFAULT_CLIENT_ID,
    DEFAULT_REDIRECT_PORT,
    AuthSettings,
    OAuthConfig,
    OAuthConfigBuilder,
)
from .logging_config import setup_logging

__all__ = [
    "DEFAULT_CLIENT_ID",
    "DEFAULT_REDIRECT_PORT",
    "AuthSettings",
    "OAuthConfig",
    "OAuthConfigBuilder",
    "setup_logging",
]
