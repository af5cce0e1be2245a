"""Signed JWTs and request plumbing for the OpenTok REST API."""
from .core.config import DEFAULT_API_HOST, Settings, get_settings
from .core.errors import APIError, ConfigurationError, OpenTokError, SigningError
from .core.log import configure_logging
from .schemas.tokens import MAX_TOKEN_TTL_SECONDS, Claims, IssueType
from .services.client import AUTH_HEADER, HttpDoer, OpenTok
from .services.tokens import TokenIssuer, decode_token

__all__ = [
    "APIError",
    "AUTH_HEADER",
    "Claims",
    "ConfigurationError",
    "DEFAULT_API_HOST",
    "HttpDoer",
    "IssueType",
    "MAX_TOKEN_TTL_SECONDS",
    "OpenTok",
    "OpenTokError",
    "Settings",
    "SigningError",
    "TokenIssuer",
    "configure_logging",
    "decode_token",
    "get_settings",
]

__version__ = "0.1.0"
