"""Exceptions raised by the OpenTok auth helpers."""
from __future__ import annotations


class OpenTokError(RuntimeError):
    """Base class for every error raised by this package."""


class ConfigurationError(OpenTokError, ValueError):
    """Raised when the client is given an unusable setting, such as an empty host."""


class SigningError(OpenTokError):
    """Raised when the JWT signing primitive rejects the claims or the secret."""


class APIError(OpenTokError):
    """Raised when the OpenTok REST API answers with an error status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"OpenTok API returned {status_code}: {message}" if message else f"OpenTok API returned {status_code}")
