"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import Optional


class SharedAlbumError(Exception):
    """Base exception for all application-specific errors."""


class InvalidTokenError(SharedAlbumError):
    """Raised when an album token is empty or starts with a non-base62 character."""


class TransportError(SharedAlbumError):
    """Raised when no HTTP response could be obtained (connection, DNS, timeout)."""


class StatusError(SharedAlbumError):
    """Raised when the server answers with a non-2xx status that is not tolerated."""

    def __init__(
        self, status: int, endpoint: Optional[str] = None, message: Optional[str] = None
    ):
        self.status = status
        self.endpoint = endpoint
        if message is None:
            target = f" for {endpoint}" if endpoint else ""
            message = f"Request failed with status {status}{target}"
        super().__init__(message)


class SchemaError(SharedAlbumError):
    """
    Raised when a response cannot be decoded or lacks a field treated as mandatory.
    """


class NoDerivativeError(SharedAlbumError):
    """Raised when a photo has no derivative with a resolved download URL."""


class ConfigurationError(SharedAlbumError):
    """Raised for issues related to configuration loading or validation."""
