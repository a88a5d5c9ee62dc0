"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application: API response records, configuration, the
retry policy, and download statistics.
"""

from .album import AlbumResult, Derivative, Photo, StreamMetadata
from .config import AlbumConfig
from .retry import DEFAULT_RETRY_POLICY, BackoffStrategy, RetryPolicy
from .stats import DownloadStats

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "AlbumConfig",
    "AlbumResult",
    "BackoffStrategy",
    "Derivative",
    "DownloadStats",
    "Photo",
    "RetryPolicy",
    "StreamMetadata",
]
