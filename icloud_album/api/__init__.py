"""
Shared Streams API Layer.

This package handles all communication with the iCloud shared streams web API:
partition routing, the 330 redirect, retries, and response decoding.
"""

from .assets import AssetURLMap, AssetURLResolver
from .client import SharedStreamsClient, fetch_album
from .partition import StreamEndpoint, calculate_partition, get_base_url
from .redirect import RedirectResolver
from .retry import RetryingExecutor
from .stream import StreamMetadataFetcher, decode_stream_payload

__all__ = [
    "AssetURLMap",
    "AssetURLResolver",
    "RedirectResolver",
    "RetryingExecutor",
    "SharedStreamsClient",
    "StreamEndpoint",
    "StreamMetadataFetcher",
    "calculate_partition",
    "decode_stream_payload",
    "fetch_album",
    "get_base_url",
]
