"""
Fetches and decodes the `webstream` response: album metadata plus the ordered list
of photos with their derivatives.
"""

import logging
from typing import Any, List, Optional, Tuple

import aiohttp
from pydantic import ValidationError

from icloud_album.exceptions import SchemaError
from icloud_album.models.album import Photo, StreamMetadata

from .partition import StreamEndpoint
from .redirect import STREAM_REQUEST_BODY
from .retry import RetryingExecutor
from .transport import HttpResult, post_json

log = logging.getLogger(__name__)


def _decode_photos(raw_photos: Any) -> List[Photo]:
    if raw_photos is None:
        return []
    if not isinstance(raw_photos, list):
        log.warning(
            f"Expected 'photos' to be a list, got {type(raw_photos).__name__}; "
            "treating the album as empty."
        )
        return []

    photos = []
    for position, raw in enumerate(raw_photos):
        try:
            photo = Photo.model_validate(raw)
        except ValidationError as e:
            log.warning(
                f"Skipping undecodable photo at position {position}: "
                f"{e.error_count()} validation error(s)."
            )
            log.debug(f"Photo decode errors: {e}")
            continue
        if not photo.photo_guid:
            log.warning(f"Photo at position {position} has no photoGuid.")
        photos.append(photo)
    return photos


def decode_stream_payload(payload: Any) -> Tuple[StreamMetadata, List[Photo]]:
    """
    Decodes a `webstream` JSON payload tolerantly.

    Unknown fields are ignored and optional fields fall back to defaults. The album
    name is the only mandatory field.

    Returns:
        A tuple of (metadata, photos in server order).

    Raises:
        SchemaError: If the payload is not an object or lacks a non-empty
            `streamName`.
    """
    if not isinstance(payload, dict):
        raise SchemaError(
            f"Stream response must be a JSON object, got {type(payload).__name__}."
        )

    stream_name = payload.get("streamName")
    if not isinstance(stream_name, str) or not stream_name:
        raise SchemaError("missing required field: streamName")

    try:
        metadata = StreamMetadata.model_validate(payload)
    except ValidationError as e:
        raise SchemaError(f"Invalid stream metadata: {e}") from e

    return metadata, _decode_photos(payload.get("photos"))


class StreamMetadataFetcher:
    """Retrieves album metadata and photos from the effective endpoint."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        executor: RetryingExecutor,
        timeout: aiohttp.ClientTimeout,
    ):
        self._session = session
        self._executor = executor
        self._timeout = timeout

    async def fetch(
        self, endpoint: StreamEndpoint, probe: Optional[HttpResult] = None
    ) -> Tuple[StreamMetadata, List[Photo]]:
        """
        Fetches and decodes the stream.

        Args:
            endpoint: The effective (post-redirect) endpoint.
            probe: A successful response already obtained by the redirect probe.
                When given, it is decoded instead of issuing a second request.
        """
        if probe is not None and probe.ok:
            log.debug("Reusing the redirect probe response for stream metadata.")
            result = probe
        else:
            result = await self._executor.execute(
                lambda: post_json(
                    self._session,
                    endpoint.stream_url,
                    STREAM_REQUEST_BODY,
                    self._timeout,
                ),
                endpoint="webstream",
            )

        try:
            payload = result.json()
        except ValueError as e:
            raise SchemaError(f"Stream response is not valid JSON: {e}") from e

        metadata, photos = decode_stream_payload(payload)
        log.debug(
            f"Decoded stream '{metadata.stream_name}' with {len(photos)} photo(s)."
        )
        return metadata, photos
