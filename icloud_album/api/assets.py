"""
Resolves photo GUIDs to downloadable asset URLs via the `webasseturls` endpoint.
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence

import aiohttp

from icloud_album.exceptions import SchemaError, StatusError

from .partition import StreamEndpoint
from .retry import RetryingExecutor
from .transport import post_json

log = logging.getLogger(__name__)

# The service rejects some valid partial queries with 400; that is not fatal.
DEGRADED_STATUS = 400


class AssetURLMap(Mapping[str, str]):
    """
    A read-only mapping of opaque id (photo GUID or derivative checksum) to URL.

    `degraded` is True when the map is empty because the service answered with its
    degraded-success status rather than with data.
    """

    def __init__(
        self, urls: Optional[Mapping[str, str]] = None, degraded: bool = False
    ):
        self._urls: Dict[str, str] = dict(urls or {})
        self.degraded = degraded

    def __getitem__(self, key: str) -> str:
        return self._urls[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __repr__(self) -> str:
        return f"AssetURLMap({len(self._urls)} urls, degraded={self.degraded})"


def decode_asset_urls(payload: Any) -> AssetURLMap:
    """
    Builds `https://{url_location}{url_path}` for every entry under `items`, skipping
    entries that lack either fragment.
    """
    if not isinstance(payload, dict):
        raise SchemaError("Asset URL response must be a JSON object.")

    items = payload.get("items") or {}
    if not isinstance(items, dict):
        raise SchemaError("Asset URL response 'items' must be a JSON object.")

    urls = {}
    for asset_id, item in items.items():
        if not isinstance(item, dict):
            item = {}
        location = item.get("url_location")
        path = item.get("url_path")
        if not (isinstance(location, str) and location) or not (
            isinstance(path, str) and path
        ):
            log.warning(f"Missing url_location or url_path for id {asset_id}")
            continue
        urls[asset_id] = f"https://{location}{path}"
    return AssetURLMap(urls)


class AssetURLResolver:
    """Fetches the id -> URL map for a list of photo GUIDs, with retries."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        executor: RetryingExecutor,
        timeout: aiohttp.ClientTimeout,
    ):
        self._session = session
        self._executor = executor
        self._timeout = timeout

    async def resolve(
        self, endpoint: StreamEndpoint, photo_guids: Sequence[str]
    ) -> AssetURLMap:
        """
        Resolves asset URLs.

        Returns:
            The id -> URL map. Empty, without a request, when `photo_guids` is empty.
            Empty and flagged `degraded` when the service answers 400.

        Raises:
            TransportError, StatusError: When the request still fails after retries.
            SchemaError: When a 2xx body cannot be decoded.
        """
        if not photo_guids:
            log.warning("Asset URL lookup called with no photo GUIDs.")
            return AssetURLMap()

        payload = {"photoGuids": list(photo_guids)}
        try:
            result = await self._executor.execute(
                lambda: post_json(
                    self._session, endpoint.asset_urls_url, payload, self._timeout
                ),
                endpoint="webasseturls",
            )
        except StatusError as e:
            if e.status != DEGRADED_STATUS:
                raise
            log.warning(
                f"[yellow]webasseturls returned {DEGRADED_STATUS}; continuing "
                "without asset URLs.[/yellow]"
            )
            return AssetURLMap(degraded=True)

        try:
            body = result.json()
        except ValueError as e:
            raise SchemaError(f"Asset URL response is not valid JSON: {e}") from e

        urls = decode_asset_urls(body)
        log.debug(f"Resolved {len(urls)} asset URL(s) for {len(photo_guids)} photo(s).")
        return urls
