"""
Client for the iCloud shared streams web API.
"""

import logging
from typing import Optional

import aiohttp

from icloud_album.core.enrich import enrich_photos_with_urls
from icloud_album.exceptions import SchemaError, StatusError, TransportError
from icloud_album.models.album import AlbumResult
from icloud_album.models.config import AlbumConfig

from .assets import AssetURLMap, AssetURLResolver
from .partition import StreamEndpoint, get_endpoint
from .redirect import RedirectOutcome, RedirectResolver
from .retry import RetryingExecutor
from .stream import StreamMetadataFetcher
from .transport import make_timeout

log = logging.getLogger(__name__)


class SharedStreamsClient:
    """
    Async client that turns an album token into metadata and URL-enriched photos.

    Pipeline, strictly sequential per fetch:
    token -> partition endpoint -> 330 redirect probe -> webstream -> webasseturls
    -> derivative enrichment.

    The aiohttp session may be supplied by the caller, in which case the caller
    owns it and `close()` leaves it open.
    """

    def __init__(
        self,
        config: Optional[AlbumConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        executor: Optional[RetryingExecutor] = None,
    ):
        """
        Initializes the API client.

        Args:
            config: Application settings; defaults are used when omitted.
            session: A caller-owned aiohttp session to issue requests with.
            executor: Retry strategy for the metadata and asset URL requests.
        """
        self.config = config or AlbumConfig()
        self.executor = executor or RetryingExecutor(self.config.retry_policy())
        self.timeout = make_timeout(self.config.request_timeout)

        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        return self._session

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.config.max_workers * 2,
                limit_per_host=self.config.max_workers,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept-Encoding": "gzip, deflate",
                },
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "SharedStreamsClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def resolve_endpoint(self, token: str) -> RedirectOutcome:
        """Computes the partition endpoint for `token` and follows any redirect."""
        candidate = get_endpoint(token)
        log.debug(f"Candidate endpoint for token: {candidate.base_url}")
        session = await self._initialize_session()
        return await RedirectResolver(session, self.timeout).resolve(candidate)

    async def fetch_asset_urls(
        self, endpoint: StreamEndpoint, photo_guids: list[str]
    ) -> AssetURLMap:
        session = await self._initialize_session()
        resolver = AssetURLResolver(session, self.executor, self.timeout)
        return await resolver.resolve(endpoint, photo_guids)

    async def fetch_album(self, token: str) -> AlbumResult:
        """
        Fetches an album by token.

        Asset URL failures that survive the retry policy do not abort the fetch
        unless `strict_asset_urls` is set: the photos are returned without URLs and
        the failure is recorded in `AlbumResult.warnings`.

        Raises:
            InvalidTokenError: Before any network call, for a malformed token.
            TransportError, StatusError: When the probe or stream request fails.
            SchemaError: When the stream response lacks the album name, or when
                an asset URL response is undecodable and `strict_asset_urls` is set.
        """
        outcome = await self.resolve_endpoint(token)
        endpoint = outcome.endpoint
        probe = outcome.probe if self.config.reuse_probe_response else None

        session = await self._initialize_session()
        fetcher = StreamMetadataFetcher(session, self.executor, self.timeout)
        metadata, photos = await fetcher.fetch(endpoint, probe=probe)

        warnings: list[str] = []
        guids = [photo.photo_guid for photo in photos if photo.photo_guid]
        try:
            url_map = await self.fetch_asset_urls(endpoint, guids)
        except (TransportError, StatusError, SchemaError) as e:
            if self.config.strict_asset_urls:
                raise
            message = f"Asset URL lookup failed; photos have no URLs: {e}"
            log.warning(f"[yellow]{message}[/yellow]")
            warnings.append(message)
            url_map = AssetURLMap()

        if url_map.degraded:
            warnings.append(
                "Asset URL lookup returned a degraded (400) response; "
                "photos have no URLs."
            )

        enrich_photos_with_urls(photos, url_map)

        unresolved = sum(
            1 for p in photos if not any(d.url for d in p.derivatives.values())
        )
        if photos and unresolved:
            log.debug(f"{unresolved}/{len(photos)} photo(s) have no resolved URL.")

        return AlbumResult(metadata=metadata, photos=photos, warnings=warnings)


async def fetch_album(
    token: str,
    session: Optional[aiohttp.ClientSession] = None,
    config: Optional[AlbumConfig] = None,
) -> AlbumResult:
    """Convenience wrapper: fetch one album with a short-lived client."""
    async with SharedStreamsClient(config=config, session=session) as client:
        return await client.fetch_album(token)
