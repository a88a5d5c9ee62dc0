"""
Handles the non-standard HTTP 330 status the shared streams service uses to point a
client at the partition host that actually owns an album.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp

from icloud_album.exceptions import SchemaError, TransportError

from .partition import StreamEndpoint, build_base_url
from .transport import HttpResult, post_json

log = logging.getLogger(__name__)

REDIRECT_STATUS = 330
REDIRECT_HOST_FIELD = "X-Apple-MMe-Host"
STREAM_REQUEST_BODY = {"streamCtag": None}


@dataclass(frozen=True)
class RedirectOutcome:
    """The effective endpoint, plus the probe response when it already succeeded."""

    endpoint: StreamEndpoint
    probe: Optional[HttpResult] = None


class RedirectResolver:
    """Probes the stream endpoint once and follows a 330 redirect if one is signalled."""

    def __init__(self, session: aiohttp.ClientSession, timeout: aiohttp.ClientTimeout):
        self._session = session
        self._timeout = timeout

    async def resolve(self, endpoint: StreamEndpoint) -> RedirectOutcome:
        """
        Issues the stream request without retries and inspects only its status.

        Raises:
            TransportError: If the probe gets no response.
            SchemaError: If a 330 response body is not JSON.
        """
        try:
            result = await post_json(
                self._session, endpoint.stream_url, STREAM_REQUEST_BODY, self._timeout
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"Redirect probe to {endpoint.stream_url} failed: {e}"
            ) from e

        if result.status != REDIRECT_STATUS:
            log.debug(f"Redirect probe returned {result.status}; keeping endpoint.")
            return RedirectOutcome(endpoint, probe=result if result.ok else None)

        try:
            body = result.json()
        except ValueError as e:
            raise SchemaError(f"Redirect response is not valid JSON: {e}") from e

        host = body.get(REDIRECT_HOST_FIELD) if isinstance(body, dict) else None
        if not isinstance(host, str) or not host:
            log.warning(
                f"Received status {REDIRECT_STATUS} without a '{REDIRECT_HOST_FIELD}' "
                "host; keeping the original endpoint."
            )
            return RedirectOutcome(endpoint)

        redirected = StreamEndpoint(
            base_url=build_base_url(host, endpoint.token), token=endpoint.token
        )
        log.debug(f"Redirected to {redirected.base_url}")
        return RedirectOutcome(redirected)
