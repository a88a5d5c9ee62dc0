"""
Thin request helpers over an aiohttp session.

Every helper reads the full body and releases the connection before returning, so
retry decisions never hold a pooled connection open.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import aiohttp


@dataclass(frozen=True)
class HttpResult:
    """A fully-read HTTP response."""

    status: int
    body: bytes = b""
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decodes the body as JSON regardless of the declared content type."""
        return json.loads(self.body)


def make_timeout(seconds: float) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=seconds)


async def _read(response: aiohttp.ClientResponse) -> HttpResult:
    return HttpResult(
        status=response.status,
        body=await response.read(),
        url=str(response.url),
        headers=dict(response.headers),
    )


async def post_json(
    session: aiohttp.ClientSession,
    url: str,
    payload: Any,
    timeout: aiohttp.ClientTimeout,
) -> HttpResult:
    async with session.post(url, json=payload, timeout=timeout) as response:
        return await _read(response)


async def get_bytes(
    session: aiohttp.ClientSession, url: str, timeout: aiohttp.ClientTimeout
) -> HttpResult:
    async with session.get(url, timeout=timeout, allow_redirects=True) as response:
        return await _read(response)
