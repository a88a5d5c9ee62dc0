"""
Maps album tokens to the shared streams server partition (p01-p40) that owns them.
"""

from dataclasses import dataclass

from icloud_album.exceptions import InvalidTokenError

SERVICE_DOMAIN = "icloud.com"
STREAM_PATH = "sharedstreams"
PARTITION_COUNT = 40


@dataclass(frozen=True)
class StreamEndpoint:
    """The base URL of one album's shared stream API, e.g.
    ``https://p01-sharedstreams.icloud.com/<token>/sharedstreams/``."""

    base_url: str
    token: str

    @property
    def stream_url(self) -> str:
        return f"{self.base_url}webstream"

    @property
    def asset_urls_url(self) -> str:
        return f"{self.base_url}webasseturls"


def char_to_base62(ch: str) -> int:
    """Decodes a single base62 digit: 0-9, then A-Z, then a-z."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "A" <= ch <= "Z":
        return ord(ch) - ord("A") + 10
    if "a" <= ch <= "z":
        return ord(ch) - ord("a") + 36
    raise InvalidTokenError(f"Invalid base62 character: {ch!r}")


def calculate_partition(token: str) -> int:
    """
    Returns the partition (1-40) for a token, derived from its first character.

    Raises:
        InvalidTokenError: If the token is empty, whitespace, or starts with a
            character outside [0-9A-Za-z].
    """
    if not token or not token.strip():
        raise InvalidTokenError("Album token is empty.")
    return 1 + char_to_base62(token[0]) % PARTITION_COUNT


def build_base_url(host: str, token: str) -> str:
    return f"https://{host}/{token}/{STREAM_PATH}/"


def get_base_url(token: str) -> str:
    partition = calculate_partition(token)
    return build_base_url(f"p{partition:02d}-sharedstreams.{SERVICE_DOMAIN}", token)


def get_endpoint(token: str) -> StreamEndpoint:
    """Computes the candidate endpoint for a token, before any redirect."""
    return StreamEndpoint(base_url=get_base_url(token), token=token)
