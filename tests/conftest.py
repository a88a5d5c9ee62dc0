"""
Shared fixtures: a sample album as the shared streams service returns it, and the
URLs it is served from.
"""

import copy

import pytest

from icloud_album.api.retry import RetryingExecutor
from icloud_album.models.config import AlbumConfig
from icloud_album.models.retry import RetryPolicy

# 'B' decodes to 11, so this album lives on partition 12.
TOKEN = "B0z5qAGN1JIFd3y"
BASE_URL = f"https://p12-sharedstreams.icloud.com/{TOKEN}/sharedstreams/"
STREAM_URL = BASE_URL + "webstream"
ASSET_URLS_URL = BASE_URL + "webasseturls"

REDIRECT_HOST = "p23-sharedstreams.icloud.com"
REDIRECTED_BASE_URL = f"https://{REDIRECT_HOST}/{TOKEN}/sharedstreams/"

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

STREAM_PAYLOAD = {
    "streamName": "Summer Trip",
    "userFirstName": "Ada",
    "userLastName": "Lovelace",
    "streamCtag": "FT;42",
    "itemsReturned": "2",
    "locations": {},
    "photos": [
        {
            "photoGuid": "GUID-1",
            "caption": "Beach at sunset",
            "dateCreated": "2024-07-01T18:00:00Z",
            "batchDateCreated": "2024-07-02T09:00:00Z",
            "width": "4032",
            "height": "3024",
            "derivatives": {
                "PosterFrame": {"checksum": "cs-poster", "fileSize": "1024"},
                "1": {
                    "checksum": "cs-thumb",
                    "fileSize": 2048,
                    "width": "320",
                    "height": "240",
                },
                "original": {
                    "checksum": "cs-original",
                    "fileSize": "2500000",
                    "width": 4032,
                    "height": 3024,
                },
            },
        },
        {
            "photoGuid": "GUID-2",
            "dateCreated": "2024-07-01T19:00:00Z",
            "mediaAssetType": "video",
            "derivatives": {
                "720p": {"checksum": "cs-720", "width": "1280", "height": "720"},
            },
        },
    ],
}

ASSET_PAYLOAD = {
    "items": {
        "cs-original": {
            "url_location": "cvws.icloud-content.com",
            "url_path": "/S/original/IMG_0001.JPG?o=abc",
        },
        "cs-thumb": {
            "url_location": "cvws.icloud-content.com",
            "url_path": "/S/thumb/IMG_0001.JPG?o=def",
        },
        "GUID-2": {
            "url_location": "cvws.icloud-content.com",
            "url_path": "/S/video/IMG_0002.MP4?o=ghi",
        },
    },
    "locations": {},
}

ORIGINAL_URL = "https://cvws.icloud-content.com/S/original/IMG_0001.JPG?o=abc"
VIDEO_URL = "https://cvws.icloud-content.com/S/video/IMG_0002.MP4?o=ghi"


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers every requested delay."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def stream_payload():
    return copy.deepcopy(STREAM_PAYLOAD)


@pytest.fixture
def asset_payload():
    return copy.deepcopy(ASSET_PAYLOAD)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fast_executor(recording_sleep):
    """Two retries, no real waiting."""
    return RetryingExecutor(RetryPolicy(max_retries=2), sleep=recording_sleep)


@pytest.fixture
def fast_config():
    return AlbumConfig(max_retries=1, base_delay=0.0, max_delay=0.0)
