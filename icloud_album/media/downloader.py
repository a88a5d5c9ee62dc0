"""
Downloads the best derivative of a photo and saves it under a descriptive filename
whose extension is chosen from the downloaded bytes.
"""

import asyncio
import logging
import posixpath
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

import aiofiles
import aiohttp

from icloud_album.api.retry import RetryingExecutor
from icloud_album.api.transport import get_bytes, make_timeout
from icloud_album.exceptions import NoDerivativeError
from icloud_album.models.album import Photo
from icloud_album.utils.path import build_photo_filename, create_dir

from .selector import SelectedDerivative, select_best_derivative
from .sniffer import get_extension_for_content

log = logging.getLogger(__name__)


class PhotoDownloader:
    """Downloads single photos, each with its own retry policy."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        executor: Optional[RetryingExecutor] = None,
        request_timeout: float = 30.0,
    ):
        self._session = session
        self._executor = executor or RetryingExecutor()
        self._timeout = make_timeout(request_timeout)

    async def fetch_content(self, url: str) -> bytes:
        """GETs `url` through the retry policy and returns the body."""
        result = await self._executor.execute(
            lambda: get_bytes(self._session, url, self._timeout),
            endpoint="asset download",
        )
        return result.body

    @staticmethod
    def select(photo: Photo) -> SelectedDerivative:
        selection = select_best_derivative(photo.derivatives)
        if selection is None:
            raise NoDerivativeError(
                f"No derivative with a download URL for photo {photo.photo_guid}"
            )
        return selection

    async def download_photo(
        self,
        photo: Photo,
        output_dir: Union[str, Path],
        index: Optional[int] = None,
        custom_filename: Optional[str] = None,
    ) -> Path:
        """
        Downloads the best derivative of `photo` into `output_dir`.

        Args:
            photo: An enriched photo.
            output_dir: Target directory, created if missing.
            index: Position in the album, rendered 1-based as a filename prefix.
            custom_filename: Replaces the caption in the filename.

        Returns:
            The path of the saved file.

        Raises:
            NoDerivativeError: If no derivative has a URL.
            TransportError, StatusError: If the download fails after retries.
        """
        selection = self.select(photo)
        log.debug(
            f"Downloading derivative '{selection.key}' of photo {photo.photo_guid}"
        )
        content = await self.fetch_content(selection.url)

        source_name = posixpath.basename(urlsplit(selection.url).path)
        ext = get_extension_for_content(content, source_name)

        output_dir = Path(output_dir)
        await asyncio.to_thread(create_dir, output_dir)
        destination = output_dir / build_photo_filename(
            photo.photo_guid,
            ext,
            index=index,
            caption=photo.caption,
            custom_filename=custom_filename,
        )

        async with aiofiles.open(destination, "wb") as f:
            await f.write(content)

        log.debug(f"Saved {len(content)} bytes to '{destination.name}'")
        return destination
