"""
Coordinates downloading every photo of a fetched album.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from icloud_album.cli.progress_manager import ProgressManager
from icloud_album.exceptions import NoDerivativeError, SharedAlbumError
from icloud_album.media.downloader import PhotoDownloader
from icloud_album.models.album import AlbumResult, Photo
from icloud_album.models.stats import DownloadStats
from icloud_album.utils.structured_logger import DownloadLogger

log = logging.getLogger(__name__)

# (status, photo_guid, path or reason, size)
_Outcome = Tuple[str, str, Union[Path, str], int]


class DownloadManager:
    """
    Downloads an album's photos with bounded concurrency.

    Each photo keeps its own retry policy and content sniffing; a failure on one
    photo is recorded and does not stop the others.
    """

    def __init__(
        self,
        downloader: PhotoDownloader,
        max_workers: int = 4,
        progress_manager: Optional[ProgressManager] = None,
        events: Optional[DownloadLogger] = None,
    ):
        self.downloader = downloader
        self.max_workers = max_workers
        self.progress_manager = progress_manager
        self.events = events

    async def _download_one(
        self,
        semaphore: asyncio.Semaphore,
        index: int,
        photo: Photo,
        output_dir: Path,
    ) -> _Outcome:
        async with semaphore:
            guid = photo.photo_guid
            try:
                path = await self.downloader.download_photo(
                    photo, output_dir, index=index
                )
                size = (await asyncio.to_thread(path.stat)).st_size
            except NoDerivativeError as e:
                log.warning(f"[yellow]Skipping photo {guid}: {e}[/yellow]")
                if self.events:
                    self.events.photo_skipped(guid, str(e))
                outcome: _Outcome = ("skipped", guid, str(e), 0)
            except (SharedAlbumError, OSError) as e:
                log.error(f"[red]Failed to download photo {guid}: {e}[/red]")
                if self.events:
                    self.events.photo_failed(guid, str(e))
                outcome = ("failed", guid, str(e), 0)
            else:
                if self.events:
                    selected = self.downloader.select(photo).key
                    self.events.photo_downloaded(guid, selected, str(path), size)
                outcome = ("ok", guid, path, size)

        if self.progress_manager:
            self.progress_manager.photo_done(
                failed=outcome[0] == "failed", skipped=outcome[0] == "skipped"
            )
        return outcome

    async def download_album(
        self, album: AlbumResult, output_dir: Union[str, Path]
    ) -> DownloadStats:
        """
        Downloads every photo of `album` into `output_dir`.

        Returns:
            Statistics with saved paths in album order.
        """
        output_dir = Path(output_dir)
        stats = DownloadStats(photos_total=len(album.photos))
        if self.progress_manager:
            self.progress_manager.start_album(
                album.metadata.stream_name, len(album.photos)
            )

        semaphore = asyncio.Semaphore(self.max_workers)
        outcomes: List[_Outcome] = await asyncio.gather(
            *(
                self._download_one(semaphore, index, photo, output_dir)
                for index, photo in enumerate(album.photos)
            )
        )

        for status, guid, detail, size in outcomes:
            if status == "ok":
                stats.record_success(detail, size)
            elif status == "skipped":
                stats.record_skip(guid, detail)
            else:
                stats.record_failure(guid, detail)

        log.info(
            f"Downloaded {stats.photos_downloaded}/{stats.photos_total} photo(s) "
            f"from '{album.metadata.stream_name}'."
        )
        return stats
