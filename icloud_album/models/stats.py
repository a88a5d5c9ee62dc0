"""
Dataclass for tracking album download session statistics.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass
class DownloadStats:
    """Tracks the outcome of downloading the photos of one album."""

    photos_total: int = 0
    photos_downloaded: int = 0
    photos_failed: int = 0
    photos_skipped: int = 0
    bytes_downloaded: int = 0
    saved_paths: List[Path] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_success(self, path: Path, size: int) -> None:
        self.photos_downloaded += 1
        self.bytes_downloaded += size
        self.saved_paths.append(path)

    def record_failure(self, photo_guid: str, reason: str) -> None:
        self.photos_failed += 1
        self.failures[photo_guid] = reason

    def record_skip(self, photo_guid: str, reason: str) -> None:
        self.photos_skipped += 1
        self.failures[photo_guid] = reason

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time

    @property
    def average_speed_bps(self) -> float:
        elapsed = self.elapsed
        return self.bytes_downloaded / elapsed if elapsed > 0 else 0.0
