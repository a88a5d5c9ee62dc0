"""
Structured event logging: human-readable console lines plus an optional JSONL file
for machine analysis of fetch and download sessions.
"""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


class StructuredLogger:
    """
    Logs named events with key/value context.

    Usage:
        logger = StructuredLogger("icloud_album", log_dir=Path("logs"))
        logger.info("photo_downloaded", photo_guid="ABC", size_bytes=123456)
    """

    def __init__(
        self,
        name: str,
        log_dir: Optional[Path] = None,
        enable_json: bool = True,
    ):
        """
        Args:
            name: Logger name used for console output.
            log_dir: Directory for JSONL files (None disables the file).
            enable_json: Enable JSONL file logging.
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None

        self._logger = logging.getLogger(name)

        self._json_file = None
        self.json_path: Optional[Path] = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_path = log_dir / f"icloud_album_{timestamp}.jsonl"
            self._json_file = open(self.json_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    def set_session_context(self, **kwargs: Any) -> None:
        """Set session-level context that appears in all JSON entries."""
        self._session_context.update(kwargs)

    @staticmethod
    def _format_message(event: str, **context: Any) -> str:
        parts = [f"[{event}]"]
        parts.extend(f"{key}={value}" for key, value in context.items())
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context: Any) -> None:
        if not self._json_file or self._json_file.closed:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }
        self._json_file.write(json.dumps(entry, default=str) + "\n")
        self._json_file.flush()

    def _log(self, level: int, event: str, **context: Any) -> None:
        self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context: Any) -> None:
        self._log(logging.DEBUG, event, **context)

    def info(self, event: str, **context: Any) -> None:
        self._log(logging.INFO, event, **context)

    def warning(self, event: str, **context: Any) -> None:
        self._log(logging.WARNING, event, **context)

    def error(self, event: str, **context: Any) -> None:
        self._log(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close the JSONL file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class FetchLogger:
    """Events for album fetches."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def fetch_started(self, token: str):
        self.logger.debug("album_fetch_started", token=token)

    def fetch_completed(
        self, token: str, stream_name: str, photo_count: int, duration_s: float
    ):
        self.logger.info(
            "album_fetch_completed",
            token=token,
            stream_name=stream_name,
            photo_count=photo_count,
            duration_s=round(duration_s, 2),
        )

    def fetch_degraded(self, token: str, warning: str):
        self.logger.warning("album_fetch_degraded", token=token, warning=warning)

    def fetch_failed(self, token: str, error: str):
        self.logger.error("album_fetch_failed", token=token, error=error)


class DownloadLogger:
    """Events for photo downloads."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def photo_downloaded(
        self, photo_guid: str, derivative: str, path: str, size_bytes: int
    ):
        self.logger.debug(
            "photo_downloaded",
            photo_guid=photo_guid,
            derivative=derivative,
            path=path,
            size_bytes=size_bytes,
        )

    def photo_failed(self, photo_guid: str, error: str):
        self.logger.error("photo_download_failed", photo_guid=photo_guid, error=error)

    def photo_skipped(self, photo_guid: str, reason: str):
        self.logger.warning("photo_skipped", photo_guid=photo_guid, reason=reason)


def create_structured_logger(
    log_dir: Optional[Path] = None,
) -> tuple[StructuredLogger, FetchLogger, DownloadLogger]:
    """
    Create the structured loggers. JSONL output is enabled when `log_dir` is given.

    Returns:
        Tuple of (base_logger, fetch_logger, download_logger)
    """
    base = StructuredLogger("icloud_album.events", log_dir=log_dir)
    return base, FetchLogger(base), DownloadLogger(base)
