"""
Tests for human-readable formatting and the structured event log.
"""

import json

from icloud_album.utils.formatting import (
    format_dimensions,
    format_duration,
    format_size,
)
from icloud_album.utils.structured_logger import create_structured_logger


def test_format_dimensions():
    assert format_dimensions(4032, 3024) == "4032x3024"
    assert format_dimensions(None, 3024) == "?x3024"
    assert format_dimensions(None, None) == "-"


def test_format_size_and_duration_are_readable():
    assert format_size(0) == "0 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(1536 * 1024) == "1.5 MB"
    assert format_duration(5) == "5s"
    assert format_duration(3725) == "1h 2m 5s"


def test_events_are_written_as_jsonl(tmp_path):
    base, fetch_events, download_events = create_structured_logger(tmp_path)
    with base:
        fetch_events.fetch_started("TOKEN")
        download_events.photo_downloaded("G1", "original", "/tmp/x.jpg", 10)
        download_events.photo_skipped("G2", "no url")

    lines = base.json_path.read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]

    assert [e["event"] for e in events] == [
        "album_fetch_started",
        "photo_downloaded",
        "photo_skipped",
    ]
    assert events[1]["size_bytes"] == 10
    assert events[2]["level"] == "WARNING"
    assert len({e["session_id"] for e in events}) == 1


def test_no_file_without_log_dir():
    base, fetch_events, _ = create_structured_logger()
    fetch_events.fetch_failed("TOKEN", "boom")
    assert base.json_path is None
    base.close()


def test_format_size_boundaries():
    assert format_size(1023) == "1023.0 B"
    assert format_size(1024) == "1.0 KB"
    assert format_size(5 * 1024**5) == "5120.0 TB"


def test_format_duration_omits_zero_units():
    assert format_duration(0) == "0s"
    assert format_duration(3600) == "1h"
    assert format_duration(120.9) == "2m"
