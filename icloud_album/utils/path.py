"""
Utilities for handling file paths, photo filenames, and share URL parsing.
"""

import re
from pathlib import Path
from typing import Optional

from pathvalidate import sanitize_filename

MAX_COMPONENT_LENGTH = 200
TRUNCATED_LENGTH = 195
TRUNCATED_SUFFIX = "_truncated"

# Path-hostile or shell-awkward characters, plus control characters.
_UNSAFE_CHARS = re.compile(r"[<>:\"/\\|?*!@#$%^&';=+,`~\x00-\x1f\x7f]")

_SHARE_URL = re.compile(r"icloud\.com/sharedalbum/[^#]*#(?P<token>[0-9A-Za-z]+)")


def parse_album_token(value: str) -> str:
    """
    Extracts the album token from a share URL such as
    ``https://www.icloud.com/sharedalbum/#B0aGWZuqDGKZ5F``. Anything that is not a
    share URL is returned stripped, as a bare token.
    """
    match = _SHARE_URL.search(value)
    if match:
        return match.group("token")
    return value.strip()


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def sanitize_component(text: str) -> str:
    """
    Makes free text (a caption or custom name) safe as part of a filename.

    Unsafe characters become `_`, names over 200 characters are cut to 195 plus
    `_truncated`, and leading/trailing dots and spaces are trimmed.
    """
    cleaned = _UNSAFE_CHARS.sub("_", text)
    if len(cleaned) > MAX_COMPONENT_LENGTH:
        cleaned = cleaned[:TRUNCATED_LENGTH] + TRUNCATED_SUFFIX
    cleaned = cleaned.strip(". ")
    if not cleaned:
        return ""
    return sanitize_filename(cleaned, replacement_text="_", platform="universal")


def build_photo_filename(
    photo_guid: str,
    ext: str,
    index: Optional[int] = None,
    caption: Optional[str] = None,
    custom_filename: Optional[str] = None,
) -> str:
    """
    Composes ``{index+1}_{guid}_{caption}{ext}``.

    The index prefix is omitted when `index` is None and the caption suffix when
    there is no caption. A custom filename takes the caption's place, and a photo
    without a GUID is named `unknown`.
    """
    label = custom_filename if custom_filename else caption
    parts = []
    if index is not None:
        parts.append(str(index + 1))
    parts.append(photo_guid or "unknown")
    if label:
        safe_label = sanitize_component(label)
        if safe_label:
            parts.append(safe_label)
    return "_".join(parts) + ext
