"""
Classifies downloaded bytes by magic number to pick a file extension.
"""

import logging
import mimetypes
import os
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
DEFAULT_EXTENSION = ".jpg"

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/heic": ".heic",
    "image/heif": ".heif",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "image/gif": ".gif",
}

# Checked before `mimetypes`, which does not know HEIC/HEIF on every platform.
FILENAME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mov": "video/quicktime",
    ".gif": "image/gif",
}

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# (prefix, mime type) pairs for the generic pass; first match wins.
GENERIC_SIGNATURES = (
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x1aE\xdf\xa3", "video/webm"),
    (b"%PDF-", "application/pdf"),
)


def _sniff_magic(data: bytes) -> Optional[str]:
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:8] == PNG_SIGNATURE:
        return "image/png"
    if len(data) >= 12 and data[4:8] == b"ftyp":
        brand = data[8:12]
        if brand[:3] == b"hei" and brand[3:4] in (b"c", b"f"):
            return "image/heic" if brand[3:4] == b"c" else "image/heif"
        if brand[:2] == b"qt":
            return "video/quicktime"
        return "video/mp4"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    return None


def _sniff_generic(data: bytes) -> Optional[str]:
    if len(data) >= 12 and data[:4] == b"RIFF":
        if data[8:12] == b"WEBP":
            return "image/webp"
        if data[8:12] == b"AVI ":
            return "video/avi"
    for prefix, mime_type in GENERIC_SIGNATURES:
        if data.startswith(prefix):
            return mime_type
    return None


def _type_from_filename(filename: str) -> Optional[str]:
    ext = os.path.splitext(filename)[1].lower()
    if not ext:
        return None
    return FILENAME_TYPES.get(ext) or mimetypes.guess_type(f"file{ext}")[0]


def detect_mime_type(data: bytes, filename: str = "") -> str:
    """
    Guesses the MIME type of downloaded content.

    Magic numbers for the formats the service serves are checked first, then a few
    generic signatures, then the filename extension. Defaults to JPEG.
    """
    mime_type = _sniff_magic(data) or _sniff_generic(data)
    if mime_type:
        return mime_type
    if filename:
        mime_type = _type_from_filename(filename)
        if mime_type:
            return mime_type
    return DEFAULT_MIME_TYPE


def extension_from_mime(mime_type: str) -> str:
    """Maps a MIME type to a file extension, defaulting to `.jpg`."""
    ext = MIME_EXTENSIONS.get(mime_type)
    if ext is None:
        log.warning(f"Unknown MIME type {mime_type!r}; defaulting to {DEFAULT_EXTENSION}")
        return DEFAULT_EXTENSION
    return ext


def get_extension_for_content(data: bytes, filename: str = "") -> str:
    return extension_from_mime(detect_mime_type(data, filename))
