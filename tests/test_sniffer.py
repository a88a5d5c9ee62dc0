"""
Tests for content type detection of downloaded bytes.
"""

import pytest

from icloud_album.media.sniffer import (
    detect_mime_type,
    extension_from_mime,
    get_extension_for_content,
)
from tests.conftest import JPEG_BYTES, PNG_BYTES


def _ftyp(brand: bytes) -> bytes:
    return b"\x00\x00\x00\x18ftyp" + brand + b"\x00\x00\x00\x00mif1"


@pytest.mark.parametrize(
    "data, mime_type",
    [
        (JPEG_BYTES, "image/jpeg"),
        (PNG_BYTES, "image/png"),
        (b"GIF89a" + b"\x00" * 10, "image/gif"),
        (b"GIF87a" + b"\x00" * 10, "image/gif"),
        (_ftyp(b"heic"), "image/heic"),
        (_ftyp(b"heif"), "image/heif"),
        (_ftyp(b"qt  "), "video/quicktime"),
        (_ftyp(b"isom"), "video/mp4"),
        (_ftyp(b"mp42"), "video/mp4"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"%PDF-1.7\n", "application/pdf"),
    ],
)
def test_magic_numbers(data, mime_type):
    assert detect_mime_type(data) == mime_type


def test_heic_is_not_mistaken_for_mp4():
    assert get_extension_for_content(_ftyp(b"heic")) == ".heic"


def test_short_ftyp_is_not_a_container():
    assert detect_mime_type(b"\x00\x00\x00\x18ftyp", "clip.mov") == "video/quicktime"


@pytest.mark.parametrize(
    "filename, mime_type",
    [
        ("IMG_0001.HEIC", "image/heic"),
        ("IMG_0002.MOV", "video/quicktime"),
        ("clip.mp4", "video/mp4"),
        ("photo.jpeg", "image/jpeg"),
    ],
)
def test_filename_fallback(filename, mime_type):
    assert detect_mime_type(b"unknown bytes", filename) == mime_type


def test_magic_wins_over_filename():
    assert detect_mime_type(PNG_BYTES, "IMG_0001.JPG") == "image/png"


def test_defaults_to_jpeg():
    assert detect_mime_type(b"") == "image/jpeg"
    assert detect_mime_type(b"unknown", "no_extension") == "image/jpeg"


@pytest.mark.parametrize(
    "mime_type, ext",
    [
        ("image/jpeg", ".jpg"),
        ("image/png", ".png"),
        ("image/heic", ".heic"),
        ("image/heif", ".heif"),
        ("video/mp4", ".mp4"),
        ("video/quicktime", ".mov"),
        ("image/gif", ".gif"),
        ("application/pdf", ".jpg"),
    ],
)
def test_extension_from_mime(mime_type, ext):
    assert extension_from_mime(mime_type) == ext


def test_extension_for_content():
    assert get_extension_for_content(JPEG_BYTES) == ".jpg"
    assert get_extension_for_content(_ftyp(b"qt  ")) == ".mov"
