"""
Media Processing Layer.

This package is responsible for choosing which derivative of a photo to fetch,
downloading it, and classifying the downloaded bytes.
"""

from .downloader import PhotoDownloader
from .selector import SelectedDerivative, select_best_derivative
from .sniffer import detect_mime_type, extension_from_mime, get_extension_for_content

__all__ = [
    "PhotoDownloader",
    "SelectedDerivative",
    "detect_mime_type",
    "extension_from_mime",
    "get_extension_for_content",
    "select_best_derivative",
]
