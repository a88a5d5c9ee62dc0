"""
icloud-album: fetch and download iCloud shared photo albums.
"""

__version__ = "0.1.0"
