"""
Merges resolved asset URLs into photo derivatives.
"""

from typing import List, Mapping

from icloud_album.models.album import Photo


def enrich_photos_with_urls(
    photos: List[Photo], url_map: Mapping[str, str]
) -> List[Photo]:
    """
    Populates derivative URLs in place.

    The service keys asset URLs sometimes by derivative checksum and sometimes by
    photo GUID, so two passes are made per photo:

    1. Every derivative without a URL takes the URL keyed by its checksum.
    2. If the photo GUID is keyed, that URL fills every derivative still missing one.

    A URL is only ever set, never replaced or cleared, so checksum matches win over
    the GUID fallback and repeated calls with the same map change nothing.

    Returns:
        The same list, for chaining.
    """
    for photo in photos:
        for derivative in photo.derivatives.values():
            if derivative.url is None and derivative.checksum:
                url = url_map.get(derivative.checksum)
                if url:
                    derivative.url = url

        fallback = url_map.get(photo.photo_guid) if photo.photo_guid else None
        if fallback:
            for derivative in photo.derivatives.values():
                if derivative.url is None:
                    derivative.url = fallback
    return photos
