"""
Chooses which derivative of a photo to download.
"""

from typing import Iterable, List, Mapping, NamedTuple, Optional, Tuple

from icloud_album.models.album import Derivative

# Numeric keys the service uses for full-resolution variants.
ORIGINAL_NUMERIC_KEYS = ("3", "4")


class SelectedDerivative(NamedTuple):
    key: str
    derivative: Derivative
    url: str


def is_original_like(key: str) -> bool:
    lowered = key.lower()
    return "original" in lowered or "full" in lowered or key in ORIGINAL_NUMERIC_KEYS


def _largest(
    candidates: Iterable[Tuple[str, Derivative]],
) -> Optional[Tuple[str, Derivative]]:
    """Largest pixel area among candidates with both dimensions; first one wins ties."""
    best = None
    best_area = -1
    for key, derivative in candidates:
        area = derivative.pixel_area
        if area is not None and area > best_area:
            best, best_area = (key, derivative), area
    return best


def select_best_derivative(
    derivatives: Mapping[str, Derivative],
) -> Optional[SelectedDerivative]:
    """
    Picks the best derivative that has a resolved URL.

    Preference order:
        1. the largest original-like derivative with known dimensions;
        2. the first original-like derivative;
        3. the largest remaining derivative with known dimensions;
        4. the first derivative with a URL.

    Candidates are visited in mapping order (server order), so ties are stable.

    Returns:
        The selection, or None when no derivative has a URL.
    """
    candidates: List[Tuple[str, Derivative]] = [
        (key, d) for key, d in derivatives.items() if d.url
    ]
    if not candidates:
        return None

    originals = [(k, d) for k, d in candidates if is_original_like(k)]
    if originals:
        chosen = _largest(originals) or originals[0]
    else:
        chosen = _largest(candidates) or candidates[0]

    key, derivative = chosen
    return SelectedDerivative(key, derivative, derivative.url)
