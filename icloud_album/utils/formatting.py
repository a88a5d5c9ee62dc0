"""
Helper functions for formatting data into human-readable strings.
"""

from typing import Optional

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: float) -> str:
    """Formats a byte count for the summary panel, e.g. '2.4 MB'."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {SIZE_UNITS[-1]}"


def format_duration(seconds: float) -> str:
    """Formats elapsed seconds as e.g. '1h 2m 5s'; zero units are left out."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    parts = [
        f"{amount}{unit}" for amount, unit in ((hours, "h"), (minutes, "m")) if amount
    ]
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_dimensions(width: Optional[int], height: Optional[int]) -> str:
    """Formats a width/height pair, e.g. '4032x3024', with '?' for unknowns."""
    if width is None and height is None:
        return "-"
    return f"{'?' if width is None else width}x{'?' if height is None else height}"
