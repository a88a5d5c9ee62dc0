"""
Lenient field decoders for the shared streams JSON API.

The service has no published schema and encodes the same numeric field as a JSON
number in one response and as a quoted string in the next. These helpers are invoked
per field by the pydantic models in `album.py` and never raise: a value that cannot be
interpreted falls back to the field default and is logged.
"""

import logging
from typing import Any, Optional

log = logging.getLogger(__name__)

UINT32_MAX = 2**32 - 1
UINT64_MAX = 2**64 - 1


def coerce_uint(
    value: Any, default: Optional[int] = None, max_value: int = UINT64_MAX
) -> Optional[int]:
    """
    Decodes an unsigned integer from a JSON number or a numeric string.

    Attempts, in order: a native integer, a string of ASCII digits, then the default.

    Args:
        value: The raw JSON value.
        default: Returned when the value is absent or cannot be decoded.
        max_value: Values above this bound are treated as undecodable.

    Returns:
        The decoded integer, or `default`.
    """
    if value is None:
        return default

    # bool is a subclass of int but never a valid count
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value <= max_value:
            return value
        log.warning(f"Numeric value {value} is out of range; using default.")
        return default

    if isinstance(value, str):
        if value == "":
            return default
        if value.isascii() and value.isdigit():
            parsed = int(value)
            if parsed <= max_value:
                return parsed
        log.warning(f"Failed to parse string {value!r} as an unsigned integer.")
        return default

    log.debug(f"Ignoring value of unexpected type {type(value).__name__} for number.")
    return default


def coerce_optional_str(value: Any) -> Optional[str]:
    """Returns the value if it is a string, otherwise None."""
    if value is None or isinstance(value, str):
        return value
    log.debug(f"Ignoring non-string value of type {type(value).__name__}.")
    return None
