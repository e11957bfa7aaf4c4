"""
Request value coercion

Query string values arrive as strings; these helpers never raise and
return None for anything unusable so callers fall back to defaults.
"""
from datetime import datetime, timezone
from typing import Any


def coerce_positive_int(value: Any) -> int | None:
    """
    Coerce request input to a positive integer

    Returns None for absent, non-numeric, fractional or non-positive input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        try:
            as_float = float(str(value).strip())
        except ValueError:
            return None
        if not as_float.is_integer():
            return None
        number = int(as_float)
    return number if number >= 1 else None


def parse_epoch_millis(value: Any) -> datetime | None:
    """Epoch millis (number or numeric string) to an aware UTC datetime"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    try:
        millis = float(str(value).strip())
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
