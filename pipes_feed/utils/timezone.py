"""
Date and Time utilities

This module handles time zone resolution, week placement of the repeating
EPG schedule, and display formatting of broadcast dates.
"""
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

logger = logging.getLogger(__name__)


def resolve_zone(name: str | None) -> tzinfo:
    """
    Resolve a time zone name to a tzinfo

    Args:
        name: IANA time zone name or 'UTC'

    Returns:
        The zone, or UTC when the name is empty or unknown
    """
    if not name or name == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone '{name}', falling back to UTC")
        return timezone.utc


def is_valid_zone(name: str) -> bool:
    if name == "UTC":
        return True
    try:
        ZoneInfo(name)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def start_of_day(moment: datetime, zone: tzinfo) -> datetime:
    """Midnight of the calendar day containing moment, in zone"""
    local = moment.astimezone(zone)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime, zone: tzinfo) -> datetime:
    """Monday 00:00 of the week containing moment, in zone"""
    day = start_of_day(moment, zone)
    return day - timedelta(days=day.weekday())


def same_calendar_day(moment: datetime, reference: datetime, zone: tzinfo) -> bool:
    """True when both instants fall on the same calendar day in zone"""
    return moment.astimezone(zone).date() == reference.astimezone(zone).date()


def format_broadcast_date(moment: datetime, zone: tzinfo) -> str:
    """Format as e.g. 'Oct 16, 3:05PM'"""
    local = moment.astimezone(zone)
    hour = local.hour % 12 or 12
    return f"{local:%b %d}, {hour}:{local:%M%p}"


_RELATIVE_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_relative(moment: datetime, now: datetime) -> str:
    """
    Human readable distance between moment and now

    Uses the largest whole unit, e.g. 'in 2 hours' or '3 days ago'.
    """
    delta = (moment - now).total_seconds()
    magnitude = abs(delta)

    for unit, seconds in _RELATIVE_UNITS:
        if magnitude >= seconds:
            count = int(magnitude // seconds)
            label = unit if count == 1 else f"{unit}s"
            return f"in {count} {label}" if delta >= 0 else f"{count} {label} ago"

    return "now"
