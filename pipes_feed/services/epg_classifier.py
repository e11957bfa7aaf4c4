"""
EPG Temporal Classifier

Places the repeating weekly schedule on the current week, marks programs
that are live at a given instant, and filters by EPG mode.
"""
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
import logging

from pipes_feed.models import Program
from pipes_feed.schemas import EpgMode
from pipes_feed.utils.coercion import parse_epoch_millis
from pipes_feed.utils.timezone import same_calendar_day, start_of_week

logger = logging.getLogger(__name__)


# First matching flag wins
MODE_PRECEDENCE = (
    EpgMode.NOW,
    EpgMode.UP_NEXT,
    EpgMode.JUST_ENDED,
    EpgMode.FOR_DAY,
    EpgMode.FUTURE_FOR_DAY,
)
DAY_MODES = frozenset({EpgMode.FOR_DAY, EpgMode.FUTURE_FOR_DAY})
FALSY_FLAGS = frozenset({"", "false", "0"})


def _flag_is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in FALSY_FLAGS


def resolve_epg_mode(flags: Mapping[str, Any]) -> tuple[EpgMode, datetime | None]:
    """
    Pick the single mode to honour from request flags

    Boolean modes are set unless empty, "false" or "0". Day modes need a
    usable epoch-millis timestamp.

    Returns:
        Tuple of (mode, reference_day)
    """
    for mode in MODE_PRECEDENCE:
        value = flags.get(mode.value)
        if mode in DAY_MODES:
            reference = parse_epoch_millis(value)
            if reference is not None:
                return mode, reference
        elif _flag_is_set(value):
            return mode, None
    return EpgMode.NONE, None


def is_airing(start: datetime | None, duration_in_seconds: int, now: datetime) -> bool:
    if start is None:
        return False
    start = start.astimezone(timezone.utc)
    return start <= now <= start + timedelta(seconds=duration_in_seconds)


def place_on_week(programs: Iterable[Program], now: datetime, zone: tzinfo = timezone.utc) -> list[Program]:
    """Derive airTimestamp = start of the current week (in zone) + weekly offset"""
    week_start = start_of_week(now, zone)
    return [
        program.model_copy(update={"air_timestamp": week_start + program.air_time.as_timedelta()})
        for program in programs
    ]


def classify(programs: Iterable[Program], now: datetime) -> list[Program]:
    """Annotate each program with isLive relative to now"""
    return [
        program.model_copy(
            update={"is_live": is_airing(program.air_timestamp, program.duration_in_seconds, now)}
        )
        for program in programs
    ]


def filter_by_epg_mode(
    programs: Sequence[Program],
    mode: EpgMode | str | None,
    now: datetime,
    reference_day: datetime | None = None,
    zone: tzinfo = timezone.utc,
) -> list[Program]:
    """
    Filter classified programs by temporal class

    - now: live programs
    - upNext: not yet started
    - justEnded: fully ended, most recent first (reverse input order)
    - forDay: starting on the calendar day of reference_day (in zone)
    - futureForDay: on that day and not yet ended
    - none: everything
    """
    mode = EpgMode.parse(mode)
    placed = [program for program in programs if program.air_timestamp is not None]

    if mode is EpgMode.NOW:
        return [program for program in placed if program.is_live]

    if mode is EpgMode.UP_NEXT:
        return [program for program in placed if now <= program.air_timestamp]

    if mode is EpgMode.JUST_ENDED:
        ended = [
            program for program in placed
            if program.air_timestamp <= now and now >= program.end_timestamp
        ]
        ended.reverse()
        return ended

    if mode in DAY_MODES:
        if reference_day is None:
            logger.debug(f"EPG mode {mode.value} without a reference day, returning all programs")
            return list(programs)
        on_day = [
            program for program in placed
            if same_calendar_day(program.air_timestamp, reference_day, zone)
        ]
        if mode is EpgMode.FUTURE_FOR_DAY:
            return [program for program in on_day if program.end_timestamp >= now]
        return on_day

    return list(programs)
