"""
Predicate Engine

Field-equality filtering of catalog records. All predicates must hold (AND).
"""
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pipes_feed.models import MISSING, CatalogRecord

NUMERIC_FIELDS = frozenset({"seasonNumber", "episodeNumber", "season_number", "episode_number"})


def _coerce_number(value: Any) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        # Never equal to anything, mirrors NaN semantics
        return math.nan
    return int(number) if number.is_integer() else number


def coerce_expected(field: str, value: Any) -> Any:
    """
    Coerce an expected predicate value

    The literal string "true" becomes True; season/episode numbers become numbers.
    """
    if field in NUMERIC_FIELDS:
        return _coerce_number(value)
    if value == "true":
        return True
    return value


def matches(record: CatalogRecord, predicates: Mapping[str, Any]) -> bool:
    for field, expected in predicates.items():
        actual = record.field_value(field)
        if actual is MISSING or actual != expected:
            return False
        # 1 == True in Python; booleans only match booleans
        if isinstance(actual, bool) != isinstance(expected, bool):
            return False
    return True


def filter_records(records: Iterable[CatalogRecord], field_predicates: Mapping[str, Any] | None) -> list:
    """
    Keep the records matching every predicate

    Args:
        records: Records in collection order
        field_predicates: Field name (wire or attribute) -> expected value

    Returns:
        Matching records, order preserved
    """
    records = list(records)
    if not field_predicates:
        return records

    predicates = {field: coerce_expected(field, value) for field, value in field_predicates.items()}
    return [record for record in records if matches(record, predicates)]
