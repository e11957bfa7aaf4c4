"""
Sort Engine

Stable, lexicographic multi-key sort. Keys look like ``episodeNumber`` or
``episodeNumber:desc``. A record without the field sorts before every record
that has it, in either direction.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pipes_feed.models import MISSING, CatalogRecord

DESCENDING_MARKERS = frozenset({"desc", "decs"})
ASCENDING_MARKERS = frozenset({"asc"})


@dataclass(frozen=True, slots=True)
class SortKey:
    field: str
    descending: bool = False


def parse_sort_key(raw: str) -> SortKey | None:
    """Parse 'field' or 'field:desc'; returns None for a blank key"""
    raw = raw.strip()
    if not raw:
        return None

    field, sep, marker = raw.rpartition(":")
    if sep and field:
        marker = marker.strip().lower()
        if marker in DESCENDING_MARKERS:
            return SortKey(field.strip(), descending=True)
        if marker in ASCENDING_MARKERS:
            return SortKey(field.strip())

    return SortKey(raw)


def parse_sort_keys(raw_keys: Iterable[str]) -> list[SortKey]:
    keys = []
    for raw in raw_keys:
        key = parse_sort_key(raw)
        if key is not None:
            keys.append(key)
    return keys


def _comparable(value: Any) -> tuple:
    if isinstance(value, (bool, int, float)):
        return (1, float(value))
    if isinstance(value, datetime):
        return (1, value.timestamp())
    if isinstance(value, str):
        return (2, value)
    return (3, str(value))


def _key_function(key: SortKey):
    # Missing values lead in both directions; descending sorts use reverse=True
    missing = (9,) if key.descending else (0,)

    def extract(record: CatalogRecord) -> tuple:
        value = record.field_value(key.field)
        return missing if value is MISSING else _comparable(value)

    return extract


def sort_records(records: Sequence[CatalogRecord], sort_keys: Iterable[str | SortKey] | None) -> list:
    """
    Sort records by the given keys

    Args:
        records: Records in input order
        sort_keys: Raw key strings or parsed SortKeys, most significant first

    Returns:
        New list; equal records keep their input order
    """
    keys = [key if isinstance(key, SortKey) else parse_sort_key(key) for key in (sort_keys or [])]
    keys = [key for key in keys if key is not None]

    ordered = list(records)
    # Python's sort is stable (also with reverse=True), so sorting by the
    # least significant key first yields a lexicographic order
    for key in reversed(keys):
        ordered.sort(key=_key_function(key), reverse=key.descending)
    return ordered
