"""
Text Search Index

Free-text matching over id, title and summary. Scoring is delegated to a
TextMatcher; the default one uses rapidfuzz. Whatever the matcher, exact
field matches rank above substring matches, which rank above fuzzy ones.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from pipes_feed.models import MISSING, CatalogRecord

SEARCH_FIELDS = ("id", "title", "summary")
DEFAULT_SCORE_CUTOFF = 60.0

FUZZY = 0
SUBSTRING = 1
EXACT = 2


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    record: CatalogRecord
    tier: int
    score: float
    position: int

    @property
    def rank(self) -> tuple[int, float]:
        return (self.tier, self.score)


class TextMatcher(Protocol):
    def search(
        self,
        records: Sequence[CatalogRecord],
        query: str,
        fields: Sequence[str],
    ) -> list[ScoredMatch]:
        ...


class RapidFuzzMatcher:
    """Approximate matcher backed by rapidfuzz WRatio"""

    def __init__(self, score_cutoff: float = DEFAULT_SCORE_CUTOFF) -> None:
        self.score_cutoff = score_cutoff

    def score_value(self, query: str, value: str) -> tuple[int, float] | None:
        """Score one processed query against one raw field value"""
        candidate = default_process(value)
        if not candidate:
            return None
        if candidate == query:
            return (EXACT, 100.0)
        if query in candidate:
            # Tighter substrings (closer in length) score higher
            return (SUBSTRING, fuzz.ratio(query, candidate))

        score = fuzz.WRatio(query, candidate, score_cutoff=self.score_cutoff)
        return (FUZZY, score) if score else None

    def search(
        self,
        records: Sequence[CatalogRecord],
        query: str,
        fields: Sequence[str] = SEARCH_FIELDS,
    ) -> list[ScoredMatch]:
        processed = default_process(query)
        if not processed:
            return []

        found: list[ScoredMatch] = []
        for position, record in enumerate(records):
            best: tuple[int, float] | None = None
            for field in fields:
                value = record.field_value(field)
                if value is MISSING:
                    continue
                result = self.score_value(processed, str(value))
                if result is not None and (best is None or result > best):
                    best = result
            if best is not None:
                found.append(ScoredMatch(record, best[0], best[1], position))
        return found


def search(
    records: Sequence[CatalogRecord],
    query: str | None,
    *,
    matcher: TextMatcher | None = None,
    fields: Sequence[str] = SEARCH_FIELDS,
) -> Sequence[CatalogRecord]:
    """
    Filter and rank records by a free-text query

    An absent or blank query returns records unchanged. Otherwise only
    matching records are returned, best match first, ties in input order.
    """
    if query is None or not query.strip():
        return records

    matcher = matcher or RapidFuzzMatcher()
    found = matcher.search(records, query, fields)
    found.sort(key=lambda match: (-match.tier, -match.score, match.position))
    return [match.record for match in found]
