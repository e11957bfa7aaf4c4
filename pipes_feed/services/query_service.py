"""
Query Service

Runs media and EPG queries against the catalog snapshot:
derive -> filter -> search -> sort -> (EPG mode) -> paginate.
Every stage returns a new sequence; the snapshot is never mutated.
"""
from collections.abc import Iterable
from datetime import datetime, tzinfo
import logging

from pipes_feed.catalog import CatalogStore
from pipes_feed.config import CustomSettings, settings
from pipes_feed.models import Episode, Record, Series
from pipes_feed.schemas import EpgQuery, MediaQuery, QueryResult
from pipes_feed.services.epg_classifier import classify, filter_by_epg_mode, is_airing, place_on_week
from pipes_feed.services.pagination import paginate
from pipes_feed.services.predicates import filter_records
from pipes_feed.services.sorting import sort_records
from pipes_feed.services.text_search import RapidFuzzMatcher, TextMatcher, search
from pipes_feed.utils.coercion import coerce_positive_int
from pipes_feed.utils.logging_helpers import log_query_summary, log_stage
from pipes_feed.utils.timezone import resolve_zone, start_of_week

logger = logging.getLogger(__name__)


def derive_media(records: Iterable[Record], now: datetime, zone: tzinfo) -> list[Record]:
    """
    Compute query-time attributes

    Series with a weekly startsOn get startsOnTimestamp on the current week;
    every episode gets isLive relative to now (False without an airTimestamp).
    """
    week_start = start_of_week(now, zone)
    derived = []
    for record in records:
        if isinstance(record, Series) and record.starts_on is not None:
            record = record.model_copy(
                update={"starts_on_timestamp": week_start + record.starts_on.as_timedelta()}
            )
        elif isinstance(record, Episode):
            record = record.model_copy(
                update={"is_live": is_airing(record.air_timestamp, record.duration_in_seconds, now)}
            )
        derived.append(record)
    return derived


def _filter_search_sort(records: list, query: MediaQuery, matcher: TextMatcher) -> list:
    filtered = filter_records(records, query.field_predicates)
    log_stage(logger, "filter", len(filtered))

    found = search(filtered, query.text_query, matcher=matcher)
    log_stage(logger, "search", len(found))

    return sort_records(found, query.sort_keys)


def run_media_query(
    catalog: CatalogStore,
    query: MediaQuery,
    now: datetime,
    *,
    matcher: TextMatcher | None = None,
    config: CustomSettings = settings,
) -> QueryResult:
    """
    Query media records

    Args:
        catalog: Snapshot to query
        query: Predicates, text, sort keys and paging window
        now: Reference instant, captured once per request
        matcher: Text matcher (defaults to rapidfuzz with the configured cutoff)
        config: Paging defaults and limits

    Returns:
        One page of records plus the next page number
    """
    zone = resolve_zone(query.time_zone)
    matcher = matcher or RapidFuzzMatcher(config.search_score_cutoff)

    records = derive_media(catalog.media, now, zone)
    ordered = _filter_search_sort(records, query, matcher)

    page = paginate(
        ordered,
        query.page,
        query.per_page,
        query.max_page,
        default_per_page=config.default_per_page,
        max_per_page=config.max_per_page,
        default_max_page=config.default_max_page,
    )
    log_query_summary(logger, "media", len(ordered), len(page.items), query.page or 1, page.next_page)

    return QueryResult(items=page.items, next_page=page.next_page, total=len(ordered))


def calculate_limit(limit, maximum: int) -> int:
    """Flat EPG result cap: the requested limit when below maximum, else maximum"""
    requested = coerce_positive_int(limit)
    return requested if requested is not None and requested < maximum else maximum


def run_epg_query(
    catalog: CatalogStore,
    query: EpgQuery,
    now: datetime,
    *,
    matcher: TextMatcher | None = None,
    config: CustomSettings = settings,
) -> QueryResult:
    """
    Query EPG programs

    Programs are placed on the current week in the query time zone, marked
    live relative to now, then filtered by predicates, text and the EPG mode.
    """
    zone = resolve_zone(query.time_zone)
    matcher = matcher or RapidFuzzMatcher(config.search_score_cutoff)

    programs = classify(place_on_week(catalog.programs, now, zone), now)
    ordered = _filter_search_sort(programs, query, matcher)

    moded = filter_by_epg_mode(ordered, query.epg_mode, now, query.epg_reference_day, zone)
    log_stage(logger, f"epg mode {query.epg_mode.value}", len(moded))

    capped = moded[:calculate_limit(query.limit, config.epg_max_results)]

    page = paginate(
        capped,
        query.page,
        query.per_page,
        query.max_page,
        default_per_page=config.epg_max_results,
        max_per_page=config.max_per_page,
        default_max_page=config.default_max_page,
    )
    log_query_summary(logger, "epg", len(capped), len(page.items), query.page or 1, page.next_page)

    return QueryResult(items=page.items, next_page=page.next_page, total=len(capped))
