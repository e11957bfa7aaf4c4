from datetime import datetime, timedelta, timezone
from typing import Annotated
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from pipes_feed.catalog import CatalogStore, get_catalog
from pipes_feed.config import settings
from pipes_feed.models import datetime_to_millis
from pipes_feed.schemas import EpgQuery, Feed, MediaQuery
from pipes_feed.services import (
    build_feed,
    get_collection,
    get_user_collection,
    resolve_epg_mode,
    run_epg_query,
    run_media_query,
)
from pipes_feed.services.rendering_service import PIPES2_MEDIA_TYPE
from pipes_feed.utils.context import parse_context
from pipes_feed.utils.timezone import resolve_zone, start_of_day, start_of_week


logger = logging.getLogger(__name__)

main_router = APIRouter()


def current_time() -> datetime:
    """Reference instant, captured once per request"""
    return datetime.now(timezone.utc)


CatalogDep = Annotated[CatalogStore, Depends(get_catalog)]
NowDep = Annotated[datetime, Depends(current_time)]
OptionalParam = Annotated[str | None, Query()]


def collect_predicates(request: Request) -> dict[str, str]:
    """Turn by* query params into field predicates: bySeriesId=x -> {'seriesId': 'x'}"""
    predicates = {}
    for key, value in request.query_params.items():
        if key.startswith("by") and len(key) > 2:
            field = key[2].lower() + key[3:]
            predicates[field] = value
    return predicates


def context_time_zone(ctx: str | None) -> str:
    zone = parse_context(ctx, log_error=False).get("timeZoneOffset")
    return str(zone) if zone else settings.default_time_zone


def feed_response(feed: Feed) -> JSONResponse:
    return JSONResponse(
        content=feed.model_dump(mode="json", exclude_none=True),
        media_type=PIPES2_MEDIA_TYPE,
        headers={"Cache-Control": f"public, max-age={settings.cache_max_age_sec}"},
    )


@main_router.get("/")
async def root() -> dict:
    """Root endpoint with service information"""
    return {
        "service": "Pipes Feed Service",
        "version": "0.1.0",
        "endpoints": {
            "media": "/media - Filter, search, sort and page media items",
            "epg": "/epg - Programs on the weekly EPG",
            "epg_days": "/epg/days - Days of the current week",
            "collections": "/collections/{name} - Predefined collections",
            "user_collections": "/user/collections/{name} - Collections of the ctx user",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(catalog: CatalogDep) -> dict:
    """Health check endpoint"""
    return {
        "status": "ok",
        "catalog": catalog.counts(),
    }


@main_router.get("/media")
async def get_media(
    request: Request,
    catalog: CatalogDep,
    now: NowDep,
    q: OptionalParam = None,
    sortBy: OptionalParam = None,
    page: OptionalParam = None,
    perPage: OptionalParam = None,
    maxPage: OptionalParam = None,
    feedTitle: OptionalParam = None,
    ctx: OptionalParam = None,
) -> JSONResponse:
    """
    Search for media items

    Examples:
        /media?byType=series&byGenre=genre-1
        /media?byType=episode&bySeriesId=series-1&bySeasonNumber=3&sortBy=episodeNumber:desc
        /media?byType=episode&q=E2S1
    """
    time_zone = context_time_zone(ctx)
    query = MediaQuery(
        field_predicates=collect_predicates(request),
        text_query=q,
        sort_keys=sortBy,
        page=page,
        per_page=perPage,
        max_page=maxPage,
        time_zone=time_zone,
    )

    result = run_media_query(catalog, query, now)

    return feed_response(build_feed(
        str(request.url),
        result.items,
        base_url=settings.base_url,
        title=feedTitle,
        next_page=result.next_page,
        zone=resolve_zone(query.time_zone),
        now=now,
    ))


@main_router.get("/epg")
async def get_epg(
    request: Request,
    catalog: CatalogDep,
    now: NowDep,
    now_: Annotated[str | None, Query(alias="now")] = None,
    upNext: OptionalParam = None,
    justEnded: OptionalParam = None,
    forDay: OptionalParam = None,
    futureForDay: OptionalParam = None,
    limit: OptionalParam = None,
    q: OptionalParam = None,
    sortBy: OptionalParam = None,
    page: OptionalParam = None,
    perPage: OptionalParam = None,
    maxPage: OptionalParam = None,
    feedTitle: OptionalParam = None,
    ctx: OptionalParam = None,
) -> JSONResponse:
    """
    Get programs on the EPG

    Only one mode is honoured: now > upNext > justEnded > forDay > futureForDay.
    now/upNext/justEnded are set by any value except "", "false" or "0", so
    now=false does not enable live filtering.
    forDay/futureForDay take a timestamp in millis; a non-numeric value counts
    as not supplied and the next mode in precedence applies.
    """
    epg_mode, reference_day = resolve_epg_mode({
        "now": now_,
        "upNext": upNext,
        "justEnded": justEnded,
        "forDay": forDay,
        "futureForDay": futureForDay,
    })
    query = EpgQuery(
        field_predicates=collect_predicates(request),
        text_query=q,
        sort_keys=sortBy,
        page=page,
        per_page=perPage,
        max_page=maxPage,
        time_zone=context_time_zone(ctx),
        epg_mode=epg_mode,
        epg_reference_day=reference_day,
        limit=limit,
    )

    result = run_epg_query(catalog, query, now)

    return feed_response(build_feed(
        str(request.url),
        result.items,
        base_url=settings.base_url,
        title=feedTitle,
        next_page=result.next_page,
        zone=resolve_zone(query.time_zone),
        now=now,
    ))


@main_router.get("/epg/days")
async def get_epg_days(
    request: Request,
    now: NowDep,
    startToday: OptionalParam = None,
    feedTitle: OptionalParam = None,
    ctx: OptionalParam = None,
) -> JSONResponse:
    """List the days of the current week (or the next 7 days) for EPG tabs"""
    zone = resolve_zone(context_time_zone(ctx))
    first_day = start_of_day(now, zone) if startToday == "true" else start_of_week(now, zone)

    days = [first_day + timedelta(days=index) for index in range(7)]
    feed = Feed(
        id=str(request.url),
        title=feedTitle or "EPG",
        entry=[{"id": datetime_to_millis(day), "title": f"{day:%A}"} for day in days],
    )
    return feed_response(feed)


@main_router.get("/collections/{collection_name}")
async def get_collection_by_name(
    collection_name: str,
    request: Request,
    catalog: CatalogDep,
    feedTitle: OptionalParam = None,
) -> JSONResponse:
    """Get a predefined collection (homeFeatured, featuredDrama, featuredAction, genres)"""
    items = get_collection(catalog, collection_name)
    return feed_response(build_feed(
        str(request.url),
        items,
        base_url=settings.base_url,
        title=feedTitle or collection_name,
    ))


@main_router.get("/user/collections/{collection_name}")
async def get_user_collection_by_name(
    collection_name: str,
    request: Request,
    catalog: CatalogDep,
    feedTitle: OptionalParam = None,
    ctx: OptionalParam = None,
) -> JSONResponse:
    """Get a collection of the user identified by the ctx token (myFavorites)"""
    context = parse_context(ctx, log_error=False)
    items = get_user_collection(catalog, collection_name, context.get("userToken"))
    return feed_response(build_feed(
        str(request.url),
        items,
        base_url=settings.base_url,
        title=feedTitle,
    ))
