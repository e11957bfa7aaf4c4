"""
Rendering Service

Maps catalog records into the pipes2 feed entry shape and wraps them in
the feed envelope.
"""
from collections.abc import Callable, Iterable
from datetime import datetime, timezone, tzinfo
from typing import Any

import httpx

from pipes_feed.models import Channel, Episode, Genre, Program, Record, Season, Series
from pipes_feed.schemas import Feed, FeedEntry, TypeValue
from pipes_feed.utils.timezone import format_broadcast_date, format_relative

PIPES2_MEDIA_TYPE = "application/vnd+applicaster.pipes2+json"

SCREEN_TYPES = {
    "episode": "example-episode",
    "series": "example-series",
    "coming_soon_series": "example-coming-soon-series",
    "channel": "example-channel",
    "genre": "example-genre",
    "season": "example-season",
}


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def dummy_media_group(base_url: str) -> list[dict[str, Any]]:
    """Placeholder artwork for every playable entry"""
    return [
        {
            "type": "image",
            "media_item": [
                {"key": "image_base", "src": f"{base_url}images/full-16x9.png"},
                {"key": "thumb_1", "src": f"{base_url}images/half-2x3.png"},
                {"key": "thumb_2", "src": f"{base_url}images/third-1x1.png"},
            ],
        }
    ]


def render_episode(episode: Episode | Program, zone: tzinfo, now: datetime, base_url: str) -> FeedEntry:
    air_timestamp = episode.air_timestamp
    extensions = _compact({
        "cta": episode.cta,
        "label": episode.label,
        "genre": episode.genre,
        "duration": episode.duration_in_seconds,
        "seriesId": episode.series_id,
        "channel": episode.channel,
        "seasonNumber": episode.season_number,
        "episodeNumber": episode.episode_number,
        "relativeBroadcastDate": format_relative(air_timestamp, now) if air_timestamp else None,
        "broadcastDate": format_broadcast_date(air_timestamp, zone) if air_timestamp else None,
        "isLive": episode.is_live,
        "mediaId": getattr(episode, "media_id", None),
        "analyticsCustomProperties": _compact({
            "seriesId": episode.series_id,
            "genre": episode.genre,
            "channel": episode.channel,
            "seasonNumber": episode.season_number,
            "episodeNumber": episode.episode_number,
        }),
    })
    return FeedEntry(
        id=episode.id,
        title=episode.title,
        summary=episode.summary,
        type=TypeValue(value=SCREEN_TYPES["episode"]),
        content=_compact({"src": episode.stream_url, "type": "video/hls"}),
        extensions=extensions,
        media_group=dummy_media_group(base_url),
    )


def render_series(series: Series, zone: tzinfo, now: datetime, base_url: str) -> FeedEntry:
    starts_on = None
    if series.starts_on_timestamp is not None:
        starts_on = f"Starts On {format_broadcast_date(series.starts_on_timestamp, zone)}"

    return FeedEntry(
        id=series.id,
        title=series.title,
        summary=series.summary,
        type=TypeValue(
            value=SCREEN_TYPES["coming_soon_series"] if starts_on else SCREEN_TYPES["series"]
        ),
        extensions=_compact({
            "cta": series.cta,
            "label": series.label,
            "genre": series.genre,
            "channel": series.channel,
            "startsOn": starts_on,
            "analyticsCustomProperties": _compact({
                "channel": series.channel,
                "genre": series.genre,
            }),
        }),
        media_group=dummy_media_group(base_url),
    )


def render_reference(record: Channel | Genre | Season, zone: tzinfo, now: datetime, base_url: str) -> FeedEntry:
    """Thin entities render with their id as title"""
    return FeedEntry(
        id=record.id,
        title=record.id,
        type=TypeValue(value=SCREEN_TYPES[record.type]),
        extensions=_compact({"cta": record.cta, "label": record.label}),
    )


RENDERERS: dict[str, Callable[..., FeedEntry]] = {
    "episode": render_episode,
    "program": render_episode,
    "series": render_series,
    "channel": render_reference,
    "genre": render_reference,
    "season": render_reference,
}


def render_entry(
    record: Record,
    *,
    base_url: str,
    zone: tzinfo = timezone.utc,
    now: datetime | None = None,
) -> FeedEntry:
    now = now or datetime.now(timezone.utc)
    return RENDERERS[record.type](record, zone, now, base_url)


def next_page_url(request_url: str, page: int) -> str:
    """Request URL with its page parameter replaced"""
    return str(httpx.URL(request_url).copy_set_param("page", str(page)))


def build_feed(
    request_url: str,
    records: Iterable[Record],
    *,
    base_url: str,
    title: str | None = None,
    next_page: int | None = None,
    zone: tzinfo = timezone.utc,
    now: datetime | None = None,
) -> Feed:
    """Render records into the feed envelope"""
    now = now or datetime.now(timezone.utc)
    return Feed(
        id=request_url,
        title=title,
        type=TypeValue(value="feed"),
        next=next_page_url(request_url, next_page) if next_page is not None else None,
        entry=[render_entry(record, base_url=base_url, zone=zone, now=now) for record in records],
    )
