"""Shared fixtures: a small in-memory catalog and a fixed reference instant."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from pipes_feed.catalog import CatalogStore, set_catalog
from pipes_feed.models import Channel, Episode, Genre, Program, Season, Series, WeeklyOffset

# Wednesday; the week starts Monday 2025-10-13 00:00 UTC
NOW = datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)
WEEK_START = datetime(2025, 10, 13, tzinfo=timezone.utc)


def make_episode(episode_id: str, series_id: str, season: int, number: int, **extra) -> Episode:
    title = extra.pop("title", f"{series_id} E{number}S{season}")
    return Episode(
        id=episode_id,
        title=title,
        summary=extra.pop("summary", None),
        genre=extra.pop("genre", "genre-1"),
        channel=extra.pop("channel", "channel-1"),
        series_id=series_id,
        season_number=season,
        episode_number=number,
        duration_in_seconds=extra.pop("duration_in_seconds", 1800),
        stream_url="https://example.com/stream.m3u8",
        **extra,
    )


def make_program(program_id: str, channel: str, offset: timedelta, duration: int) -> Program:
    seconds = offset.total_seconds()
    return Program(
        id=program_id,
        title=f"Program {program_id}",
        channel=channel,
        duration_in_seconds=duration,
        air_time=WeeklyOffset(seconds=seconds),
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def media() -> list:
    return [
        Channel(id="channel-1", cta="Watch Live", label="Channel 1"),
        Genre(id="genre-1", title="Drama"),
        Genre(id="genre-2", title="Action"),
        Season(id="season-1"),
        Series(
            id="series-1",
            title="Harbor Lights",
            summary="A lighthouse keeper uncovers the secrets of a coastal town.",
            genre="genre-1",
            channel="channel-1",
            category="Drama",
        ),
        Series(
            id="series-2",
            title="Iron Pursuit",
            summary="Two detectives chase a smuggling ring.",
            genre="genre-2",
            channel="channel-2",
            category="Action",
        ),
        Series(
            id="series-3",
            title="Northern Shift",
            summary="Night nurses at a remote hospital.",
            genre="genre-1",
            category="Drama",
            starts_on=WeeklyOffset(days=5, hours=20),
        ),
        make_episode("ep-1-1", "series-1", 1, 1, title="Harbor Lights E1S1"),
        make_episode("ep-1-2", "series-1", 1, 2, title="Harbor Lights E2S1"),
        make_episode("ep-2-1", "series-1", 2, 1, title="Harbor Lights E1S2"),
        make_episode("ep-2-2", "series-1", 2, 2, title="Harbor Lights E2S2"),
        make_episode(
            "ep-iron-1",
            "series-2",
            1,
            1,
            title="Iron Pursuit E1S1",
            genre="genre-2",
            channel="channel-2",
            duration_in_seconds=120,
            air_timestamp=NOW - timedelta(seconds=60),
        ),
    ]


@pytest.fixture
def programs() -> list[Program]:
    wednesday = timedelta(days=2)
    return [
        make_program("p1", "channel-1", wednesday + timedelta(hours=9), 3600),
        make_program("p2", "channel-2", wednesday + timedelta(hours=10), 3600),
        make_program("p3", "channel-1", wednesday + timedelta(hours=11), 1800),
        make_program("p4", "channel-2", wednesday + timedelta(hours=11, minutes=59), 120),
        make_program("p5", "channel-1", wednesday + timedelta(hours=13), 3600),
        make_program("p6", "channel-2", timedelta(days=3, hours=20), 3600),
    ]


@pytest.fixture
def catalog(media, programs) -> CatalogStore:
    return CatalogStore.build(media, programs)


@pytest.fixture
def client(catalog):
    from pipes_feed.main import app
    from pipes_feed.routers import current_time

    set_catalog(catalog)
    app.dependency_overrides[current_time] = lambda: NOW
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        set_catalog(None)
