"""
Catalog record models

One frozen pydantic model per entity kind. Wire names are camelCase
(``seriesId``, ``streamURL``); attributes are snake_case. Media kinds form a
discriminated union on ``type``.
"""
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Missing:
    """Sentinel for a field a record does not carry"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_FIELD_LOOKUPS: dict[type, dict[str, str]] = {}


def millis_to_datetime(value: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime"""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def datetime_to_millis(value: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds"""
    return int(value.timestamp() * 1000)


class WeeklyOffset(BaseModel):
    """Offset from the start of the week, e.g. ``{"days": 2, "hours": 20}``"""
    model_config = ConfigDict(frozen=True)

    days: float = 0
    hours: float = 0
    minutes: float = 0
    seconds: float = 0

    def as_timedelta(self) -> timedelta:
        return timedelta(days=self.days, hours=self.hours, minutes=self.minutes, seconds=self.seconds)


class CatalogRecord(BaseModel):
    """Attributes shared by every catalog entity"""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    title: str | None = None
    summary: str | None = None
    cta: str | None = None
    label: str | None = None

    @property
    def display_title(self) -> str:
        return self.title or self.id

    @classmethod
    def _field_lookup(cls) -> dict[str, str]:
        lookup = _FIELD_LOOKUPS.get(cls)
        if lookup is None:
            lookup = {}
            for name, info in cls.model_fields.items():
                lookup[name] = name
                if info.alias:
                    lookup[info.alias] = name
            _FIELD_LOOKUPS[cls] = lookup
        return lookup

    def field_value(self, name: str) -> Any:
        """
        Look up a field by wire or attribute name

        Returns MISSING when this kind has no such field or the value is unset.
        """
        attribute = self._field_lookup().get(name)
        if attribute is None:
            return MISSING
        value = getattr(self, attribute)
        return MISSING if value is None else value


class _Timestamped(CatalogRecord):
    """Records carrying a broadcast start and duration"""

    genre: str | None = None
    channel: str | None = None
    series_id: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    duration_in_seconds: int = Field(default=0, ge=0)
    stream_url: str | None = Field(default=None, alias="streamURL")
    air_timestamp: datetime | None = None
    is_live: bool = False

    @field_validator("air_timestamp", mode="before")
    @classmethod
    def parse_air_timestamp(cls, value):
        """Accept epoch milliseconds as stored in the snapshot"""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return millis_to_datetime(value)
        return value

    @field_validator("is_live", mode="before")
    @classmethod
    def ignore_stored_is_live(cls, value):
        """isLive is derived per query against now; a stored value is dropped"""
        return False

    @property
    def end_timestamp(self) -> datetime | None:
        if self.air_timestamp is None:
            return None
        # Elapsed seconds, not wall-clock time across a DST change
        return self.air_timestamp.astimezone(timezone.utc) + timedelta(seconds=self.duration_in_seconds)


class Episode(_Timestamped):
    type: Literal["episode"] = "episode"


class Series(CatalogRecord):
    type: Literal["series"] = "series"
    genre: str | None = None
    channel: str | None = None
    category: str | None = None
    starts_on: WeeklyOffset | None = None
    starts_on_timestamp: datetime | None = None


class Channel(CatalogRecord):
    type: Literal["channel"] = "channel"


class Genre(CatalogRecord):
    type: Literal["genre"] = "genre"


class Season(CatalogRecord):
    type: Literal["season"] = "season"


class Program(_Timestamped):
    """EPG entry; placed on the current week from its weekly offset at query time"""
    type: Literal["program"] = "program"
    air_time: WeeklyOffset = Field(default_factory=WeeklyOffset)
    media_id: str | None = None


MediaRecord = Annotated[
    Union[Episode, Series, Channel, Genre, Season],
    Field(discriminator="type"),
]

Record = Union[Episode, Series, Channel, Genre, Season, Program]
