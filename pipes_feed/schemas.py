from datetime import datetime
from enum import Enum
from typing import Any
import logging

from pydantic import BaseModel, Field, field_validator

from pipes_feed.utils.coercion import coerce_positive_int, parse_epoch_millis
from pipes_feed.utils.timezone import is_valid_zone

logger = logging.getLogger(__name__)


class EpgMode(str, Enum):
    """Temporal filter applied to EPG programs"""
    NONE = "none"
    NOW = "now"
    UP_NEXT = "upNext"
    JUST_ENDED = "justEnded"
    FOR_DAY = "forDay"
    FUTURE_FOR_DAY = "futureForDay"

    @classmethod
    def parse(cls, value: Any) -> "EpgMode":
        """Unknown or empty values mean no mode"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class MediaQuery(BaseModel):
    """Declarative media query"""
    field_predicates: dict[str, Any] = Field(default_factory=dict, description="Field name -> expected value")
    text_query: str | None = Field(None, description="Free text search")
    sort_keys: list[str] = Field(default_factory=list, description="Sort keys, each optionally suffixed with ':desc'")
    page: int | None = Field(None, description="Page number, starts from 1")
    per_page: int | None = Field(None, description="Items per page")
    max_page: int | None = Field(None, description="Last page that may be served")
    time_zone: str = Field(default="UTC", description="Time zone for week placement (IANA or 'UTC')")

    @field_validator('page', 'per_page', 'max_page', mode='before')
    @classmethod
    def coerce_paging(cls, v: Any) -> int | None:
        """Malformed paging input falls back to defaults instead of failing"""
        return coerce_positive_int(v)

    @field_validator('sort_keys', mode='before')
    @classmethod
    def split_sort_keys(cls, v: Any) -> list[str]:
        """Accept a comma separated string"""
        if v is None:
            return []
        if isinstance(v, str):
            return [key.strip() for key in v.split(",") if key.strip()]
        return v

    @field_validator('time_zone', mode='before')
    @classmethod
    def validate_timezone(cls, v: Any) -> str:
        """Unknown zones fall back to UTC"""
        if not v:
            return "UTC"
        if not is_valid_zone(str(v)):
            logger.warning(f"Invalid timezone: {v}, using UTC")
            return "UTC"
        return str(v)


class EpgQuery(MediaQuery):
    """Declarative EPG query"""
    epg_mode: EpgMode = Field(default=EpgMode.NONE, description="Temporal filter")
    epg_reference_day: datetime | None = Field(None, description="Reference day for forDay/futureForDay (epoch millis)")
    limit: int | None = Field(None, description="Flat cap on results, bounded by the configured maximum")

    @field_validator('epg_mode', mode='before')
    @classmethod
    def parse_mode(cls, v: Any) -> EpgMode:
        return EpgMode.parse(v)

    @field_validator('epg_reference_day', mode='before')
    @classmethod
    def parse_reference(cls, v: Any) -> datetime | None:
        return parse_epoch_millis(v)

    @field_validator('limit', mode='before')
    @classmethod
    def coerce_limit(cls, v: Any) -> int | None:
        return coerce_positive_int(v)


class QueryResult(BaseModel):
    """Ordered page of records plus the next page number, if any"""
    items: list[Any] = Field(default_factory=list)
    next_page: int | None = None
    total: int = 0


class TypeValue(BaseModel):
    value: str


class FeedEntry(BaseModel):
    """Rendered record in the pipes2 entry shape"""
    id: str | int
    title: str | None = None
    summary: str | None = None
    type: TypeValue | None = None
    content: dict[str, Any] | None = None
    extensions: dict[str, Any] | None = None
    media_group: list[dict[str, Any]] | None = None


class Feed(BaseModel):
    """Response envelope consumed by the player"""
    id: str
    title: str | None = None
    type: TypeValue | None = None
    next: str | None = None
    entry: list[FeedEntry] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Standard error detail"""
    code: str = Field(..., description="Error code (e.g., 'COLLECTION_NOT_FOUND', 'VALIDATION_ERROR')")
    message: str = Field(..., description="Human-readable error message")
    context: dict | None = Field(None, description="Additional context about the error")


class StandardErrorResponse(BaseModel):
    """Standardized error response for all endpoints"""
    status: str = Field("error", description="Status indicator")
    timestamp: str = Field(..., description="ISO8601 timestamp of error")
    error: ErrorDetail = Field(..., description="Error details")
