"""
Collections Service

Predefined groupings of catalog records, looked up by name.
"""
from collections.abc import Callable
import logging
import random

from pipes_feed.catalog import CatalogStore
from pipes_feed.errors import CollectionNotFoundError
from pipes_feed.models import Record

logger = logging.getLogger(__name__)

MOCK_USER_ID = "userId1"
FAVORITES_COUNT = 4


def _pick(pool: list[Record], count: int, rng: random.Random) -> list[Record]:
    return rng.sample(pool, min(count, len(pool)))


def _home_featured(catalog: CatalogStore, rng: random.Random) -> list[Record]:
    pool = [record for record in catalog.media if record.type in ("episode", "series")]
    return _pick(pool, 1, rng)


def _featured_series(category: str) -> Callable[[CatalogStore, random.Random], list[Record]]:
    def build(catalog: CatalogStore, rng: random.Random) -> list[Record]:
        pool = [
            record for record in catalog.media
            if record.type == "series" and record.category == category
        ]
        return _pick(pool, 6, rng)
    return build


def _genres(catalog: CatalogStore, rng: random.Random) -> list[Record]:
    return catalog.of_kind("genre")


COLLECTIONS: dict[str, Callable[[CatalogStore, random.Random], list[Record]]] = {
    "homeFeatured": _home_featured,
    "featuredDrama": _featured_series("Drama"),
    "featuredAction": _featured_series("Action"),
    "genres": _genres,
}


def get_collection(catalog: CatalogStore, name: str, rng: random.Random | None = None) -> list[Record]:
    """
    Build a predefined collection

    Raises:
        CollectionNotFoundError: If name is not a known collection
    """
    build = COLLECTIONS.get(name)
    if build is None:
        logger.warning(f"Unknown collection requested: {name}")
        raise CollectionNotFoundError(name)

    items = build(catalog, rng or random.Random())
    logger.info(f"Collection {name}: {len(items)} items")
    return items


def resolve_user_id(user_token: str | None) -> str:
    """Map a context user token to a user id; every token maps to the demo user"""
    return MOCK_USER_ID


def _my_favorites(catalog: CatalogStore, user_id: str, rng: random.Random) -> list[Record]:
    favorite_ids = {record.id for record in _pick(catalog.episodes(), FAVORITES_COUNT, rng)}
    return [
        record for record in catalog.media
        if record.type == "episode" and record.id in favorite_ids
    ]


USER_COLLECTIONS: dict[str, Callable[[CatalogStore, str, random.Random], list[Record]]] = {
    "myFavorites": _my_favorites,
}


def get_user_collection(
    catalog: CatalogStore,
    name: str,
    user_token: str | None,
    rng: random.Random | None = None
) -> list[Record]:
    """
    Build a per-user collection, in catalog order

    Without an explicit rng, picks are seeded by user id so a user sees the
    same collection on every request.

    Raises:
        CollectionNotFoundError: If name is not a known user collection
    """
    build = USER_COLLECTIONS.get(name)
    if build is None:
        logger.warning(f"Unknown user collection requested: {name}")
        raise CollectionNotFoundError(name)

    user_id = resolve_user_id(user_token)
    items = build(catalog, user_id, rng or random.Random(user_id))
    logger.info(f"User collection {name} for {user_id}: {len(items)} items")
    return items
