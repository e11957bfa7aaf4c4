import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pipes_feed.config import settings
from pipes_feed.errors import CatalogError, CatalogNotLoadedError
from pipes_feed.models import CatalogRecord, Episode, Program, Record

logger = logging.getLogger(__name__)

# Snapshot - installed by init_catalog() during startup
_catalog: "CatalogStore | None" = None


@dataclass(frozen=True, slots=True)
class CatalogStore:
    """Immutable in-memory snapshot of media records and EPG programs"""
    media: tuple[Record, ...] = ()
    programs: tuple[Program, ...] = ()
    _index: dict[tuple[str, str], Record] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(cls, media: Iterable[Record], programs: Iterable[Program]) -> "CatalogStore":
        """
        Build a snapshot, enforcing id uniqueness within each kind

        Raises:
            CatalogError: If two records of the same kind share an id
        """
        media = tuple(media)
        programs = tuple(programs)
        index: dict[tuple[str, str], Record] = {}

        for record in (*media, *programs):
            key = (record.type, record.id)
            if key in index:
                raise CatalogError(f"Duplicate {record.type} id in catalog: {record.id}")
            index[key] = record

        return cls(media=media, programs=programs, _index=index)

    def get(self, kind: str, record_id: str) -> Record | None:
        return self._index.get((kind, record_id))

    def of_kind(self, kind: str) -> list[Record]:
        return [record for record in self.media if record.type == kind]

    def episodes(self) -> list[Episode]:
        return self.of_kind("episode")

    def counts(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for record in self.media:
            totals[record.type] = totals.get(record.type, 0) + 1
        totals["program"] = len(self.programs)
        return totals

    def __len__(self) -> int:
        return len(self.media) + len(self.programs)


async def init_catalog(source: str | None = None) -> CatalogStore:
    """Load the catalog snapshot and install it for the process lifetime"""
    global _catalog
    from pipes_feed.services.catalog_loader_service import load_catalog

    source = source or settings.catalog_source
    logger.info(f"Initializing catalog from {source}")

    _catalog = await load_catalog(source)

    logger.info("Catalog initialized successfully")
    return _catalog


def set_catalog(catalog: CatalogStore | None) -> None:
    """Install a snapshot directly (tests, embedded use)"""
    global _catalog
    _catalog = catalog


def get_catalog() -> CatalogStore:
    """Catalog dependency for FastAPI"""
    if _catalog is None:
        raise CatalogNotLoadedError("Catalog not initialized. Call init_catalog() during startup.")
    return _catalog


def close_catalog() -> None:
    """Drop the snapshot on shutdown"""
    global _catalog
    if _catalog is not None:
        _catalog = None
        logger.info("Catalog released")


__all__ = [
    "CatalogError",
    "CatalogStore",
    "close_catalog",
    "get_catalog",
    "init_catalog",
    "set_catalog",
]
