"""
Catalog Loader Service

Reads the JSON snapshot (local file or HTTP/HTTPS URL), validates it and
builds the immutable CatalogStore.
"""
import logging

import httpx
from pydantic import BaseModel, ValidationError

from pipes_feed.catalog import CatalogStore
from pipes_feed.config import settings
from pipes_feed.errors import CatalogError
from pipes_feed.models import MediaRecord, Program
from pipes_feed.utils.file_operations import download_file, is_remote_source, read_local_file
from pipes_feed.utils.logging_helpers import log_catalog_stats

logger = logging.getLogger(__name__)


class CatalogSnapshot(BaseModel):
    """On-disk snapshot layout"""
    media: list[MediaRecord] = []
    programs: list[Program] = []


def parse_catalog(payload: bytes | str) -> CatalogStore:
    """
    Validate snapshot JSON and build the store

    Raises:
        CatalogError: If the payload is not valid JSON or a record is malformed
    """
    try:
        snapshot = CatalogSnapshot.model_validate_json(payload)
    except ValidationError as e:
        logger.error(f"Catalog snapshot failed validation: {e.error_count()} error(s)")
        raise CatalogError(f"Invalid catalog snapshot: {e}") from e

    return CatalogStore.build(snapshot.media, snapshot.programs)


async def load_catalog(source: str) -> CatalogStore:
    """
    Load the catalog from a local path or URL

    Raises:
        CatalogError: If the source cannot be read or parsed
    """
    try:
        if is_remote_source(source):
            payload = await download_file(
                source,
                timeout=settings.catalog_download_timeout_sec,
                max_retries=settings.catalog_download_max_retries,
            )
        else:
            payload = await read_local_file(source)
    except (httpx.HTTPError, OSError) as e:
        logger.error(f"Failed to read catalog from {source}: {e}", exc_info=True)
        raise CatalogError(f"Cannot read catalog source '{source}': {e}") from e

    catalog = parse_catalog(payload)
    log_catalog_stats(logger, catalog.counts())
    return catalog
