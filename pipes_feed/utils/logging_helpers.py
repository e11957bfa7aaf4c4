"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_catalog_stats(logger: logging.Logger, counts: dict[str, int]) -> None:
    """
    Log catalog record counts per kind.

    Args:
        logger: Logger instance
        counts: Mapping of record kind -> number of records
    """
    summary = ", ".join(f"{kind}={count}" for kind, count in sorted(counts.items()))
    logger.info(f"Catalog loaded: {summary or 'empty'}")


def log_stage(logger: logging.Logger, stage: str, remaining: int) -> None:
    """Log how many records survive a query stage."""
    logger.debug(f"  {stage}: {remaining} records")


def log_query_summary(
    logger: logging.Logger,
    kind: str,
    total: int,
    returned: int,
    page: int,
    next_page: int | None
) -> None:
    """
    Log the outcome of a query.

    Args:
        logger: Logger instance
        kind: Query kind ("media" or "epg")
        total: Records matching before pagination
        returned: Records on the returned page
        page: Requested page number
        next_page: Next page number, if any
    """
    logger.info(
        f"{kind} query: {total} matched, page {page} returned {returned}, "
        f"next page: {next_page if next_page is not None else 'none'}"
    )
