"""
File operation utilities

This module reads catalog snapshots from disk or downloads them with retry logic.
"""
import logging
from pathlib import Path
import asyncio

import aiofiles
import httpx


logger = logging.getLogger(__name__)


def is_remote_source(source: str) -> bool:
    """Return True for HTTP/HTTPS sources"""
    return source.lower().startswith(("http://", "https://"))


async def read_local_file(path: str | Path) -> bytes:
    """
    Read a local file asynchronously

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    async with aiofiles.open(path, 'rb') as f:
        content = await f.read()

    logger.info(f"Read {len(content) / 1024:.1f} KB from {path}")
    return content


async def download_file(
    url: str,
    timeout: float = 30.0,
    max_retries: int = 3,
    backoff_factor: float = 2.0
) -> bytes:
    """
    Download a file from URL with exponential backoff retry logic

    Retries on transient network errors (timeouts, connection errors).
    Does NOT retry on 4xx HTTP errors (client errors).

    Args:
        url: URL to download from
        timeout: HTTP timeout in seconds
        max_retries: Maximum number of retry attempts
        backoff_factor: Exponential backoff multiplier (wait = backoff_factor ^ attempt)

    Returns:
        Response body

    Raises:
        httpx.HTTPError: If download fails after all retries
    """
    logger.info(f"Downloading file from {url}...")

    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(url)
                response.raise_for_status()

                logger.info(f"Downloaded {len(response.content) / 1024:.1f} KB from {url}")
                return response.content

        except (httpx.TimeoutException, httpx.ConnectError) as e:
            # Transient network errors - retry
            last_error = e
            if attempt < max_retries - 1:
                wait_time = backoff_factor ** attempt
                logger.warning(
                    f"Download attempt {attempt + 1}/{max_retries} failed (transient error): {type(e).__name__}. "
                    f"Retrying in {wait_time:.1f}s..."
                )
                await asyncio.sleep(wait_time)
            else:
                logger.error(f"Download failed after {max_retries} attempts (transient error)")

        except httpx.HTTPStatusError as e:
            # HTTP errors - don't retry on 4xx (client error), retry on 5xx (server error)
            if 400 <= e.response.status_code < 500:
                logger.error(f"HTTP {e.response.status_code} (client error): {e}")
                raise

            last_error = e
            if attempt < max_retries - 1:
                wait_time = backoff_factor ** attempt
                logger.warning(
                    f"Download attempt {attempt + 1}/{max_retries} failed "
                    f"(HTTP {e.response.status_code} server error). "
                    f"Retrying in {wait_time:.1f}s..."
                )
                await asyncio.sleep(wait_time)
            else:
                logger.error(f"Download failed after {max_retries} attempts (HTTP {e.response.status_code})")

    if last_error:
        raise last_error

    raise RuntimeError(f"Failed to download {url} after {max_retries} attempts")
