"""Cursor-based pagination over Gong list endpoints."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 50

PageFetcher = Callable[[str | None], Awaitable[dict[str, Any]]]


def next_cursor(page: dict[str, Any]) -> str | None:
    """Return the cursor of *page*, or ``None`` on the last page."""
    records = page.get("records")
    if isinstance(records, dict):
        cursor = records.get("cursor")
        if isinstance(cursor, str) and cursor:
            return cursor
    return None


async def iterate_pages(
    fetch_page: PageFetcher,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> AsyncIterator[dict[str, Any]]:
    """Yield pages from *fetch_page* until the cursor runs out.

    *fetch_page* is called with ``None`` first and then with each returned
    cursor. At most *max_pages* pages are fetched.
    """
    cursor: str | None = None
    for _ in range(max_pages):
        page = await fetch_page(cursor)
        yield page
        cursor = next_cursor(page)
        if cursor is None:
            return
    logger.warning("Stopped paginating after %d pages; cursor still present", max_pages)


async def collect_items(
    fetch_page: PageFetcher,
    key: str,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[Any]:
    """Concatenate the *key* list of every page, in page order."""
    items: list[Any] = []
    async for page in iterate_pages(fetch_page, max_pages):
        value = page.get(key)
        if isinstance(value, list):
            items.extend(value)
    return items
