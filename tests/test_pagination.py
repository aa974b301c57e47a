"""Tests for cursor pagination."""

import pytest

from gong_fast_mcp.pagination import collect_items, iterate_pages, next_cursor


class TestNextCursor:
    def test_present(self):
        assert next_cursor({"records": {"cursor": "abc"}}) == "abc"

    @pytest.mark.parametrize(
        "page",
        [{}, {"records": None}, {"records": {}}, {"records": {"cursor": ""}}],
    )
    def test_absent_means_last_page(self, page):
        assert next_cursor(page) is None


class TestIteratePages:
    @pytest.mark.asyncio
    async def test_follows_cursors_in_order(self):
        pages = {
            None: {"items": [1, 2], "records": {"cursor": "p2"}},
            "p2": {"items": [3], "records": {"cursor": "p3"}},
            "p3": {"items": [4, 5], "records": {}},
        }
        seen: list[str | None] = []

        async def fetch(cursor):
            seen.append(cursor)
            return pages[cursor]

        assert await collect_items(fetch, "items") == [1, 2, 3, 4, 5]
        assert seen == [None, "p2", "p3"]

    @pytest.mark.asyncio
    async def test_stops_at_max_pages(self):
        calls = 0

        async def fetch(cursor):
            nonlocal calls
            calls += 1
            return {"items": [calls], "records": {"cursor": "again"}}

        items = await collect_items(fetch, "items", max_pages=7)
        assert calls == 7
        assert items == list(range(1, 8))

    @pytest.mark.asyncio
    async def test_default_cap_is_fifty(self):
        calls = 0

        async def fetch(cursor):
            nonlocal calls
            calls += 1
            return {"records": {"cursor": f"c{calls}"}}

        pages = [page async for page in iterate_pages(fetch)]
        assert calls == 50
        assert len(pages) == 50

    @pytest.mark.asyncio
    async def test_missing_or_non_list_items_are_skipped(self):
        pages = {
            None: {"records": {"cursor": "p2"}},
            "p2": {"items": None, "records": {"cursor": "p3"}},
            "p3": {"items": ["x"]},
        }

        async def fetch(cursor):
            return pages[cursor]

        assert await collect_items(fetch, "items") == ["x"]
