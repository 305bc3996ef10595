"""Tests for Webset item handlers and local item search."""

import json

import pytest

from exa_mcp.tools.websets.items import (
    _handle_delete_item,
    _handle_get_item,
    _handle_list_items,
    _handle_search_items,
    fetch_all_items,
    filter_items,
)
from exa_mcp.tools.websets.models import ItemFilters
from tests.conftest import assert_error_envelope
from tests.fixtures.exa_responses import page, webset_item

ITEMS = "/websets/v0/websets/ws_1/items"


@pytest.fixture
def items():
    return [
        webset_item("i_1", url="https://acme.com", title="Acme Robotics", enriched={"ceo": "Ann"}),
        webset_item("i_2", url="https://globex.io", title="Globex", verification="pending"),
        webset_item("i_3", url="https://blog.acme.com/post", title=None, item_type="article"),
    ]


class TestFilterItems:
    def test_no_filters_returns_all(self, items):
        assert filter_items(items, None) == items

    def test_type_and_verification(self, items):
        matched = filter_items(items, ItemFilters(type="company", verification_status="verified"))

        assert [i["id"] for i in matched] == ["i_1"]

    def test_enriched_data(self, items):
        assert [i["id"] for i in filter_items(items, ItemFilters(has_enriched_data=False))] == [
            "i_2",
            "i_3",
        ]

    def test_patterns_are_case_insensitive_search(self, items):
        matched = filter_items(items, ItemFilters(url_pattern="ACME"))

        assert [i["id"] for i in matched] == ["i_1", "i_3"]

    def test_title_pattern_skips_untitled(self, items):
        matched = filter_items(items, ItemFilters(title_pattern="^(acme|globex)"))

        assert [i["id"] for i in matched] == ["i_1", "i_2"]


class TestFetchAllItems:
    @pytest.mark.asyncio
    async def test_walks_pages_with_fixed_page_size(self, exa_api, client, items):
        exa_api.add(
            "GET",
            ITEMS,
            page(items[:2], has_more=True, next_cursor="c2"),
            page(items[2:], has_more=False),
        )

        fetched = await fetch_all_items(client, "ws_1")

        assert [i["id"] for i in fetched] == ["i_1", "i_2", "i_3"]
        first, second = exa_api.calls("GET", ITEMS)
        assert dict(first.url.params) == {"limit": "100"}
        assert dict(second.url.params) == {"cursor": "c2", "limit": "100"}

    @pytest.mark.asyncio
    async def test_stops_without_cursor(self, exa_api, client, items):
        exa_api.add("GET", ITEMS, page(items, has_more=True, next_cursor=None))

        await fetch_all_items(client, "ws_1")

        assert len(exa_api.calls("GET", ITEMS)) == 1

    @pytest.mark.asyncio
    async def test_bare_list_response(self, exa_api, client, items):
        exa_api.add("GET", ITEMS, items)

        fetched = await fetch_all_items(client, "ws_1")

        assert [i["id"] for i in fetched] == ["i_1", "i_2", "i_3"]
        assert len(exa_api.calls("GET", ITEMS)) == 1

    @pytest.mark.asyncio
    async def test_stops_on_repeated_cursor(self, exa_api, client, items):
        exa_api.add(
            "GET",
            ITEMS,
            page(items[:1], has_more=True, next_cursor="c2"),
            page(items[1:2], has_more=True, next_cursor="c2"),
            page(items[2:], has_more=False),
        )

        fetched = await fetch_all_items(client, "ws_1")

        assert [i["id"] for i in fetched] == ["i_1", "i_2"]
        assert len(exa_api.calls("GET", ITEMS)) == 2


class TestSearchItems:
    @pytest.mark.asyncio
    async def test_filters_across_pages(self, exa_api, client, items):
        exa_api.add(
            "GET",
            ITEMS,
            page(items[:1], has_more=True, next_cursor="c2"),
            page(items[1:]),
        )

        payload = json.loads(
            await _handle_search_items(
                client, webset_id="ws_1", filters=ItemFilters(url_pattern=r"acme\.com")
            )
        )

        assert payload["totalItems"] == 3
        assert payload["matchingItems"] == 2
        assert payload["filters"] == {"url_pattern": r"acme\.com"}
        assert [i["id"] for i in payload["items"]] == ["i_1", "i_3"]

    @pytest.mark.asyncio
    async def test_invalid_regex_rejected_before_fetching(self, exa_api, client):
        payload = assert_error_envelope(
            await _handle_search_items(
                client, webset_id="ws_1", filters=ItemFilters(title_pattern="(unclosed")
            ),
            error_code="INVALID_REGEX_PATTERN",
            message_prefix="Search items error: invalid regular expression",
        )
        assert payload["data"]["details"] == {"field": "title_pattern"}
        assert exa_api.requests == []

    @pytest.mark.asyncio
    async def test_fetch_error(self, exa_api, client):
        exa_api.add("GET", ITEMS, (404, {"error": "Webset not found"}))

        assert_error_envelope(
            await _handle_search_items(client, webset_id="ws_1"),
            error_code="NOT_FOUND",
            message_prefix="Search items error (404): Webset not found",
        )


class TestItemCrud:
    @pytest.mark.asyncio
    async def test_list(self, exa_api, client, items):
        exa_api.add("GET", ITEMS, page(items[:1], has_more=True, next_cursor="n"))

        payload = json.loads(await _handle_list_items(client, webset_id="ws_1", limit=1))

        assert payload["itemsCount"] == 1
        assert payload["nextCursor"] == "n"
        assert payload["items"][0]["verificationStatus"] == "verified"
        assert payload["items"][0]["hasEnrichedData"] is True

    @pytest.mark.asyncio
    async def test_get(self, exa_api, client, items):
        exa_api.add("GET", f"{ITEMS}/i_1", items[0])

        assert json.loads(await _handle_get_item(client, webset_id="ws_1", item_id="i_1"))["id"] == "i_1"

    @pytest.mark.asyncio
    async def test_delete(self, exa_api, client):
        exa_api.add("DELETE", f"{ITEMS}/i_1", {"id": "i_1"})

        assert (
            await _handle_delete_item(client, webset_id="ws_1", item_id="i_1")
            == "Item i_1 has been successfully deleted from Webset ws_1."
        )
