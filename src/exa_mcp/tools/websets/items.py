"""Webset item tools, including local search over all items of a Webset."""

from __future__ import annotations

import logging
import re
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import WEBSET_ITEM_ENDPOINT, WEBSET_ITEMS_ENDPOINT, ExaClient
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.responses import ErrorCode
from exa_mcp.tools.helpers import (
    exa_error_response,
    invalid_input,
    list_data,
    page_params,
    page_summary,
    render_call,
    render_json,
    tool_registrar,
)
from exa_mcp.tools.websets.models import ItemFilters

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 100


def has_enriched_data(item: dict[str, Any]) -> bool:
    return bool(item.get("enrichedData"))


def summarize_item(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": item.get("id"),
        "url": item.get("url"),
        "title": item.get("title"),
        "type": item.get("type"),
        "verificationStatus": (item.get("verification") or {}).get("status"),
        "hasEnrichedData": has_enriched_data(item),
        "createdAt": item.get("createdAt"),
        "updatedAt": item.get("updatedAt"),
    }


def filter_items(items: list[dict[str, Any]], filters: Optional[ItemFilters]) -> list[dict[str, Any]]:
    """Apply item filters. Patterns are case-insensitive regular expressions.

    Raises:
        re.error: If a pattern does not compile
    """
    if filters is None:
        return list(items)

    url_regex = re.compile(filters.url_pattern, re.IGNORECASE) if filters.url_pattern else None
    title_regex = (
        re.compile(filters.title_pattern, re.IGNORECASE) if filters.title_pattern else None
    )

    matched = []
    for item in items:
        if filters.type and item.get("type") != filters.type:
            continue
        if (
            filters.verification_status
            and (item.get("verification") or {}).get("status") != filters.verification_status
        ):
            continue
        if (
            filters.has_enriched_data is not None
            and has_enriched_data(item) != filters.has_enriched_data
        ):
            continue
        if url_regex and not url_regex.search(item.get("url") or ""):
            continue
        if title_regex and not (item.get("title") and title_regex.search(item["title"])):
            continue
        matched.append(item)
    return matched


async def fetch_all_items(client: ExaClient, webset_id: str) -> list[dict[str, Any]]:
    """Walk every page of a Webset's items."""
    path = WEBSET_ITEMS_ENDPOINT.format(webset_id=webset_id)
    items: list[dict[str, Any]] = []
    cursor: Optional[str] = None
    while True:
        response = await client.get(path, page_params(cursor, SEARCH_PAGE_SIZE))
        items.extend(list_data(response))
        if not isinstance(response, dict) or not response.get("hasMore"):
            break
        next_cursor = response.get("nextCursor")
        if not next_cursor:
            break
        if next_cursor == cursor:
            logger.warning("Webset %s items returned a repeated cursor; stopping", webset_id)
            break
        cursor = next_cursor
    logger.info("Fetched %d items from Webset %s", len(items), webset_id)
    return items


async def _handle_list_items(
    client: ExaClient,
    *,
    webset_id: str,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    path = WEBSET_ITEMS_ENDPOINT.format(webset_id=webset_id)
    try:
        response = await client.get(path, page_params(cursor, limit))
    except ExaError as e:
        return exa_error_response("List items", e)

    items = [summarize_item(item) for item in list_data(response)]
    summary = page_summary(response if isinstance(response, dict) else None, "items", items)
    return render_json({"websetId": webset_id, **summary})


async def _handle_get_item(client: ExaClient, *, webset_id: str, item_id: str) -> str | dict:
    path = WEBSET_ITEM_ENDPOINT.format(webset_id=webset_id, item_id=item_id)
    return await render_call("Get item", client.get(path))


async def _handle_delete_item(client: ExaClient, *, webset_id: str, item_id: str) -> str | dict:
    path = WEBSET_ITEM_ENDPOINT.format(webset_id=webset_id, item_id=item_id)
    try:
        await client.delete(path)
    except ExaError as e:
        return exa_error_response("Delete item", e)
    return f"Item {item_id} has been successfully deleted from Webset {webset_id}."


async def _handle_search_items(
    client: ExaClient,
    *,
    webset_id: str,
    filters: Optional[ItemFilters] = None,
) -> str | dict:
    """Fetch every item of a Webset and filter locally."""
    # Validate patterns before paging through the whole Webset.
    for field, pattern in (
        ("url_pattern", filters.url_pattern if filters else None),
        ("title_pattern", filters.title_pattern if filters else None),
    ):
        if pattern:
            try:
                re.compile(pattern)
            except re.error as e:
                return invalid_input(
                    "Search items",
                    f"invalid regular expression {pattern!r}: {e}",
                    field=field,
                    error_code=ErrorCode.INVALID_REGEX_PATTERN,
                )

    try:
        items = await fetch_all_items(client, webset_id)
    except ExaError as e:
        return exa_error_response("Search items", e)

    matched = filter_items(items, filters)
    return render_json(
        {
            "websetId": webset_id,
            "totalItems": len(items),
            "matchingItems": len(matched),
            "filters": filters.model_dump(by_alias=False, exclude_none=True) if filters else None,
            "items": [
                {
                    "id": item.get("id"),
                    "url": item.get("url"),
                    "title": item.get("title"),
                    "type": item.get("type"),
                    "verification": item.get("verification"),
                    "enrichedData": item.get("enrichedData"),
                    "metadata": item.get("metadata"),
                    "createdAt": item.get("createdAt"),
                    "updatedAt": item.get("updatedAt"),
                }
                for item in matched
            ],
        }
    )


def register_webset_item_tools(mcp: FastMCP, client: ExaClient, enabled: Collection[str]) -> None:
    register = tool_registrar(mcp, enabled)

    @register("list_webset_items_exa")
    async def list_webset_items_exa(
        webset_id: str, cursor: Optional[str] = None, limit: Optional[int] = None
    ) -> Any:
        """List the items found and verified in a Webset.

        Args:
            webset_id: The unique identifier of the Webset
            cursor: Pagination cursor from a previous response
            limit: Results per page (default: 25, max: 200)
        """
        return await _handle_list_items(client, webset_id=webset_id, cursor=cursor, limit=limit)

    @register("get_webset_item_exa")
    async def get_webset_item_exa(webset_id: str, item_id: str) -> Any:
        """Get an item with its content, verification details and enriched data.

        Args:
            webset_id: The unique identifier of the Webset
            item_id: The unique identifier of the item
        """
        return await _handle_get_item(client, webset_id=webset_id, item_id=item_id)

    @register("delete_webset_item_exa")
    async def delete_webset_item_exa(webset_id: str, item_id: str) -> Any:
        """Permanently delete an item from a Webset.

        Args:
            webset_id: The unique identifier of the Webset
            item_id: The unique identifier of the item to delete
        """
        return await _handle_delete_item(client, webset_id=webset_id, item_id=item_id)

    @register("search_webset_items_exa")
    async def search_webset_items_exa(webset_id: str, filters: Optional[ItemFilters] = None) -> Any:
        """Search and filter the items of a Webset.

        Retrieves every item and filters locally by type, verification
        status, enriched-data presence and URL/title patterns.

        Args:
            webset_id: The unique identifier of the Webset
            filters: Filtering criteria; patterns are case-insensitive regexes
        """
        return await _handle_search_items(client, webset_id=webset_id, filters=filters)
