"""Webset search tools."""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import (
    WEBSET_SEARCH_CANCEL_ENDPOINT,
    WEBSET_SEARCH_ENDPOINT,
    WEBSET_SEARCHES_ENDPOINT,
    ExaClient,
)
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import compact
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
from exa_mcp.tools.websets.models import (
    SearchBehavior,
    SearchCriterion,
    WebsetEntity,
    WebsetSearchConfig,
)

logger = logging.getLogger(__name__)


def format_search(search: dict[str, Any]) -> dict[str, Any]:
    formatted = {
        "id": search.get("id"),
        "status": search.get("status"),
        "query": search.get("query"),
        "targetCount": search.get("count"),
        "behavior": search.get("behavior"),
        "entity": search.get("entity"),
        "criteria": search.get("criteria"),
        "progress": search.get("progress"),
        "createdAt": search.get("createdAt"),
        "updatedAt": search.get("updatedAt"),
        "metadata": search.get("metadata"),
    }
    if search.get("canceledAt"):
        formatted["canceledAt"] = search["canceledAt"]
        formatted["canceledReason"] = search.get("canceledReason")
    return formatted


async def _handle_create_search(
    client: ExaClient, *, webset_id: str, search: WebsetSearchConfig
) -> str | dict:
    if not search.query.strip():
        return invalid_input("Create search", "query must not be empty", field="query")
    return await render_call(
        "Create search",
        client.post(WEBSET_SEARCHES_ENDPOINT.format(webset_id=webset_id), search.to_payload()),
    )


async def _handle_get_search(client: ExaClient, *, webset_id: str, search_id: str) -> str | dict:
    path = WEBSET_SEARCH_ENDPOINT.format(webset_id=webset_id, search_id=search_id)
    try:
        response = await client.get(path)
    except ExaError as e:
        return exa_error_response("Get search", e)
    logger.info("Search %s status: %s", search_id, (response or {}).get("status"))
    return render_json(format_search(response or {}))


async def _handle_list_searches(
    client: ExaClient,
    *,
    webset_id: str,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    path = WEBSET_SEARCHES_ENDPOINT.format(webset_id=webset_id)
    try:
        response = await client.get(path, page_params(cursor, limit))
    except ExaError as e:
        return exa_error_response("List searches", e)

    searches = [
        compact(
            id=s.get("id"),
            status=s.get("status"),
            query=s.get("query"),
            targetCount=s.get("count"),
            progress=s.get("progress"),
            createdAt=s.get("createdAt"),
        )
        for s in list_data(response)
    ]
    summary = page_summary(response if isinstance(response, dict) else None, "searches", searches)
    return render_json({"websetId": webset_id, **summary})


async def _handle_cancel_search(client: ExaClient, *, webset_id: str, search_id: str) -> str | dict:
    path = WEBSET_SEARCH_CANCEL_ENDPOINT.format(webset_id=webset_id, search_id=search_id)
    return await render_call("Cancel search", client.post(path))


def register_webset_search_tools(
    mcp: FastMCP, client: ExaClient, enabled: Collection[str]
) -> None:
    register = tool_registrar(mcp, enabled)

    @register("create_webset_search_exa")
    async def create_webset_search_exa(
        webset_id: str,
        query: str,
        count: Optional[int] = None,
        entity: Optional[WebsetEntity] = None,
        criteria: Optional[list[SearchCriterion]] = None,
        behavior: Optional[SearchBehavior] = None,
    ) -> Any:
        """Create a search within an existing Webset.

        The search finds and verifies items matching the query and criteria,
        either replacing (override) or adding to (append) existing items.

        Args:
            webset_id: The unique identifier of the Webset
            query: Search query for finding items. URLs will be crawled for context.
            count: Target number of items to find (default: 10)
            entity: Entity type (auto-detected if not provided)
            criteria: Evaluation criteria (auto-detected if not provided)
            behavior: override or append (default: override)
        """
        search = WebsetSearchConfig(
            query=query, count=count, entity=entity, criteria=criteria, behavior=behavior
        )
        return await _handle_create_search(client, webset_id=webset_id, search=search)

    @register("get_webset_search_exa")
    async def get_webset_search_exa(webset_id: str, search_id: str) -> Any:
        """Get a Webset search with its status and progress.

        Args:
            webset_id: The unique identifier of the Webset
            search_id: The unique identifier of the search
        """
        return await _handle_get_search(client, webset_id=webset_id, search_id=search_id)

    @register("list_webset_searches_exa")
    async def list_webset_searches_exa(
        webset_id: str, cursor: Optional[str] = None, limit: Optional[int] = None
    ) -> Any:
        """List the searches of a Webset.

        Args:
            webset_id: The unique identifier of the Webset
            cursor: Pagination cursor from a previous response
            limit: Results per page (default: 25, max: 200)
        """
        return await _handle_list_searches(
            client, webset_id=webset_id, cursor=cursor, limit=limit
        )

    @register("cancel_webset_search_exa")
    async def cancel_webset_search_exa(webset_id: str, search_id: str) -> Any:
        """Cancel a running Webset search. Items found so far are kept.

        Args:
            webset_id: The unique identifier of the Webset
            search_id: The unique identifier of the search to cancel
        """
        return await _handle_cancel_search(client, webset_id=webset_id, search_id=search_id)
