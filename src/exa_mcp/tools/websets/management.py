"""Webset lifecycle tools: create, list, get, update, delete, cancel."""

from __future__ import annotations

import logging
from typing import Any, Collection, Literal, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import (
    WEBSET_CANCEL_ENDPOINT,
    WEBSET_ENDPOINT,
    WEBSETS_ENDPOINT,
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
from exa_mcp.tools.websets.models import EnrichmentConfig, WebsetSearchConfig

logger = logging.getLogger(__name__)


def summarize_webset(webset: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": webset.get("id"),
        "status": webset.get("status"),
        "externalId": webset.get("externalId"),
        "searchCount": len(webset.get("searches") or []),
        "enrichmentCount": len(webset.get("enrichments") or []),
        "monitorCount": len(webset.get("monitors") or []),
        "createdAt": webset.get("createdAt"),
        "updatedAt": webset.get("updatedAt"),
        "metadata": webset.get("metadata"),
    }


async def _handle_create_webset(
    client: ExaClient,
    *,
    search: Optional[WebsetSearchConfig] = None,
    enrichments: Optional[list[EnrichmentConfig]] = None,
    external_id: Optional[str] = None,
    metadata: Optional[dict[str, str]] = None,
) -> str | dict:
    for enrichment in enrichments or []:
        if enrichment.missing_options:
            return invalid_input(
                "Create Webset",
                "'options' format requires providing option labels",
                field="enrichments",
            )

    body = compact(
        search=search.to_payload() if search else None,
        enrichments=[e.to_payload() for e in enrichments] if enrichments else None,
        externalId=external_id,
        metadata=metadata,
    )
    logger.info("Creating Webset with %d parameters", len(body))
    try:
        response = await client.post(WEBSETS_ENDPOINT, body)
    except ExaError as e:
        return exa_error_response("Create Webset", e)

    logger.info("Webset created with ID: %s", (response or {}).get("id"))
    return render_json(response)


async def _handle_list_websets(
    client: ExaClient,
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    try:
        response = await client.get(WEBSETS_ENDPOINT, page_params(cursor, limit))
    except ExaError as e:
        return exa_error_response("List Websets", e)

    websets = [summarize_webset(w) for w in list_data(response)]
    logger.info("Retrieved %d Websets", len(websets))
    return render_json(page_summary(response, "websets", websets))


async def _handle_get_webset(client: ExaClient, *, webset_id: str) -> str | dict:
    return await render_call(
        "Get Webset", client.get(WEBSET_ENDPOINT.format(webset_id=webset_id))
    )


async def _handle_update_webset(
    client: ExaClient,
    *,
    webset_id: str,
    external_id: Optional[str] = None,
    metadata: Optional[dict[str, str]] = None,
    status: Optional[str] = None,
) -> str | dict:
    body = compact(externalId=external_id, metadata=metadata, status=status)
    return await render_call(
        "Update Webset", client.post(WEBSET_ENDPOINT.format(webset_id=webset_id), body)
    )


async def _handle_delete_webset(client: ExaClient, *, webset_id: str) -> str | dict:
    try:
        await client.delete(WEBSET_ENDPOINT.format(webset_id=webset_id))
    except ExaError as e:
        return exa_error_response("Delete Webset", e)
    logger.info("Webset %s deleted", webset_id)
    return f"Webset {webset_id} has been successfully deleted."


async def _handle_cancel_webset(client: ExaClient, *, webset_id: str) -> str | dict:
    return await render_call(
        "Cancel Webset", client.post(WEBSET_CANCEL_ENDPOINT.format(webset_id=webset_id))
    )


def register_webset_management_tools(
    mcp: FastMCP, client: ExaClient, enabled: Collection[str]
) -> None:
    register = tool_registrar(mcp, enabled)

    @register("create_webset_exa")
    async def create_webset_exa(
        search: Optional[WebsetSearchConfig] = None,
        enrichments: Optional[list[EnrichmentConfig]] = None,
        external_id: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> Any:
        """Create a new Webset for targeted search and enrichment.

        A Webset is a container for searches, enrichments and monitoring of
        web content. An initial search and enrichments may be included.

        Args:
            search: Initial search configuration
            enrichments: Initial enrichment tasks
            external_id: Your own identifier for the Webset
            metadata: Key-value metadata for the Webset
        """
        return await _handle_create_webset(
            client,
            search=search,
            enrichments=enrichments,
            external_id=external_id,
            metadata=metadata,
        )

    @register("list_websets_exa")
    async def list_websets_exa(cursor: Optional[str] = None, limit: Optional[int] = None) -> Any:
        """List all Websets with pagination.

        Args:
            cursor: Pagination cursor from a previous response
            limit: Results per page (default: 25, max: 200)
        """
        return await _handle_list_websets(client, cursor=cursor, limit=limit)

    @register("get_webset_exa")
    async def get_webset_exa(webset_id: str) -> Any:
        """Get a Webset with its searches, enrichments, monitors and status.

        Args:
            webset_id: The unique identifier of the Webset
        """
        return await _handle_get_webset(client, webset_id=webset_id)

    @register("update_webset_exa")
    async def update_webset_exa(
        webset_id: str,
        external_id: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
        status: Optional[Literal["paused", "running"]] = None,
    ) -> Any:
        """Update a Webset's metadata, external ID, or status (pause/resume).

        Args:
            webset_id: The unique identifier of the Webset
            external_id: New external identifier
            metadata: Key-value metadata to set
            status: Pause or resume the Webset
        """
        return await _handle_update_webset(
            client,
            webset_id=webset_id,
            external_id=external_id,
            metadata=metadata,
            status=status,
        )

    @register("delete_webset_exa")
    async def delete_webset_exa(webset_id: str) -> Any:
        """Delete a Webset and all its searches, enrichments, items and monitors.

        Args:
            webset_id: The unique identifier of the Webset to delete
        """
        return await _handle_delete_webset(client, webset_id=webset_id)

    @register("cancel_webset_exa")
    async def cancel_webset_exa(webset_id: str) -> Any:
        """Cancel all running operations of a Webset. The Webset itself is kept.

        Args:
            webset_id: The unique identifier of the Webset
        """
        return await _handle_cancel_webset(client, webset_id=webset_id)
