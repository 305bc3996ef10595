"""Webset enrichment tools."""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import (
    WEBSET_ENRICHMENT_CANCEL_ENDPOINT,
    WEBSET_ENRICHMENT_ENDPOINT,
    WEBSET_ENRICHMENTS_ENDPOINT,
    ExaClient,
)
from exa_mcp.core.exa.errors import ExaError
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
    EnrichmentConfig,
    EnrichmentFormat,
    EnrichmentOption,
)

logger = logging.getLogger(__name__)


async def _handle_create_enrichment(
    client: ExaClient, *, webset_id: str, enrichment: EnrichmentConfig
) -> str | dict:
    if enrichment.missing_options:
        return invalid_input(
            "Create enrichment",
            "'options' format requires providing option labels",
            field="options",
        )
    path = WEBSET_ENRICHMENTS_ENDPOINT.format(webset_id=webset_id)
    logger.info("Creating enrichment for Webset %s", webset_id)
    return await render_call("Create enrichment", client.post(path, enrichment.to_payload()))


async def _handle_get_enrichment(
    client: ExaClient, *, webset_id: str, enrichment_id: str
) -> str | dict:
    path = WEBSET_ENRICHMENT_ENDPOINT.format(webset_id=webset_id, enrichment_id=enrichment_id)
    return await render_call("Get enrichment", client.get(path))


async def _handle_list_enrichments(
    client: ExaClient,
    *,
    webset_id: str,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    path = WEBSET_ENRICHMENTS_ENDPOINT.format(webset_id=webset_id)
    try:
        response = await client.get(path, page_params(cursor, limit))
    except ExaError as e:
        return exa_error_response("List enrichments", e)

    enrichments = [
        {
            "id": e.get("id"),
            "status": e.get("status"),
            "title": e.get("title"),
            "description": e.get("description"),
            "format": e.get("format"),
            "createdAt": e.get("createdAt"),
        }
        for e in list_data(response)
    ]
    summary = page_summary(
        response if isinstance(response, dict) else None, "enrichments", enrichments
    )
    return render_json({"websetId": webset_id, **summary})


async def _handle_delete_enrichment(
    client: ExaClient, *, webset_id: str, enrichment_id: str
) -> str | dict:
    path = WEBSET_ENRICHMENT_ENDPOINT.format(webset_id=webset_id, enrichment_id=enrichment_id)
    try:
        await client.delete(path)
    except ExaError as e:
        return exa_error_response("Delete enrichment", e)
    return f"Enrichment {enrichment_id} has been successfully deleted from Webset {webset_id}."


async def _handle_cancel_enrichment(
    client: ExaClient, *, webset_id: str, enrichment_id: str
) -> str | dict:
    path = WEBSET_ENRICHMENT_CANCEL_ENDPOINT.format(
        webset_id=webset_id, enrichment_id=enrichment_id
    )
    return await render_call("Cancel enrichment", client.post(path))


def register_webset_enrichment_tools(
    mcp: FastMCP, client: ExaClient, enabled: Collection[str]
) -> None:
    register = tool_registrar(mcp, enabled)

    @register("create_webset_enrichment_exa")
    async def create_webset_enrichment_exa(
        webset_id: str,
        description: str,
        format: Optional[EnrichmentFormat] = None,
        options: Optional[list[EnrichmentOption]] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> Any:
        """Create an enrichment that extracts specific data from every Webset item.

        Args:
            webset_id: The unique identifier of the Webset
            description: Data to extract (e.g., 'Find the CEO name and email for each company')
            format: Expected format of the extracted data (auto-detected if not provided)
            options: Predefined options (required only if format is 'options')
            metadata: Key-value metadata for the enrichment
        """
        enrichment = EnrichmentConfig(
            description=description, format=format, options=options, metadata=metadata
        )
        return await _handle_create_enrichment(
            client, webset_id=webset_id, enrichment=enrichment
        )

    @register("get_webset_enrichment_exa")
    async def get_webset_enrichment_exa(webset_id: str, enrichment_id: str) -> Any:
        """Get an enrichment with its status, format and generated instructions.

        Args:
            webset_id: The unique identifier of the Webset
            enrichment_id: The unique identifier of the enrichment
        """
        return await _handle_get_enrichment(
            client, webset_id=webset_id, enrichment_id=enrichment_id
        )

    @register("list_webset_enrichments_exa")
    async def list_webset_enrichments_exa(
        webset_id: str, cursor: Optional[str] = None, limit: Optional[int] = None
    ) -> Any:
        """List the enrichments of a Webset.

        Args:
            webset_id: The unique identifier of the Webset
            cursor: Pagination cursor from a previous response
            limit: Results per page (default: 25, max: 200)
        """
        return await _handle_list_enrichments(
            client, webset_id=webset_id, cursor=cursor, limit=limit
        )

    @register("delete_webset_enrichment_exa")
    async def delete_webset_enrichment_exa(webset_id: str, enrichment_id: str) -> Any:
        """Delete an enrichment. Data already extracted is kept.

        Args:
            webset_id: The unique identifier of the Webset
            enrichment_id: The unique identifier of the enrichment to delete
        """
        return await _handle_delete_enrichment(
            client, webset_id=webset_id, enrichment_id=enrichment_id
        )

    @register("cancel_webset_enrichment_exa")
    async def cancel_webset_enrichment_exa(webset_id: str, enrichment_id: str) -> Any:
        """Cancel a running enrichment. Data already extracted is kept.

        Args:
            webset_id: The unique identifier of the Webset
            enrichment_id: The unique identifier of the enrichment to cancel
        """
        return await _handle_cancel_enrichment(
            client, webset_id=webset_id, enrichment_id=enrichment_id
        )
