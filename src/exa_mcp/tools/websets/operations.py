"""Websets operation tools: imports, monitors, webhooks and events."""

from __future__ import annotations

import logging
from typing import Any, Collection, Literal, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import (
    EVENT_ENDPOINT,
    EVENTS_ENDPOINT,
    IMPORT_ENDPOINT,
    IMPORTS_ENDPOINT,
    WEBHOOK_ATTEMPTS_ENDPOINT,
    WEBHOOKS_ENDPOINT,
    WEBSET_MONITOR_ENDPOINT,
    WEBSET_MONITORS_ENDPOINT,
    ExaClient,
)
from exa_mcp.core.exa.options import compact
from exa_mcp.tools.helpers import invalid_input, page_params, render_call, tool_registrar
from exa_mcp.tools.websets.models import MonitorCadence, SearchBehavior, WebhookEvent

logger = logging.getLogger(__name__)


# =============================================================================
# Imports
# =============================================================================


async def _handle_create_import(
    client: ExaClient,
    *,
    source_url: str,
    file_type: Optional[str] = None,
    webset_id: Optional[str] = None,
    metadata: Optional[dict[str, str]] = None,
) -> str | dict:
    body = compact(
        sourceUrl=source_url, fileType=file_type, websetId=webset_id, metadata=metadata
    )
    logger.info("Creating import from %s", source_url)
    return await render_call("Create import", client.post(IMPORTS_ENDPOINT, body))


async def _handle_get_import(client: ExaClient, *, import_id: str) -> str | dict:
    return await render_call(
        "Get import", client.get(IMPORT_ENDPOINT.format(import_id=import_id))
    )


# =============================================================================
# Monitors
# =============================================================================


async def _handle_create_monitor(
    client: ExaClient,
    *,
    webset_id: str,
    cadence: str,
    query: Optional[str] = None,
    search_behavior: Optional[str] = None,
    metadata: Optional[dict[str, str]] = None,
) -> str | dict:
    body = compact(
        websetId=webset_id,
        cadence=cadence,
        query=query,
        searchBehavior=search_behavior,
        metadata=metadata,
    )
    path = WEBSET_MONITORS_ENDPOINT.format(webset_id=webset_id)
    return await render_call("Create monitor", client.post(path, body))


async def _handle_update_monitor(
    client: ExaClient,
    *,
    webset_id: str,
    monitor_id: str,
    cadence: Optional[str] = None,
    query: Optional[str] = None,
    status: Optional[str] = None,
    search_behavior: Optional[str] = None,
    metadata: Optional[dict[str, str]] = None,
) -> str | dict:
    body = compact(
        cadence=cadence,
        query=query,
        status=status,
        searchBehavior=search_behavior,
        metadata=metadata,
    )
    if not body:
        return invalid_input(
            "Update monitor",
            "at least one field to update is required",
            remediation="Provide cadence, query, status, search_behavior or metadata",
        )
    path = WEBSET_MONITOR_ENDPOINT.format(webset_id=webset_id, monitor_id=monitor_id)
    return await render_call("Update monitor", client.patch(path, body))


# =============================================================================
# Webhooks & Events
# =============================================================================


async def _handle_create_webhook(
    client: ExaClient,
    *,
    url: str,
    events: list[str],
    description: Optional[str] = None,
    secret: Optional[str] = None,
) -> str | dict:
    if not events:
        return invalid_input(
            "Create webhook", "at least one event type is required", field="events"
        )
    body = compact(url=url, events=events, description=description, secret=secret)
    return await render_call("Create webhook", client.post(WEBHOOKS_ENDPOINT, body))


async def _handle_list_webhook_attempts(
    client: ExaClient,
    *,
    webhook_id: str,
    event_type: Optional[str] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    params = {"eventType": event_type, **page_params(cursor, limit)}
    path = WEBHOOK_ATTEMPTS_ENDPOINT.format(webhook_id=webhook_id)
    return await render_call("List webhook attempts", client.get(path, params))


async def _handle_list_events(
    client: ExaClient,
    *,
    event_type: Optional[str] = None,
    webset_id: Optional[str] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> str | dict:
    params = {"eventType": event_type, "websetId": webset_id, **page_params(cursor, limit)}
    return await render_call("List events", client.get(EVENTS_ENDPOINT, params))


async def _handle_get_event(client: ExaClient, *, event_id: str) -> str | dict:
    return await render_call("Get event", client.get(EVENT_ENDPOINT.format(event_id=event_id)))


# =============================================================================
# Registration
# =============================================================================


def register_webset_operation_tools(
    mcp: FastMCP, client: ExaClient, enabled: Collection[str]
) -> None:
    register = tool_registrar(mcp, enabled)

    @register("create_import_exa")
    async def create_import_exa(
        source_url: str,
        file_type: Optional[Literal["csv", "json", "txt"]] = None,
        webset_id: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> Any:
        """Create an import job that loads external data (CSV, JSON) into a Webset.

        Args:
            source_url: URL of the data file to import
            file_type: Type of file being imported
            webset_id: Target Webset ID when importing into an existing Webset
            metadata: Key-value metadata
        """
        return await _handle_create_import(
            client,
            source_url=source_url,
            file_type=file_type,
            webset_id=webset_id,
            metadata=metadata,
        )

    @register("get_import_exa")
    async def get_import_exa(import_id: str) -> Any:
        """Get an import job with its status and progress.

        Args:
            import_id: The unique identifier of the import
        """
        return await _handle_get_import(client, import_id=import_id)

    @register("create_webset_monitor_exa")
    async def create_webset_monitor_exa(
        webset_id: str,
        cadence: MonitorCadence,
        query: Optional[str] = None,
        search_behavior: Optional[SearchBehavior] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> Any:
        """Create a monitor that periodically runs searches and tracks new items.

        Args:
            webset_id: The Webset to monitor
            cadence: How often to run the monitor
            query: Custom search query (uses the last search if not provided)
            search_behavior: How to handle new items (default: append)
            metadata: Key-value metadata
        """
        return await _handle_create_monitor(
            client,
            webset_id=webset_id,
            cadence=cadence,
            query=query,
            search_behavior=search_behavior,
            metadata=metadata,
        )

    @register("update_webset_monitor_exa")
    async def update_webset_monitor_exa(
        webset_id: str,
        monitor_id: str,
        cadence: Optional[MonitorCadence] = None,
        query: Optional[str] = None,
        status: Optional[Literal["active", "paused"]] = None,
        search_behavior: Optional[SearchBehavior] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> Any:
        """Update a monitor's cadence, query, status or behavior.

        Args:
            webset_id: The Webset ID
            monitor_id: The monitor ID
            cadence: New cadence
            query: New search query
            status: active or paused
            search_behavior: override or append
            metadata: Key-value metadata
        """
        return await _handle_update_monitor(
            client,
            webset_id=webset_id,
            monitor_id=monitor_id,
            cadence=cadence,
            query=query,
            status=status,
            search_behavior=search_behavior,
            metadata=metadata,
        )

    @register("create_webhook_exa")
    async def create_webhook_exa(
        url: str,
        events: list[WebhookEvent],
        description: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> Any:
        """Create a webhook that receives notifications about Webset events.

        Args:
            url: URL to send webhook notifications to
            events: Event types to subscribe to
            description: Webhook description
            secret: Secret for webhook signature verification
        """
        return await _handle_create_webhook(
            client, url=url, events=list(events), description=description, secret=secret
        )

    @register("list_webhook_attempts_exa")
    async def list_webhook_attempts_exa(
        webhook_id: str,
        event_type: Optional[str] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Any:
        """List delivery attempts of a webhook with success/failure details.

        Args:
            webhook_id: The webhook ID
            event_type: Filter by event type
            cursor: Pagination cursor from a previous response
            limit: Results per page
        """
        return await _handle_list_webhook_attempts(
            client, webhook_id=webhook_id, event_type=event_type, cursor=cursor, limit=limit
        )

    @register("list_events_exa")
    async def list_events_exa(
        event_type: Optional[str] = None,
        webset_id: Optional[str] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Any:
        """List Websets system events.

        Args:
            event_type: Filter by event type
            webset_id: Filter by Webset ID
            cursor: Pagination cursor from a previous response
            limit: Results per page
        """
        return await _handle_list_events(
            client, event_type=event_type, webset_id=webset_id, cursor=cursor, limit=limit
        )

    @register("get_event_exa")
    async def get_event_exa(event_id: str) -> Any:
        """Get an event by its ID.

        Args:
            event_id: The event ID
        """
        return await _handle_get_event(client, event_id=event_id)
