"""Exa MCP tools and the catalog that selects which of them to register."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from exa_mcp.core.exa.client import ExaClient
from exa_mcp.core.research.poller import ResearchTaskPoller

from .answer import register_answer_tools
from .contents import register_contents_tools
from .research import register_research_tools
from .search import register_search_tools
from .similar import register_similar_tools
from .websets import (
    register_webset_enrichment_tools,
    register_webset_item_tools,
    register_webset_management_tools,
    register_webset_operation_tools,
    register_webset_search_tools,
)

if TYPE_CHECKING:  # pragma: no cover - import-time typing only
    from mcp.server.fastmcp import FastMCP
    from exa_mcp.config import ServerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolInfo:
    """Catalog entry for one tool."""

    name: str
    description: str
    enabled: bool = True


TOOL_CATALOG: dict[str, ToolInfo] = {
    # Search API tools
    "web_search_exa": ToolInfo("Web Search (Exa)", "Advanced web search with semantic understanding and content extraction"),
    "get_contents_exa": ToolInfo("Get Contents", "Retrieve full content from specific URLs with extraction options"),
    "find_similar_exa": ToolInfo("Find Similar", "Find pages semantically similar to a given URL"),
    "answer_with_citations_exa": ToolInfo("Answer with Citations", "Generate answers to questions with web citations"),
    "deep_research_exa": ToolInfo("Deep Research", "Conduct comprehensive research with structured output"),
    "check_research_status_exa": ToolInfo("Check Research Status", "Check status of research tasks"),
    "research_paper_search_exa": ToolInfo("Research Paper Search", "Search academic papers and research"),
    "company_research_exa": ToolInfo("Company Research", "Research companies and organizations"),
    "crawling_exa": ToolInfo("Web Crawling", "Extract content from specific URLs"),
    "competitor_finder_exa": ToolInfo("Competitor Finder", "Find business competitors"),
    "linkedin_search_exa": ToolInfo("LinkedIn Search", "Search LinkedIn profiles and companies"),
    "wikipedia_search_exa": ToolInfo("Wikipedia Search", "Search Wikipedia articles"),
    "github_search_exa": ToolInfo("GitHub Search", "Search GitHub repositories and code"),
    # Websets - management
    "create_webset_exa": ToolInfo("Create Webset", "Create a new Webset for targeted search and enrichment"),
    "list_websets_exa": ToolInfo("List Websets", "List all Websets with pagination"),
    "get_webset_exa": ToolInfo("Get Webset", "Get detailed information about a specific Webset"),
    "update_webset_exa": ToolInfo("Update Webset", "Update Webset metadata or status"),
    "delete_webset_exa": ToolInfo("Delete Webset", "Delete a Webset and all its data"),
    "cancel_webset_exa": ToolInfo("Cancel Webset", "Cancel all running operations for a Webset"),
    # Websets - searches
    "create_webset_search_exa": ToolInfo("Create Webset Search", "Create a search within a Webset"),
    "get_webset_search_exa": ToolInfo("Get Webset Search", "Get details of a specific search"),
    "list_webset_searches_exa": ToolInfo("List Webset Searches", "List all searches for a Webset"),
    "cancel_webset_search_exa": ToolInfo("Cancel Webset Search", "Cancel a running search"),
    # Websets - enrichments
    "create_webset_enrichment_exa": ToolInfo("Create Webset Enrichment", "Create an enrichment task"),
    "get_webset_enrichment_exa": ToolInfo("Get Webset Enrichment", "Get enrichment details"),
    "list_webset_enrichments_exa": ToolInfo("List Webset Enrichments", "List all enrichments"),
    "delete_webset_enrichment_exa": ToolInfo("Delete Webset Enrichment", "Delete an enrichment"),
    "cancel_webset_enrichment_exa": ToolInfo("Cancel Webset Enrichment", "Cancel a running enrichment"),
    # Websets - items
    "list_webset_items_exa": ToolInfo("List Webset Items", "List all items in a Webset"),
    "get_webset_item_exa": ToolInfo("Get Webset Item", "Get detailed item information"),
    "delete_webset_item_exa": ToolInfo("Delete Webset Item", "Delete an item from a Webset"),
    "search_webset_items_exa": ToolInfo("Search Webset Items", "Search and filter items"),
    # Websets - operations
    "create_import_exa": ToolInfo("Create Import", "Import data from external sources"),
    "get_import_exa": ToolInfo("Get Import", "Get import job details"),
    "create_webset_monitor_exa": ToolInfo("Create Monitor", "Create a monitor for periodic searches"),
    "update_webset_monitor_exa": ToolInfo("Update Monitor", "Update monitor settings"),
    "create_webhook_exa": ToolInfo("Create Webhook", "Create webhook for event notifications"),
    "list_webhook_attempts_exa": ToolInfo("List Webhook Attempts", "List webhook delivery attempts"),
    "list_events_exa": ToolInfo("List Events", "List system events"),
    "get_event_exa": ToolInfo("Get Event", "Get event details"),
}


def should_register_tool(tool_id: str, enabled_tools: list[str] | None = None) -> bool:
    """Whether ``tool_id`` is selected.

    An explicit ``enabled_tools`` list wins; otherwise the catalog default
    applies. Ids missing from the catalog are never registered.
    """
    if tool_id not in TOOL_CATALOG:
        return False
    if enabled_tools:
        return tool_id in enabled_tools
    return TOOL_CATALOG[tool_id].enabled


def resolve_enabled_tools(enabled_tools: list[str] | None = None) -> list[str]:
    """Catalog-ordered list of selected tool ids; warns about unknown ids."""
    for tool_id in enabled_tools or []:
        if tool_id not in TOOL_CATALOG:
            logger.warning("Ignoring unknown tool id in enabled_tools: %s", tool_id)
    return [t for t in TOOL_CATALOG if should_register_tool(t, enabled_tools)]


def register_tools(mcp: "FastMCP", config: "ServerConfig") -> list[str]:
    """Register every enabled tool on ``mcp``.

    Returns:
        Ids of the registered tools, in catalog order
    """
    enabled = resolve_enabled_tools(config.enabled_tools)
    client = ExaClient.from_config(config)
    poller = ResearchTaskPoller.from_config(client, config.research)

    if not client.has_api_key:
        logger.warning("EXA_API_KEY is not set; Exa API calls will be rejected")

    register_search_tools(mcp, client, enabled)
    register_contents_tools(mcp, client, enabled)
    register_similar_tools(mcp, client, enabled)
    register_answer_tools(mcp, client, enabled)
    register_research_tools(mcp, poller, enabled)
    register_webset_management_tools(mcp, client, enabled)
    register_webset_search_tools(mcp, client, enabled)
    register_webset_enrichment_tools(mcp, client, enabled)
    register_webset_item_tools(mcp, client, enabled)
    register_webset_operation_tools(mcp, client, enabled)

    if config.debug:
        logger.debug("Registered %d tools: %s", len(enabled), ", ".join(enabled))
    else:
        logger.info("Registered %d tools", len(enabled))
    return enabled


__all__ = [
    "TOOL_CATALOG",
    "ToolInfo",
    "register_tools",
    "resolve_enabled_tools",
    "should_register_tool",
]
