"""Contents API tools: batch content retrieval and single-URL crawling."""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional, Union

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import CONTENTS_ENDPOINT, ExaClient
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import (
    DEFAULT_MAX_CHARACTERS,
    ContentsLivecrawl,
    ExtrasOptions,
    HighlightsOptions,
    SubpagesOptions,
    SummaryOptions,
    TextOptions,
    build_content_fields,
    compact,
)
from exa_mcp.tools.helpers import (
    exa_error_response,
    invalid_input,
    render_json,
    tool_registrar,
)

logger = logging.getLogger(__name__)

MAX_URLS_PER_REQUEST = 10
NO_CONTENT_MESSAGE = "No content retrieved. The URLs may be inaccessible or blocked."


def format_content_result(index: int, result: dict[str, Any]) -> dict[str, Any]:
    """Reshape one contents result, adding length and link counts."""
    formatted: dict[str, Any] = {
        "index": index,
        "url": result.get("url"),
        "title": result.get("title"),
        "status": result.get("status") or "success",
    }
    for key in ("error", "author", "publishedDate"):
        if result.get(key):
            formatted[key] = result[key]
    text = result.get("text")
    if text:
        formatted["text"] = text
        formatted["textLength"] = len(text)
    for key in ("highlights", "summary"):
        if result.get(key):
            formatted[key] = result[key]
    if result.get("links"):
        formatted["linksCount"] = len(result["links"])
    if result.get("imageLinks"):
        formatted["imageLinksCount"] = len(result["imageLinks"])
    return formatted


def summarize_statuses(statuses: list[dict[str, Any]]) -> dict[str, Any]:
    errors = [s for s in statuses if s.get("status") == "error"]
    return {
        "success": sum(1 for s in statuses if s.get("status") == "success"),
        "errors": len(errors),
        "errorDetails": [{"url": s.get("url"), "error": s.get("error")} for s in errors],
    }


async def _handle_get_contents(
    client: ExaClient,
    *,
    urls: list[str],
    text: Union[bool, TextOptions, None] = None,
    highlights: Union[bool, HighlightsOptions, None] = None,
    summary: Union[bool, SummaryOptions, None] = None,
    livecrawl: Optional[str] = None,
    subpages: Optional[SubpagesOptions] = None,
    extras: Optional[ExtrasOptions] = None,
    label: str = "Content retrieval",
) -> str | dict:
    """Fetch page contents for up to ``MAX_URLS_PER_REQUEST`` URLs."""
    if not urls:
        return invalid_input(label, "at least one URL is required", field="urls")
    if len(urls) > MAX_URLS_PER_REQUEST:
        return invalid_input(
            label,
            f"Maximum {MAX_URLS_PER_REQUEST} URLs allowed per request",
            field="urls",
            remediation="Split your request into smaller batches",
        )

    body = {
        "urls": urls,
        **build_content_fields(
            text=text,
            highlights=highlights,
            summary=summary,
            livecrawl=livecrawl,
            subpages=subpages,
            extras=extras,
            default_livecrawl="fallback",
        ),
    }
    logger.info(
        "Fetching content from %d URLs with livecrawl: %s", len(urls), body["livecrawl"]
    )

    try:
        response = await client.post(CONTENTS_ENDPOINT, body, timeout_multiplier=2)
    except ExaError as e:
        return exa_error_response(label, e)

    results = (response or {}).get("results")
    if results is None:
        logger.warning("Empty or invalid contents response")
        return NO_CONTENT_MESSAGE

    logger.info("Received content for %d URLs", len(results))
    formatted: dict[str, Any] = {
        "requestId": response.get("requestId"),
        "urlsProcessed": len(results),
        "results": [format_content_result(i, r) for i, r in enumerate(results, start=1)],
    }
    if response.get("statuses"):
        formatted["statusSummary"] = summarize_statuses(response["statuses"])
    return render_json(formatted)


async def _handle_crawling(
    client: ExaClient,
    *,
    url: str,
    max_characters: Optional[int] = None,
) -> str | dict:
    """Crawl a single URL and return its text."""
    if not url.strip():
        return invalid_input("Crawling", "url must not be empty", field="url")

    body = compact(
        ids=[url],
        text={"maxCharacters": max_characters or DEFAULT_MAX_CHARACTERS},
        livecrawl="preferred",
    )
    logger.info("Crawling %s", url)
    try:
        response = await client.post(CONTENTS_ENDPOINT, body, timeout_multiplier=2)
    except ExaError as e:
        return exa_error_response("Crawling", e)

    results = (response or {}).get("results")
    if not results:
        return NO_CONTENT_MESSAGE
    return render_json(
        {
            "requestId": response.get("requestId"),
            "results": [format_content_result(i, r) for i, r in enumerate(results, start=1)],
        }
    )


def register_contents_tools(mcp: FastMCP, client: ExaClient, enabled: Collection[str]) -> None:
    """Register the contents API tools that are enabled."""
    register = tool_registrar(mcp, enabled)

    @register("get_contents_exa")
    async def get_contents_exa(
        urls: list[str],
        text: Union[bool, TextOptions, None] = None,
        highlights: Union[bool, HighlightsOptions, None] = None,
        summary: Union[bool, SummaryOptions, None] = None,
        livecrawl: Optional[ContentsLivecrawl] = None,
        subpages: Optional[SubpagesOptions] = None,
        extras: Optional[ExtrasOptions] = None,
    ) -> Any:
        """Retrieve full content from specific URLs with extraction options.

        Supports batch processing, live crawling for real-time data, subpage
        extraction, highlights and AI-generated summaries.

        Args:
            urls: URLs to fetch content from (max 10 per request)
            text: Extract full text, as a switch or options (default: 3000 characters)
            highlights: Extract key sentences as highlights
            summary: Generate AI summaries of content
            livecrawl: always, fallback or never (default: fallback)
            subpages: Crawl and extract content from linked pages
            extras: Additional metadata extraction (links, image links)
        """
        return await _handle_get_contents(
            client,
            urls=urls,
            text=text,
            highlights=highlights,
            summary=summary,
            livecrawl=livecrawl,
            subpages=subpages,
            extras=extras,
        )

    @register("crawling_exa")
    async def crawling_exa(url: str, max_characters: Optional[int] = None) -> Any:
        """Extract content from a specific URL.

        Args:
            url: URL to crawl
            max_characters: Maximum characters to extract (default: 3000)
        """
        return await _handle_crawling(client, url=url, max_characters=max_characters)
