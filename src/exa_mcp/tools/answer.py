"""Answer tool: direct answers with web citations, rendered as markdown."""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import ANSWER_ENDPOINT, ExaClient
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import DEFAULT_NUM_RESULTS, Category, compact
from exa_mcp.tools.helpers import (
    exa_error_response,
    hostname,
    invalid_input,
    tool_registrar,
)

logger = logging.getLogger(__name__)

NO_ANSWER_MESSAGE = (
    "Could not generate an answer. Please try rephrasing your question or "
    "adjusting the search parameters."
)


def render_answer(answer: str, citations: list[dict[str, Any]]) -> str:
    """Render an answer, its numbered sources and a source-domain analysis."""
    lines = [f"# Answer\n\n{answer}\n", f"## Sources ({len(citations)})\n"]
    for index, citation in enumerate(citations, start=1):
        lines.append(
            f"{index}. **{citation.get('title')}**\n"
            f"   URL: {citation.get('url')}\n"
            f"   Snippet: \"{citation.get('snippet')}\"\n"
        )

    if citations:
        domains: list[str] = []
        for citation in citations:
            domain = hostname(citation.get("url")) or "unknown"
            if domain not in domains:
                domains.append(domain)
        lines.append(
            "## Source Analysis\n"
            f"- Unique sources: {len(domains)}\n"
            f"- Domains: {', '.join(domains)}\n"
        )
    return "\n".join(lines)


async def _handle_answer(
    client: ExaClient,
    *,
    query: str,
    text: Optional[bool] = None,
    num_results: Optional[int] = None,
    include_domains: Optional[list[str]] = None,
    exclude_domains: Optional[list[str]] = None,
    category: Optional[str] = None,
    start_published_date: Optional[str] = None,
    end_published_date: Optional[str] = None,
    start_crawl_date: Optional[str] = None,
    end_crawl_date: Optional[str] = None,
    include_text: Optional[str] = None,
    exclude_text: Optional[str] = None,
) -> str | dict:
    if not query.strip():
        return invalid_input("Answer generation", "query must not be empty", field="query")

    # Streaming is not supported over a single text result.
    body = compact(
        query=query,
        text=bool(text),
        stream=False,
        numResults=num_results or DEFAULT_NUM_RESULTS,
        includeDomains=include_domains,
        excludeDomains=exclude_domains,
        category=category,
        startPublishedDate=start_published_date,
        endPublishedDate=end_published_date,
        startCrawlDate=start_crawl_date,
        endCrawlDate=end_crawl_date,
        includeText=include_text,
        excludeText=exclude_text,
    )
    logger.info("Answering %r with %d sources", query, body["numResults"])

    try:
        response = await client.post(ANSWER_ENDPOINT, body, timeout_multiplier=2)
    except ExaError as e:
        return exa_error_response("Answer generation", e)

    response = response or {}
    citations = response.get("citations") or []
    logger.info("Generated answer with %d citations", len(citations))

    if not response.get("answer"):
        logger.warning("Empty answer response")
        return NO_ANSWER_MESSAGE
    return render_answer(str(response["answer"]), citations)


def register_answer_tools(mcp: FastMCP, client: ExaClient, enabled: Collection[str]) -> None:
    register = tool_registrar(mcp, enabled)

    @register("answer_with_citations_exa")
    async def answer_with_citations_exa(
        query: str,
        text: Optional[bool] = None,
        num_results: Optional[int] = None,
        include_domains: Optional[list[str]] = None,
        exclude_domains: Optional[list[str]] = None,
        category: Optional[Category] = None,
        start_published_date: Optional[str] = None,
        end_published_date: Optional[str] = None,
        start_crawl_date: Optional[str] = None,
        end_crawl_date: Optional[str] = None,
        include_text: Optional[str] = None,
        exclude_text: Optional[str] = None,
    ) -> Any:
        """Answer a question directly, with citations from web sources.

        Args:
            query: The question to answer, in natural language
            text: Include full source text in addition to the answer
            num_results: Number of sources to search and analyze (default: 5)
            include_domains: Only search within these domains
            exclude_domains: Exclude these domains from search
            category: Filter sources by content type
            start_published_date: Only use sources published after this date (ISO 8601)
            end_published_date: Only use sources published before this date (ISO 8601)
            start_crawl_date: Only use sources crawled after this date (ISO 8601)
            end_crawl_date: Only use sources crawled before this date (ISO 8601)
            include_text: Only use sources containing this text
            exclude_text: Exclude sources containing this text
        """
        return await _handle_answer(
            client,
            query=query,
            text=text,
            num_results=num_results,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            category=category,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
            start_crawl_date=start_crawl_date,
            end_crawl_date=end_crawl_date,
            include_text=include_text,
            exclude_text=exclude_text,
        )
