"""Search API tools: general web search and the topic presets built on it.

Every preset is a POST to ``/search`` with a different query shape and
filter (category or domain restriction). Handlers are module-level so tests
can drive them with a mock client.
"""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import SEARCH_ENDPOINT, ExaClient
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import (
    DEFAULT_MAX_CHARACTERS,
    DEFAULT_NUM_RESULTS,
    Category,
    ContentsOptions,
    build_contents_option,
    compact,
)
from exa_mcp.tools.helpers import (
    exa_error_response,
    hostname,
    invalid_input,
    render_json,
    tool_registrar,
)

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No search results found. Please try a different query."


# =============================================================================
# Shared Handler
# =============================================================================


def summarize_result(index: int, result: dict[str, Any]) -> dict[str, Any]:
    """Trim one search hit to the fields worth showing."""
    summary: dict[str, Any] = {
        "index": index,
        "title": result.get("title"),
        "url": result.get("url"),
        "publishedDate": result.get("publishedDate"),
        "author": result.get("author"),
        "score": result.get("score"),
    }
    for key in ("text", "highlights", "summary"):
        if result.get(key):
            summary[key] = result[key]
    if result.get("subpages"):
        summary["subpagesCount"] = len(result["subpages"])
    return compact(**summary)


async def _handle_search(
    client: ExaClient,
    *,
    label: str,
    body: dict[str, Any],
) -> str | dict:
    """POST a search body and render the hits as JSON."""
    if not str(body.get("query") or "").strip():
        return invalid_input(label, "query must not be empty", field="query")

    logger.info("Searching for %r (%s results)", body["query"], body.get("numResults"))
    try:
        response = await client.post(SEARCH_ENDPOINT, body)
    except ExaError as e:
        return exa_error_response(label, e)

    results = (response or {}).get("results")
    if not results:
        logger.info("Search returned no results")
        return NO_RESULTS_MESSAGE

    logger.info("Search returned %d results", len(results))
    return render_json(
        {
            "requestId": response.get("requestId"),
            "query": body["query"],
            "resolvedSearchType": response.get("resolvedSearchType"),
            "resultsCount": len(results),
            "results": [summarize_result(i, r) for i, r in enumerate(results, start=1)],
        }
    )


def _preset_body(
    query: str,
    num_results: Optional[int],
    max_characters: Optional[int] = None,
    **filters: Any,
) -> dict[str, Any]:
    """Body shared by the preset search tools."""
    return compact(
        query=query,
        type="auto",
        numResults=num_results or DEFAULT_NUM_RESULTS,
        contents={
            "text": {"maxCharacters": max_characters or DEFAULT_MAX_CHARACTERS},
            "livecrawl": "preferred",
        },
        **filters,
    )


# =============================================================================
# Handlers
# =============================================================================


async def _handle_web_search(
    client: ExaClient,
    *,
    query: str,
    num_results: Optional[int] = None,
    search_type: Optional[str] = None,
    include_domains: Optional[list[str]] = None,
    exclude_domains: Optional[list[str]] = None,
    category: Optional[str] = None,
    start_published_date: Optional[str] = None,
    end_published_date: Optional[str] = None,
    include_text: Optional[list[str]] = None,
    exclude_text: Optional[list[str]] = None,
    contents: Optional[ContentsOptions] = None,
) -> str | dict:
    body = compact(
        query=query,
        type=search_type or "auto",
        numResults=num_results or DEFAULT_NUM_RESULTS,
        includeDomains=include_domains,
        excludeDomains=exclude_domains,
        category=category,
        startPublishedDate=start_published_date,
        endPublishedDate=end_published_date,
        includeText=include_text,
        excludeText=exclude_text,
        contents=build_contents_option(contents, default_livecrawl="preferred"),
    )
    return await _handle_search(client, label="Search", body=body)


async def _handle_research_paper_search(
    client: ExaClient,
    *,
    query: str,
    num_results: Optional[int] = None,
    max_characters: Optional[int] = None,
) -> str | dict:
    body = _preset_body(query, num_results, max_characters, category="research paper")
    return await _handle_search(client, label="Research paper search", body=body)


async def _handle_company_research(
    client: ExaClient,
    *,
    company_name: str,
    num_results: Optional[int] = None,
) -> str | dict:
    body = _preset_body(
        f"{company_name} company business information news",
        num_results,
        category="company",
    )
    return await _handle_search(client, label="Company research", body=body)


async def _handle_competitor_finder(
    client: ExaClient,
    *,
    company_name: str,
    website: Optional[str] = None,
    num_results: Optional[int] = None,
) -> str | dict:
    exclude = [hostname(website) or website] if website else None
    body = _preset_body(
        f"companies that compete with {company_name}",
        num_results,
        category="company",
        excludeDomains=exclude,
    )
    return await _handle_search(client, label="Competitor finder", body=body)


async def _handle_linkedin_search(
    client: ExaClient,
    *,
    query: str,
    num_results: Optional[int] = None,
) -> str | dict:
    body = _preset_body(query, num_results, includeDomains=["linkedin.com"])
    return await _handle_search(client, label="LinkedIn search", body=body)


async def _handle_wikipedia_search(
    client: ExaClient,
    *,
    query: str,
    num_results: Optional[int] = None,
) -> str | dict:
    body = _preset_body(query, num_results, includeDomains=["wikipedia.org"])
    return await _handle_search(client, label="Wikipedia search", body=body)


async def _handle_github_search(
    client: ExaClient,
    *,
    query: str,
    num_results: Optional[int] = None,
) -> str | dict:
    body = _preset_body(query, num_results, includeDomains=["github.com"])
    return await _handle_search(client, label="GitHub search", body=body)


# =============================================================================
# Registration
# =============================================================================


def register_search_tools(mcp: FastMCP, client: ExaClient, enabled: Collection[str]) -> None:
    """Register the search API tools that are enabled."""
    register = tool_registrar(mcp, enabled)

    @register("web_search_exa")
    async def web_search_exa(
        query: str,
        num_results: Optional[int] = None,
        search_type: Optional[str] = None,
        include_domains: Optional[list[str]] = None,
        exclude_domains: Optional[list[str]] = None,
        category: Optional[Category] = None,
        start_published_date: Optional[str] = None,
        end_published_date: Optional[str] = None,
        include_text: Optional[list[str]] = None,
        exclude_text: Optional[list[str]] = None,
        contents: Optional[ContentsOptions] = None,
    ) -> Any:
        """Search the web with semantic understanding and content extraction.

        Args:
            query: Search query
            num_results: Number of results to return (default: 5)
            search_type: "auto", "neural" or "keyword" (default: auto)
            include_domains: Only return results from these domains
            exclude_domains: Never return results from these domains
            category: Restrict results to a content type
            start_published_date: Only results published after this date (ISO 8601)
            end_published_date: Only results published before this date (ISO 8601)
            include_text: Phrases that must appear in the page text
            exclude_text: Phrases that must not appear in the page text
            contents: Content extraction options (default: text, preferred livecrawl)
        """
        return await _handle_web_search(
            client,
            query=query,
            num_results=num_results,
            search_type=search_type,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            category=category,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
            include_text=include_text,
            exclude_text=exclude_text,
            contents=contents,
        )

    @register("research_paper_search_exa")
    async def research_paper_search_exa(
        query: str,
        num_results: Optional[int] = None,
        max_characters: Optional[int] = None,
    ) -> Any:
        """Search academic papers and research publications.

        Args:
            query: Research topic or paper description
            num_results: Number of papers to return (default: 5)
            max_characters: Maximum characters of text per paper (default: 3000)
        """
        return await _handle_research_paper_search(
            client, query=query, num_results=num_results, max_characters=max_characters
        )

    @register("company_research_exa")
    async def company_research_exa(company_name: str, num_results: Optional[int] = None) -> Any:
        """Research a company or organization using web sources.

        Args:
            company_name: Name of the company to research
            num_results: Number of sources to return (default: 5)
        """
        return await _handle_company_research(
            client, company_name=company_name, num_results=num_results
        )

    @register("competitor_finder_exa")
    async def competitor_finder_exa(
        company_name: str,
        website: Optional[str] = None,
        num_results: Optional[int] = None,
    ) -> Any:
        """Find business competitors of a company.

        Args:
            company_name: Company to find competitors for
            website: The company's own website, excluded from results
            num_results: Number of competitors to return (default: 5)
        """
        return await _handle_competitor_finder(
            client, company_name=company_name, website=website, num_results=num_results
        )

    @register("linkedin_search_exa")
    async def linkedin_search_exa(query: str, num_results: Optional[int] = None) -> Any:
        """Search LinkedIn profiles and company pages.

        Args:
            query: People, roles or companies to look for
            num_results: Number of results to return (default: 5)
        """
        return await _handle_linkedin_search(client, query=query, num_results=num_results)

    @register("wikipedia_search_exa")
    async def wikipedia_search_exa(query: str, num_results: Optional[int] = None) -> Any:
        """Search Wikipedia articles.

        Args:
            query: Topic to look up
            num_results: Number of articles to return (default: 5)
        """
        return await _handle_wikipedia_search(client, query=query, num_results=num_results)

    @register("github_search_exa")
    async def github_search_exa(query: str, num_results: Optional[int] = None) -> Any:
        """Search GitHub repositories and code.

        Args:
            query: Repository, project or code to look for
            num_results: Number of results to return (default: 5)
        """
        return await _handle_github_search(client, query=query, num_results=num_results)
