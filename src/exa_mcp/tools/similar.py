"""Find-similar tool: pages semantically close to a reference URL."""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.client import FIND_SIMILAR_ENDPOINT, ExaClient
from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import (
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
    unique_domains,
)

logger = logging.getLogger(__name__)

NO_SIMILAR_MESSAGE = (
    "No similar pages found. The URL may be inaccessible or have no similar "
    "content in the index."
)


def format_similar_result(
    index: int, result: dict[str, Any], reference_domain: str
) -> dict[str, Any]:
    domain = hostname(result.get("url"))
    formatted: dict[str, Any] = {
        "index": index,
        "title": result.get("title"),
        "url": result.get("url"),
        "domain": domain,
        "sameDomain": domain == reference_domain,
        "publishedDate": result.get("publishedDate"),
        "author": result.get("author"),
        "score": result.get("score"),
    }
    for key in ("text", "highlights", "summary"):
        if result.get(key):
            formatted[key] = result[key]
    if result.get("links"):
        formatted["linksCount"] = len(result["links"])
    if result.get("imageLinks"):
        formatted["imageLinksCount"] = len(result["imageLinks"])
    return formatted


async def _handle_find_similar(
    client: ExaClient,
    *,
    url: str,
    num_results: Optional[int] = None,
    include_domains: Optional[list[str]] = None,
    exclude_domains: Optional[list[str]] = None,
    exclude_source_domain: Optional[bool] = None,
    category: Optional[str] = None,
    start_published_date: Optional[str] = None,
    end_published_date: Optional[str] = None,
    start_crawl_date: Optional[str] = None,
    end_crawl_date: Optional[str] = None,
    contents: Optional[ContentsOptions] = None,
) -> str | dict:
    """Find pages similar to ``url`` and annotate them with domain analysis."""
    if not url.strip():
        return invalid_input("Find similar", "url must not be empty", field="url")

    body = compact(
        url=url,
        numResults=num_results or DEFAULT_NUM_RESULTS,
        includeDomains=include_domains,
        excludeDomains=exclude_domains,
        excludeSourceDomain=exclude_source_domain,
        category=category,
        startPublishedDate=start_published_date,
        endPublishedDate=end_published_date,
        startCrawlDate=start_crawl_date,
        endCrawlDate=end_crawl_date,
        contents=build_contents_option(contents, default_livecrawl="preferred"),
    )
    logger.info("Finding pages similar to: %s", url)

    try:
        response = await client.post(FIND_SIMILAR_ENDPOINT, body)
    except ExaError as e:
        return exa_error_response("Find similar", e)

    results = (response or {}).get("results")
    if results is None:
        logger.warning("Empty or invalid find-similar response")
        return NO_SIMILAR_MESSAGE

    logger.info("Found %d similar pages", len(results))
    reference_domain = hostname(url)
    formatted = [
        format_similar_result(i, r, reference_domain)
        for i, r in enumerate(results, start=1)
    ]
    domains = unique_domains(r.get("url") for r in results)

    return render_json(
        {
            "requestId": response.get("requestId"),
            "referenceUrl": url,
            "referenceDomain": reference_domain,
            "similarPagesFound": len(formatted),
            "results": formatted,
            "domainDiversity": {"uniqueDomains": len(domains), "domains": domains},
        }
    )


def register_similar_tools(mcp: FastMCP, client: ExaClient, enabled: Collection[str]) -> None:
    register = tool_registrar(mcp, enabled)

    @register("find_similar_exa")
    async def find_similar_exa(
        url: str,
        num_results: Optional[int] = None,
        include_domains: Optional[list[str]] = None,
        exclude_domains: Optional[list[str]] = None,
        exclude_source_domain: Optional[bool] = None,
        category: Optional[Category] = None,
        start_published_date: Optional[str] = None,
        end_published_date: Optional[str] = None,
        start_crawl_date: Optional[str] = None,
        end_crawl_date: Optional[str] = None,
        contents: Optional[ContentsOptions] = None,
    ) -> Any:
        """Find pages semantically similar to a given URL.

        Useful for competitor analysis, related research papers, alternative
        sources and content recommendations.

        Args:
            url: The reference URL to find similar pages for
            num_results: Number of similar results to return (default: 5)
            include_domains: Only include results from these domains
            exclude_domains: Exclude results from these domains
            exclude_source_domain: Exclude results from the reference URL's domain
            category: Filter similar results by content type
            start_published_date: Publication date lower bound (ISO 8601)
            end_published_date: Publication date upper bound (ISO 8601)
            start_crawl_date: Crawl date lower bound (ISO 8601)
            end_crawl_date: Crawl date upper bound (ISO 8601)
            contents: Content extraction options (default: text, preferred livecrawl)
        """
        return await _handle_find_similar(
            client,
            url=url,
            num_results=num_results,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            exclude_source_domain=exclude_source_domain,
            category=category,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
            start_crawl_date=start_crawl_date,
            end_crawl_date=end_crawl_date,
            contents=contents,
        )
