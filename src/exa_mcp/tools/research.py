"""Deep research tools.

``deep_research_exa`` submits a research task and waits for it within the
configured deadline. A task that outlives the deadline is not an error: the
tool returns the task id so the caller can follow up with
``check_research_status_exa``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Collection, Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.errors import ExaError
from exa_mcp.core.exa.options import Category
from exa_mcp.core.research.formatter import (
    render_canceled,
    render_research_result,
    render_task_status,
    render_timeout,
)
from exa_mcp.core.research.models import OutcomeKind, ResearchRequest
from exa_mcp.core.research.poller import ResearchTaskPoller
from exa_mcp.core.responses import ErrorCode, ErrorType, error_response
from exa_mcp.tools.helpers import exa_error_response, invalid_input, tool_registrar

logger = logging.getLogger(__name__)


# =============================================================================
# Handlers
# =============================================================================


async def _handle_deep_research(
    poller: ResearchTaskPoller,
    request: ResearchRequest,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> str | dict:
    """Submit a research task and wait for its outcome."""
    if not request.query.strip():
        return invalid_input("Research", "query must not be empty", field="query")

    try:
        task_id = await poller.submit(request)
        outcome = await poller.await_completion(task_id, cancel_event=cancel_event)

        if outcome.kind is OutcomeKind.COMPLETED:
            return render_research_result(outcome, request.query, request.schema_used)
    except ExaError as e:
        return exa_error_response("Research", e)

    if outcome.kind is OutcomeKind.FAILED:
        logger.warning("Research task %s failed: %s", task_id, outcome.error)
        return asdict(
            error_response(
                f"Research error: {outcome.error}",
                error_code=ErrorCode.TASK_FAILED,
                error_type=ErrorType.PROVIDER,
                details={"task_id": task_id},
            )
        )
    if outcome.kind is OutcomeKind.CANCELED:
        return render_canceled(task_id)
    return render_timeout(task_id)


async def _handle_check_status(poller: ResearchTaskPoller, *, task_id: str) -> str | dict:
    """Read a research task's status once and render it."""
    if not task_id.strip():
        return invalid_input(
            "Status check",
            "task_id must not be empty",
            field="task_id",
            error_code=ErrorCode.MISSING_REQUIRED,
        )

    logger.info("Checking status for task: %s", task_id)
    try:
        outcome = await poller.check(task_id)
    except ExaError as e:
        return exa_error_response("Status check", e)
    return render_task_status(outcome)


# =============================================================================
# Registration
# =============================================================================


def register_research_tools(
    mcp: FastMCP, poller: ResearchTaskPoller, enabled: Collection[str]
) -> None:
    """Register the deep research tools that are enabled."""
    register = tool_registrar(mcp, enabled)

    @register("deep_research_exa")
    async def deep_research_exa(
        query: str,
        report: bool = True,
        num_results: Optional[int] = None,
        output_schema: Optional[dict[str, Any]] = None,
        llm_generate_schema: Optional[bool] = None,
        include_domains: Optional[list[str]] = None,
        exclude_domains: Optional[list[str]] = None,
        category: Optional[Category] = None,
        start_published_date: Optional[str] = None,
        end_published_date: Optional[str] = None,
    ) -> Any:
        """Conduct comprehensive research on any topic with structured output.

        Performs deep web analysis, synthesizes information from multiple
        sources, and produces a markdown report or structured data. If the
        task is still running when the wait ends, the task id is returned
        for use with check_research_status_exa.

        Args:
            query: The research topic or question to investigate
            report: Generate a markdown research report (default: true)
            num_results: Number of sources to analyze (default: 10)
            output_schema: Custom JSON schema for structured data extraction
            llm_generate_schema: Let the provider generate a schema from the query
            include_domains: Focus research on these domains
            exclude_domains: Exclude these domains from research
            category: Focus on a specific content type
            start_published_date: Only content published after this date (ISO 8601)
            end_published_date: Only content published before this date (ISO 8601)
        """
        request = ResearchRequest(
            query=query,
            report=report,
            num_results=num_results or 10,
            output_schema=output_schema,
            llm_generate_schema=llm_generate_schema,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            category=category,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
        )
        return await _handle_deep_research(poller, request)

    @register("check_research_status_exa")
    async def check_research_status_exa(task_id: str) -> Any:
        """Check the status of a previously started research task.

        Args:
            task_id: The task ID returned by deep_research_exa
        """
        return await _handle_check_status(poller, task_id=task_id)
