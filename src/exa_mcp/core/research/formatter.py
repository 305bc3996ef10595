"""Render research task outcomes as tool output text."""

import json
from typing import Any

from exa_mcp.core.exa.errors import MalformedResultError
from exa_mcp.core.research.models import OutcomeKind, TaskOutcome


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_research_result(outcome: TaskOutcome, query: str, schema_used: bool) -> str:
    """Render a completed deep research task.

    Report results become a markdown document titled with the query; data
    results become a JSON document carrying the structured data verbatim.

    Raises:
        MalformedResultError: If the outcome has neither a report nor data
    """
    result = outcome.result
    if result is not None and result.report:
        return (
            f"# Research Report: {query}\n\n{result.report}\n\n---\n"
            f"*Research ID: {outcome.task_id}*"
        )
    if result is not None and result.data is not None:
        return _dump(
            {
                "requestId": outcome.request_id,
                "taskId": outcome.task_id,
                "researchTopic": query,
                "status": "completed",
                "structuredData": result.data,
                "schemaUsed": schema_used,
            }
        )
    raise MalformedResultError(
        outcome.task_id, "Research completed but results are in unexpected format"
    )


def render_task_status(outcome: TaskOutcome) -> str:
    """Render a single status read for the status-check tool."""
    result = outcome.result
    if outcome.kind is OutcomeKind.COMPLETED and result is not None:
        if result.report:
            return f"# Research Report (Task: {outcome.task_id})\n\n{result.report}"
        if result.data is not None:
            return _dump(
                {"taskId": outcome.task_id, "status": "completed", "data": result.data}
            )
    return _dump(
        {"taskId": outcome.task_id, "status": outcome.status, "error": outcome.error}
    )


def render_timeout(task_id: str) -> str:
    return (
        f"Research task is still processing. Task ID: {task_id}\n\n"
        "The research is taking longer than expected. You can check the status "
        "later using the task ID with check_research_status_exa."
    )


def render_canceled(task_id: str) -> str:
    return (
        f"Research wait was canceled. Task ID: {task_id}\n\n"
        "The task may still be running on the provider; check its status "
        "with check_research_status_exa."
    )
