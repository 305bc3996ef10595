"""Deep research task models, polling and rendering."""

from exa_mcp.core.research.formatter import (
    render_canceled,
    render_research_result,
    render_task_status,
    render_timeout,
)
from exa_mcp.core.research.models import (
    OutcomeKind,
    ResearchRequest,
    ResearchResult,
    TaskOutcome,
    TaskStatus,
    decode_task_status,
)
from exa_mcp.core.research.poller import ResearchTaskPoller

__all__ = [
    "OutcomeKind",
    "ResearchRequest",
    "ResearchResult",
    "ResearchTaskPoller",
    "TaskOutcome",
    "TaskStatus",
    "decode_task_status",
    "render_canceled",
    "render_research_result",
    "render_task_status",
    "render_timeout",
]
