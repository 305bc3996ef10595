"""Pydantic models for Exa deep research tasks.

A research task is owned by the provider: the client submits it, then only
observes its status. ``decode_task_status`` is the single place where a
status payload is mapped to a ``TaskOutcome``; both the polling loop and the
one-shot status check go through it.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from exa_mcp.core.exa.errors import MalformedResultError


# =============================================================================
# Enums
# =============================================================================


class TaskStatus(str, Enum):
    """Provider-side status of a research task."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class OutcomeKind(str, Enum):
    """What a status read or a bounded wait concluded."""

    COMPLETED = "completed"  # Terminal, result attached
    FAILED = "failed"  # Terminal, provider error attached
    PENDING = "pending"  # Single read saw a non-terminal status
    TIMED_OUT = "timed_out"  # Wait ended at the deadline, task still running
    CANCELED = "canceled"  # Wait aborted by the caller


DEFAULT_FAILURE_MESSAGE = "Research task failed"


# =============================================================================
# Request / Result Models
# =============================================================================


class ResearchRequest(BaseModel):
    """Parameters for a deep research task."""

    query: str = Field(..., description="The research topic or question to investigate")
    report: bool = Field(default=True, description="Generate a markdown research report")
    num_results: int = Field(default=10, description="Number of sources to analyze")
    output_schema: Optional[dict[str, Any]] = Field(
        default=None, description="Custom JSON schema for structured data extraction"
    )
    llm_generate_schema: Optional[bool] = Field(
        default=None, description="Let the provider generate a schema from the query"
    )
    include_domains: Optional[list[str]] = None
    exclude_domains: Optional[list[str]] = None
    category: Optional[str] = None
    start_published_date: Optional[str] = None
    end_published_date: Optional[str] = None

    @property
    def schema_used(self) -> bool:
        """True when a caller-supplied or auto-generated schema was requested."""
        return bool(self.output_schema) or bool(self.llm_generate_schema)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the provider's camelCase request body.

        Optional fields are omitted when unset.
        """
        payload: dict[str, Any] = {
            "query": self.query,
            "report": self.report,
            "numResults": self.num_results,
        }
        if self.output_schema:
            payload["outputSchema"] = self.output_schema
        if self.llm_generate_schema is not None:
            payload["llmGenerateSchema"] = self.llm_generate_schema
        if self.include_domains:
            payload["includeDomains"] = self.include_domains
        if self.exclude_domains:
            payload["excludeDomains"] = self.exclude_domains
        if self.category:
            payload["category"] = self.category
        if self.start_published_date:
            payload["startPublishedDate"] = self.start_published_date
        if self.end_published_date:
            payload["endPublishedDate"] = self.end_published_date
        return payload


class ResearchResult(BaseModel):
    """Result of a completed task: exactly one of ``report`` or ``data``."""

    report: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    @property
    def is_report(self) -> bool:
        return bool(self.report)


class TaskOutcome(BaseModel):
    """Decoded view of a research task at one point in time."""

    kind: OutcomeKind
    task_id: str
    status: Optional[str] = None
    result: Optional[ResearchResult] = None
    error: Optional[str] = None
    request_id: Optional[str] = None

    @classmethod
    def timed_out(cls, task_id: str, status: Optional[str] = None) -> "TaskOutcome":
        return cls(kind=OutcomeKind.TIMED_OUT, task_id=task_id, status=status)

    @classmethod
    def canceled(cls, task_id: str, status: Optional[str] = None) -> "TaskOutcome":
        return cls(kind=OutcomeKind.CANCELED, task_id=task_id, status=status)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (OutcomeKind.COMPLETED, OutcomeKind.FAILED)


# =============================================================================
# Status Decoding
# =============================================================================


def _decode_result(task_id: str, raw: Any) -> ResearchResult:
    """Build a ResearchResult, preferring the report variant when both are present.

    An empty ``data`` object still counts as the data variant.
    """
    if not isinstance(raw, dict) or not raw:
        raise MalformedResultError(task_id)

    report = raw.get("report")
    if report:
        return ResearchResult(report=str(report))

    data = raw.get("data")
    if isinstance(data, dict):
        return ResearchResult(data=data)

    raise MalformedResultError(
        task_id, "Research completed but results are in unexpected format"
    )


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _error_message(raw: Any) -> str:
    """Provider error as text; error objects contribute their ``message``."""
    if isinstance(raw, dict):
        raw = raw.get("message") or raw.get("error")
    return _as_text(raw) or DEFAULT_FAILURE_MESSAGE


def decode_task_status(task_id: str, payload: Optional[dict[str, Any]]) -> TaskOutcome:
    """Map a status payload onto a TaskOutcome.

    Args:
        task_id: Task the payload belongs to
        payload: Decoded JSON body of the status read

    Returns:
        COMPLETED, FAILED or PENDING outcome. Unknown or missing statuses
        are treated as not yet terminal.

    Raises:
        MalformedResultError: If the task is completed without an interpretable result
    """
    payload = payload if isinstance(payload, dict) else {}
    status = _as_text(payload.get("status"))
    request_id = _as_text(payload.get("requestId"))

    if status == TaskStatus.COMPLETED.value:
        return TaskOutcome(
            kind=OutcomeKind.COMPLETED,
            task_id=task_id,
            status=status,
            result=_decode_result(task_id, payload.get("result")),
            request_id=request_id,
        )

    if status == TaskStatus.FAILED.value:
        return TaskOutcome(
            kind=OutcomeKind.FAILED,
            task_id=task_id,
            status=status,
            error=_error_message(payload.get("error")),
            request_id=request_id,
        )

    return TaskOutcome(
        kind=OutcomeKind.PENDING,
        task_id=task_id,
        status=status,
        request_id=request_id,
    )
