"""Shared helpers for Exa tool modules.

Covers the pieces every tool repeats: rendering JSON output, mapping Exa
exceptions onto the error envelope, and registering only the tools the
configuration enables.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Collection, Iterable, Optional
from urllib.parse import urlparse

from mcp.server.fastmcp import FastMCP

from exa_mcp.core.exa.errors import (
    ExaAPIError,
    ExaError,
    MalformedResultError,
    SubmissionError,
)
from exa_mcp.core.naming import canonical_tool
from exa_mcp.core.responses import (
    ErrorCode,
    ErrorType,
    error_response,
    provider_error,
    validation_error,
)

logger = logging.getLogger(__name__)


def render_json(payload: Any) -> str:
    """Pretty-print a tool payload."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def hostname(url: Optional[str]) -> str:
    """Hostname of ``url``, or empty string when it cannot be parsed."""
    if not url:
        return ""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def unique_domains(urls: Iterable[Optional[str]]) -> list[str]:
    """Distinct non-empty hostnames in first-seen order."""
    seen: list[str] = []
    for url in urls:
        domain = hostname(url)
        if domain and domain not in seen:
            seen.append(domain)
    return seen


def exa_error_response(label: str, error: ExaError) -> dict[str, Any]:
    """Convert an Exa exception into a serialized error envelope.

    Args:
        label: Operation label used as the message prefix (e.g. "Research")
        error: Exception raised by the client, poller or formatter
    """
    if isinstance(error, SubmissionError):
        logger.warning("%s submission failed: %s", label, error.message)
        response = provider_error(
            label,
            error.message,
            status_code=error.status_code,
            error_code=ErrorCode.SUBMISSION_FAILED,
        )
    elif isinstance(error, ExaAPIError):
        logger.warning(
            "%s API error (%s): %s",
            label,
            error.status_code if error.status_code is not None else "unknown",
            error.message,
        )
        response = provider_error(label, error.message, status_code=error.status_code)
    elif isinstance(error, MalformedResultError):
        logger.warning("%s malformed result for task %s", label, error.task_id)
        response = error_response(
            f"{label} error: {error.message}",
            error_code=ErrorCode.MALFORMED_RESULT,
            error_type=ErrorType.PROVIDER,
            details={"task_id": error.task_id},
        )
    else:
        logger.warning("%s error: %s", label, error)
        response = error_response(
            f"{label} error: {error}",
            error_code=ErrorCode.PROVIDER_ERROR,
            error_type=ErrorType.PROVIDER,
        )
    return asdict(response)


async def render_call(label: str, call: Awaitable[Any]) -> str | dict:
    """Await a client call and render its body, or the error envelope."""
    try:
        response = await call
    except ExaError as e:
        return exa_error_response(label, e)
    return render_json(response)


def invalid_input(
    label: str,
    message: str,
    *,
    field: Optional[str] = None,
    remediation: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> dict[str, Any]:
    """Serialized validation envelope for locally rejected arguments."""
    logger.info("%s rejected input: %s", label, message)
    return asdict(
        validation_error(
            f"{label} error: {message}",
            field=field,
            remediation=remediation,
            error_code=error_code,
        )
    )


def tool_registrar(
    mcp: FastMCP, enabled: Collection[str]
) -> Callable[[str], Callable[[Callable[..., Any]], Callable[..., Any]]]:
    """Return a decorator factory that registers a tool only when enabled.

    Example:
        register = tool_registrar(mcp, {"web_search_exa"})

        @register("web_search_exa")
        async def web_search_exa(query: str) -> str: ...
    """

    def register(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            if name not in enabled:
                return func
            return canonical_tool(mcp, canonical_name=name)(func)

        return decorator

    return register


def page_params(cursor: Optional[str], limit: Optional[int]) -> dict[str, Any]:
    """Query parameters for cursor-paginated list endpoints."""
    return {"cursor": cursor, "limit": limit}


def list_data(response: Any) -> list[Any]:
    """Items of a list response, which is either a bare array or ``{"data": [...]}``."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        return response.get("data") or []
    return []


def page_summary(response: Optional[dict[str, Any]], items_key: str, items: list[Any]) -> dict[str, Any]:
    """Pagination block shared by all list tools."""
    response = response or {}
    return {
        f"{items_key}Count": len(items),
        "hasMore": bool(response.get("hasMore")),
        "nextCursor": response.get("nextCursor"),
        items_key: items,
    }
