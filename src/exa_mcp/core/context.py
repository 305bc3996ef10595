"""Request context for correlating the log lines of one tool invocation.

Every tool call runs inside a request context that carries a correlation
ID and the name of the tool being executed. Both are stored in context
variables, so they follow the call across ``await`` points and are picked
up by the logging filter without being passed around explicitly.

Usage:
    from exa_mcp.core.context import async_request_context, get_correlation_id

    async with async_request_context(tool_name="web_search_exa") as ctx:
        print(ctx.correlation_id)  # e.g., "web_search_exa_a1b2c3d4e5f6"
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

__all__ = [
    "correlation_id_var",
    "tool_name_var",
    "start_time_var",
    "RequestContext",
    "generate_correlation_id",
    "sync_request_context",
    "async_request_context",
    "get_correlation_id",
    "get_tool_name",
    "get_start_time",
]

# -----------------------------------------------------------------------------
# Context Variables
# -----------------------------------------------------------------------------

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
"""Request correlation ID for tracing one invocation across components."""

tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")
"""Name of the tool currently executing."""

start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)
"""Request start time as Unix timestamp."""


def generate_correlation_id(prefix: str = "req") -> str:
    """Generate a unique correlation ID with optional prefix.

    Format: {prefix}_{12_hex_chars}
    Example: "req_a1b2c3d4e5f6"

    Args:
        prefix: ID prefix (default: "req")

    Returns:
        Unique correlation ID string
    """
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass
class RequestContext:
    """Snapshot of the current request context.

    Attributes:
        correlation_id: Unique request identifier
        tool_name: Tool being executed (empty outside tool calls)
        start_time: Request start timestamp
    """

    correlation_id: str = ""
    tool_name: str = ""
    start_time: float = field(default_factory=time.time)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def sync_request_context(
    *,
    correlation_id: Optional[str] = None,
    tool_name: Optional[str] = None,
) -> Generator[RequestContext, None, None]:
    """Synchronous context manager for request context.

    Args:
        correlation_id: Request ID (auto-generated from the tool name if None)
        tool_name: Tool being executed

    Yields:
        RequestContext snapshot
    """
    name = tool_name or ""
    corr_id = correlation_id or generate_correlation_id(prefix=name or "req")
    start = time.time()

    token_corr = correlation_id_var.set(corr_id)
    token_tool = tool_name_var.set(name)
    token_start = start_time_var.set(start)

    try:
        yield RequestContext(
            correlation_id=corr_id,
            tool_name=name,
            start_time=start,
        )
    finally:
        correlation_id_var.reset(token_corr)
        tool_name_var.reset(token_tool)
        start_time_var.reset(token_start)


class _AsyncContextManager:
    """Wrapper to make request context usable with ``async with``."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        tool_name: Optional[str] = None,
    ):
        self.correlation_id = correlation_id
        self.tool_name = tool_name
        self._sync_cm: Optional[Any] = None

    async def __aenter__(self) -> RequestContext:
        self._sync_cm = sync_request_context(
            correlation_id=self.correlation_id,
            tool_name=self.tool_name,
        )
        return self._sync_cm.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._sync_cm:
            self._sync_cm.__exit__(exc_type, exc_val, exc_tb)
        return False


def async_request_context(
    *,
    correlation_id: Optional[str] = None,
    tool_name: Optional[str] = None,
) -> _AsyncContextManager:
    """Create an async context manager for request context.

    Example:
        async with async_request_context(tool_name="deep_research_exa") as ctx:
            await poller.submit(request)
            logger.info(f"Submitted under {ctx.correlation_id}")
    """
    return _AsyncContextManager(correlation_id=correlation_id, tool_name=tool_name)


# -----------------------------------------------------------------------------
# Context Accessors
# -----------------------------------------------------------------------------


def get_correlation_id() -> str:
    """Current correlation ID, or empty string outside a request."""
    return correlation_id_var.get()


def get_tool_name() -> str:
    """Current tool name, or empty string outside a request."""
    return tool_name_var.get()


def get_start_time() -> float:
    """Request start time as Unix timestamp, or 0.0 if not set."""
    return start_time_var.get()

