"""Naming helpers for MCP tool registration."""

from __future__ import annotations

import functools
import json
import logging
import time
from dataclasses import asdict
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from exa_mcp.core.context import async_request_context
from exa_mcp.core.responses import ErrorCode, ErrorType, error_response

logger = logging.getLogger(__name__)


def _minify_response(result: dict[str, Any]) -> TextContent:
    """Convert dict to TextContent with minified JSON.

    Args:
        result: Dictionary to serialize

    Returns:
        TextContent with minified JSON string
    """
    return TextContent(
        type="text",
        text=json.dumps(result, separators=(",", ":"), default=str),
    )


def canonical_tool(
    mcp: FastMCP,
    *,
    canonical_name: str,
    **tool_kwargs: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that registers a tool under its canonical name.

    This decorator wraps the tool function to:
    1. Register it with FastMCP under the canonical name
    2. Run every call inside a request context keyed by the tool name
    3. Turn unexpected exceptions into an INTERNAL_ERROR envelope

    Tools return either rendered text (passed through) or an error
    envelope dict (minified into a single text block).

    Args:
        mcp: FastMCP instance
        canonical_name: The canonical name for the tool
        **tool_kwargs: Additional kwargs passed to mcp.tool()

    Returns:
        Decorated function registered as an MCP tool
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            async with async_request_context(tool_name=canonical_name) as ctx:
                start_time = time.perf_counter()
                logger.info("Tool %s started", canonical_name)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    duration_ms = (time.perf_counter() - start_time) * 1000
                    logger.exception(
                        "Tool %s raised after %.1fms", canonical_name, duration_ms
                    )
                    result = asdict(
                        error_response(
                            f"{canonical_name} error: {e}",
                            error_code=ErrorCode.INTERNAL_ERROR,
                            error_type=ErrorType.INTERNAL,
                            request_id=ctx.correlation_id,
                        )
                    )
                else:
                    duration_ms = (time.perf_counter() - start_time) * 1000
                    logger.info(
                        "Tool %s completed in %.1fms", canonical_name, duration_ms
                    )

                if isinstance(result, dict):
                    return _minify_response(result)
                return result

        tool_kwargs.setdefault("structured_output", False)
        return mcp.tool(name=canonical_name, **tool_kwargs)(async_wrapper)

    return decorator
