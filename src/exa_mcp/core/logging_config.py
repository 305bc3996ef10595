"""Structured logging configuration with automatic context injection.

Log records emitted while a tool is executing carry the invocation's
correlation ID and tool name, so interleaved calls can be told apart.
All output goes to stderr: stdout is reserved for the MCP stdio stream.

Usage:
    from exa_mcp.core.logging_config import configure_logging

    configure_logging(level="DEBUG", format="human")
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO, Union

from exa_mcp.core.context import (
    get_correlation_id,
    get_start_time,
    get_tool_name,
)

__all__ = [
    "ContextFilter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "configure_logging",
]

ROOT_LOGGER_NAME = "exa_mcp"


class ContextFilter(logging.Filter):
    """Logging filter that injects request context into log records.

    Adds ``correlation_id``, ``tool_name`` and ``elapsed_ms`` to every record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        record.tool_name = get_tool_name() or "-"

        start_time = get_start_time()
        if start_time > 0:
            record.elapsed_ms = round((time.time() - start_time) * 1000, 2)
        else:
            record.elapsed_ms = 0.0

        return True


class StructuredFormatter(logging.Formatter):
    """JSON-structured log formatter for machine-readable output.

    Example output:
        {"timestamp":"2024-01-15T10:30:45.123Z","level":"INFO",
         "logger":"exa_mcp.tools.research","message":"Research task started",
         "correlation_id":"deep_research_exa_a1b2c3d4e5f6","elapsed_ms":42.5}
    """

    def __init__(
        self,
        *,
        include_extra: bool = True,
        include_exception: bool = True,
    ):
        super().__init__()
        self.include_extra = include_extra
        self.include_exception = include_exception

        # Standard attributes to exclude from "extra"
        self._standard_attrs = {
            "name",
            "msg",
            "args",
            "levelname",
            "levelno",
            "pathname",
            "filename",
            "module",
            "lineno",
            "funcName",
            "created",
            "msecs",
            "relativeCreated",
            "thread",
            "threadName",
            "processName",
            "process",
            "message",
            "exc_info",
            "exc_text",
            "stack_info",
            "taskName",
            # Context attributes (handled separately)
            "correlation_id",
            "tool_name",
            "elapsed_ms",
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Context fields (injected by ContextFilter)
        log_entry["correlation_id"] = getattr(record, "correlation_id", "-")
        log_entry["tool"] = getattr(record, "tool_name", "-")
        log_entry["elapsed_ms"] = getattr(record, "elapsed_ms", 0.0)

        if self.include_exception and record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra = {}
            for key, value in record.__dict__.items():
                if key not in self._standard_attrs:
                    try:
                        json.dumps(value)
                        extra[key] = value
                    except (TypeError, ValueError):
                        extra[key] = str(value)
            if extra:
                log_entry["extra"] = extra

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter with context prefix.

    Produces logs in format:
        [LEVEL] [correlation_id] logger: message

    Example:
        [INFO] [web_search_exa_a1b2c3] tools.search: Found 5 results
    """

    def __init__(self, *, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        parts = []

        if self.include_timestamp:
            ts = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
            parts.append(ts)

        parts.append(f"[{record.levelname}]")

        corr_id = getattr(record, "correlation_id", "-")
        if corr_id and corr_id != "-":
            parts.append(f"[{corr_id}]")

        logger_name = record.name
        if logger_name.startswith(f"{ROOT_LOGGER_NAME}."):
            logger_name = logger_name[len(ROOT_LOGGER_NAME) + 1 :]
        parts.append(f"{logger_name}:")

        parts.append(record.getMessage())

        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result


def configure_logging(
    *,
    level: Union[int, str] = logging.INFO,
    format: str = "human",  # "structured" or "human"
    stream: Optional[TextIO] = None,
    add_context: bool = True,
) -> logging.Logger:
    """Configure the root exa_mcp logger.

    Args:
        level: Log level (default: INFO)
        format: Output format ("structured" for JSON, "human" for readable)
        stream: Output stream (default: stderr)
        add_context: Add ContextFilter for automatic context injection

    Returns:
        Configured root logger for exa_mcp
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if format == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter())

    if add_context:
        handler.addFilter(ContextFilter())

    logger.addHandler(handler)

    return logger

