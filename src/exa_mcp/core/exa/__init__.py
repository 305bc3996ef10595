"""Exa API access: HTTP client, error hierarchy, and request option builders."""

from exa_mcp.core.exa.client import EXA_API_BASE_URL, ExaClient
from exa_mcp.core.exa.errors import (
    AuthenticationError,
    ExaAPIError,
    ExaError,
    MalformedResultError,
    RateLimitError,
    SubmissionError,
)

__all__ = [
    "EXA_API_BASE_URL",
    "ExaClient",
    # Errors
    "ExaError",
    "ExaAPIError",
    "AuthenticationError",
    "RateLimitError",
    "SubmissionError",
    "MalformedResultError",
]
