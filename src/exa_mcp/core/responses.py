"""
Standard error envelope for MCP tool operations.

Successful tool calls return their rendered payload directly (markdown or
a JSON document). Failed calls return this envelope, serialized as JSON:

    {
        "success": false,
        "data": {
            "error_code": "NOT_FOUND",
            "error_type": "not_found",
            "remediation": "..."?,
            "details": {"status_code": 404, ...}?
        },
        "error": "Research error (404): Task not found",
        "meta": {
            "version": "response-v2",
            "request_id": "check_research_status_exa_a1b2c3"?
        }
    }

Key Principle:
    - Expected outcomes (a research task that is still processing, an empty
      result set) are successes and never use this envelope.
    - ``error`` is the human-readable line; ``data`` holds the
      machine-readable classification.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from exa_mcp.core.context import get_correlation_id

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes for MCP tool responses.

    Categories:
        - Validation (input errors)
        - Resource (not found)
        - Access (auth, permissions, rate limits)
        - Provider (Exa call and research task failures)
        - System (internal, unavailable)
    """

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_REGEX_PATTERN = "INVALID_REGEX_PATTERN"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Access errors
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Provider errors
    PROVIDER_ERROR = "PROVIDER_ERROR"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    TASK_FAILED = "TASK_FAILED"
    MALFORMED_RESULT = "MALFORMED_RESULT"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNAVAILABLE = "UNAVAILABLE"


class ErrorType(str, Enum):
    """Error categories for routing and client-side handling.

    Each type corresponds to an HTTP status code analog and indicates
    whether the operation should be retried.
    """

    VALIDATION = "validation"  # 400 - No retry, fix input
    AUTHENTICATION = "authentication"  # 401 - No retry, check API key
    AUTHORIZATION = "authorization"  # 403 - No retry
    NOT_FOUND = "not_found"  # 404 - No retry
    RATE_LIMIT = "rate_limit"  # 429 - Yes, after delay
    PROVIDER = "provider"  # Provider contract or task failure - No retry
    INTERNAL = "internal"  # 500 - Yes, with backoff
    UNAVAILABLE = "unavailable"  # 503 - Yes, with backoff


@dataclass
class ToolResponse:
    """
    Standard response structure for MCP tool operations.

    Attributes:
        success: Whether the operation completed successfully
        data: The primary payload (error classification on failure)
        error: Error message if success is False, None otherwise
        meta: Response metadata including version identifier
    """

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": "response-v2"})


def _build_meta(
    *,
    request_id: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Construct a metadata payload that always includes the response version.

    The correlation ID of the current request is injected when no explicit
    ``request_id`` is given.
    """
    meta: Dict[str, Any] = {"version": "response-v2"}

    effective_request_id = request_id or get_correlation_id() or None
    if effective_request_id:
        meta["request_id"] = effective_request_id
    if extra:
        meta.update(dict(extra))

    return meta


def error_response(
    message: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    error_code: Optional[Union[ErrorCode, str]] = None,
    error_type: Optional[Union[ErrorType, str]] = None,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create a standardized error response.

    Args:
        message: Human-readable description of the failure.
        data: Optional mapping with additional machine-readable context.
        error_code: Canonical error code (``ErrorCode`` enum or string).
        error_type: Error category for routing (``ErrorType`` enum or string).
        remediation: User-facing guidance on how to fix the issue.
        details: Nested structure describing the failure.
        request_id: Correlation identifier propagated through logs.
        meta: Arbitrary extra metadata to merge into ``meta``.

    Example:
        >>> error_response(
        ...     "Get contents error: Maximum 10 URLs allowed per request",
        ...     error_code=ErrorCode.VALIDATION_ERROR,
        ...     error_type=ErrorType.VALIDATION,
        ...     remediation="Split the URLs into smaller batches",
        ... )
    """
    payload: Dict[str, Any] = {}
    if data:
        payload.update(dict(data))

    effective_error_code: Union[ErrorCode, str] = (
        error_code if error_code is not None else ErrorCode.INTERNAL_ERROR
    )
    effective_error_type: Union[ErrorType, str] = (
        error_type if error_type is not None else ErrorType.INTERNAL
    )

    if "error_code" not in payload:
        payload["error_code"] = (
            effective_error_code.value
            if isinstance(effective_error_code, Enum)
            else effective_error_code
        )
    if "error_type" not in payload:
        payload["error_type"] = (
            effective_error_type.value
            if isinstance(effective_error_type, Enum)
            else effective_error_type
        )
    if remediation is not None and "remediation" not in payload:
        payload["remediation"] = remediation
    if details and "details" not in payload:
        payload["details"] = dict(details)

    meta_payload = _build_meta(request_id=request_id, extra=meta)

    return ToolResponse(success=False, data=payload, error=message, meta=meta_payload)


def validation_error(
    message: str,
    *,
    field: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    remediation: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> ToolResponse:
    """Create a validation error response (HTTP 400 analog).

    Example:
        >>> validation_error(
        ...     "Create enrichment error: 'options' format requires option labels",
        ...     field="options",
        ... )
    """
    error_details = dict(details) if details else {}
    if field and "field" not in error_details:
        error_details["field"] = field

    return error_response(
        message,
        error_code=error_code,
        error_type=ErrorType.VALIDATION,
        details=error_details if error_details else None,
        remediation=remediation,
    )


_STATUS_CLASSIFICATION: Dict[int, tuple[ErrorCode, ErrorType]] = {
    400: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    401: (ErrorCode.UNAUTHORIZED, ErrorType.AUTHENTICATION),
    403: (ErrorCode.FORBIDDEN, ErrorType.AUTHORIZATION),
    404: (ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
    422: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    429: (ErrorCode.RATE_LIMIT_EXCEEDED, ErrorType.RATE_LIMIT),
}


def provider_error(
    label: str,
    message: str,
    *,
    status_code: Optional[int] = None,
    error_code: Optional[ErrorCode] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create an error response for a failed Exa API call.

    The HTTP status (when known) selects the error classification and is
    rendered into the message as ``"<label> error (<status>): <message>"``.

    Args:
        label: Operation label, e.g. "Research" or "Create Webset".
        message: Provider or transport error message.
        status_code: HTTP status returned by the provider, if any.
        error_code: Override for the derived error code.
        details: Extra details merged next to ``status_code``.
    """
    code, kind = _STATUS_CLASSIFICATION.get(
        status_code or 0, (ErrorCode.PROVIDER_ERROR, ErrorType.UNAVAILABLE)
    )
    status_text = str(status_code) if status_code is not None else "unknown"

    error_details: Dict[str, Any] = {"status_code": status_code}
    if details:
        error_details.update(dict(details))

    remediation = None
    if kind is ErrorType.AUTHENTICATION:
        remediation = "Check that EXA_API_KEY holds a valid Exa API key"
    elif kind is ErrorType.RATE_LIMIT:
        remediation = "Wait before retrying the request"

    return error_response(
        f"{label} error ({status_text}): {message}",
        error_code=error_code or code,
        error_type=kind,
        remediation=remediation,
        details=error_details,
    )
