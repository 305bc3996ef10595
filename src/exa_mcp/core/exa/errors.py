"""Exception hierarchy for Exa API calls and research tasks.

Research task outcomes that are part of normal operation (a failed task,
a wait that ran out of time) are not exceptions; see
``exa_mcp.core.research.models.TaskOutcome``.
"""

from typing import Optional


class ExaError(Exception):
    """Base class for all Exa adapter errors."""


class ExaAPIError(ExaError):
    """An Exa API call failed.

    Raised for non-2xx responses and for transport failures (connection
    errors, timeouts), in which case ``status_code`` is None.

    Attributes:
        message: Provider or transport error message
        status_code: HTTP status code, if a response was received
        original_error: Underlying exception for transport failures
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"Exa API error ({self.status_code}): {self.message}"
        return f"Exa API error: {self.message}"


class AuthenticationError(ExaAPIError):
    """The API key was rejected (HTTP 401)."""

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message, status_code=401)


class RateLimitError(ExaAPIError):
    """The provider rate limit was exceeded (HTTP 429)."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class SubmissionError(ExaAPIError):
    """A research task could not be started.

    Either the submission call failed, or the provider answered without
    a task identifier.
    """


class MalformedResultError(ExaError):
    """A research task reported ``completed`` without an interpretable result."""

    def __init__(self, task_id: str, message: str = "Research completed but no results returned"):
        super().__init__(message)
        self.task_id = task_id
        self.message = message
