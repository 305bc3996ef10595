"""Submit-and-poll driver for Exa deep research tasks.

The provider exposes research as a long-running job: a POST returns a task
id, then the task's status is read on a fixed interval until it reaches a
terminal state or the caller's deadline passes. The poller owns that loop
and nothing else; rendering lives in ``formatter``.

Example usage:
    poller = ResearchTaskPoller(client)
    task_id = await poller.submit(ResearchRequest(query="solid-state batteries"))
    outcome = await poller.await_completion(task_id, deadline=120.0)
"""

import asyncio
import logging
import time
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from exa_mcp.core.exa.client import (
    RESEARCH_TASK_ENDPOINT,
    RESEARCH_TASKS_ENDPOINT,
    ExaClient,
)
from exa_mcp.core.exa.errors import ExaAPIError, SubmissionError
from exa_mcp.core.research.models import (
    OutcomeKind,
    ResearchRequest,
    TaskOutcome,
    decode_task_status,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 3.0
DEFAULT_DEADLINE = 120.0
RESEARCH_TIMEOUT_MULTIPLIER = 4

_CANCELED = object()


class ResearchTaskPoller:
    """Drives a research task from submission to a terminal outcome.

    Instances hold only configuration; every ``await_completion`` call
    starts from a fresh status read, so one poller can be shared by
    concurrent tool invocations.

    Attributes:
        poll_interval: Seconds slept before each status read
        deadline: Default wall-clock budget for ``await_completion``
        max_poll_failures: Consecutive failed status reads tolerated
            before the error propagates (0 = fail on the first)
    """

    def __init__(
        self,
        client: ExaClient,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        deadline: float = DEFAULT_DEADLINE,
        max_poll_failures: int = 0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self.poll_interval = poll_interval
        self.deadline = deadline
        self.max_poll_failures = max(0, max_poll_failures)
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls, client: ExaClient, research_config: Any) -> "ResearchTaskPoller":
        """Build a poller from a ``ResearchConfig``."""
        return cls(
            client,
            poll_interval=research_config.poll_interval,
            deadline=research_config.max_wait,
            max_poll_failures=research_config.max_poll_failures,
        )

    async def submit(self, request: ResearchRequest) -> str:
        """Start a research task.

        Returns:
            The provider-assigned task id (never empty)

        Raises:
            SubmissionError: If the call fails or no task id comes back
        """
        logger.info(
            "Initiating deep research with %d sources", request.num_results
        )
        try:
            response = await self._client.post(
                RESEARCH_TASKS_ENDPOINT,
                request.to_payload(),
                timeout_multiplier=RESEARCH_TIMEOUT_MULTIPLIER,
            )
        except SubmissionError:
            raise
        except ExaAPIError as e:
            raise SubmissionError(
                e.message, status_code=e.status_code, original_error=e
            ) from e

        task_id = response.get("taskId") if isinstance(response, dict) else None
        if not task_id:
            raise SubmissionError("Failed to start research task - no task ID received")

        logger.info("Research task started with ID: %s", task_id)
        return str(task_id)

    async def check(self, task_id: str) -> TaskOutcome:
        """Read the task status once.

        Raises:
            ExaAPIError: If the status read fails
            MalformedResultError: If the task completed without a usable result
        """
        payload = await self._client.get(
            RESEARCH_TASK_ENDPOINT.format(task_id=task_id),
            timeout_multiplier=RESEARCH_TIMEOUT_MULTIPLIER,
        )
        outcome = decode_task_status(task_id, payload)
        logger.debug("Task status: %s", outcome.status)
        return outcome

    async def await_completion(
        self,
        task_id: str,
        *,
        deadline: Optional[float] = None,
        poll_interval: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> TaskOutcome:
        """Poll until the task is terminal, the deadline passes, or the wait is canceled.

        Each iteration waits ``poll_interval`` seconds first, then reads the
        status. A wait that runs out of time is an outcome (TIMED_OUT), not
        an error.

        Args:
            task_id: Task returned by ``submit``
            deadline: Wall-clock budget in seconds (default: poller's deadline)
            poll_interval: Seconds between reads (default: poller's interval)
            cancel_event: Setting this event ends the wait with CANCELED

        Returns:
            COMPLETED, FAILED, TIMED_OUT or CANCELED outcome

        Raises:
            ExaAPIError: If status reads fail more than ``max_poll_failures`` times in a row
            MalformedResultError: If the task completed without a usable result
        """
        budget = self.deadline if deadline is None else deadline
        interval = self.poll_interval if poll_interval is None else poll_interval
        started = self._clock()
        last_status: Optional[str] = None
        failures = 0

        while self._clock() - started < budget:
            slept = await self._unless_canceled(partial(self._sleep, interval), cancel_event)
            if slept is _CANCELED:
                logger.info("Research task %s wait canceled", task_id)
                return TaskOutcome.canceled(task_id, last_status)

            try:
                outcome = await self._unless_canceled(partial(self.check, task_id), cancel_event)
            except ExaAPIError as e:
                failures += 1
                if failures > self.max_poll_failures:
                    raise
                logger.warning(
                    "Status read for task %s failed (%d/%d): %s",
                    task_id,
                    failures,
                    self.max_poll_failures,
                    e,
                )
                continue

            if outcome is _CANCELED:
                logger.info("Research task %s wait canceled during status read", task_id)
                return TaskOutcome.canceled(task_id, last_status)

            failures = 0
            last_status = outcome.status
            if outcome.kind in (OutcomeKind.COMPLETED, OutcomeKind.FAILED):
                return outcome

        logger.info("Research task %s timed out after %.1fs", task_id, budget)
        return TaskOutcome.timed_out(task_id, last_status)

    async def _unless_canceled(
        self,
        start: Callable[[], Awaitable[Any]],
        cancel_event: Optional[asyncio.Event],
    ) -> Any:
        """Run ``start()`` unless the cancel event fires first.

        Returns the awaited result, or ``_CANCELED`` when the event won. The
        losing side is cancelled before returning; a finished call wins ties.
        """
        if cancel_event is None:
            return await start()
        if cancel_event.is_set():
            return _CANCELED

        work = asyncio.ensure_future(start())
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (work, waiter):
                task.cancel()
            await asyncio.gather(work, waiter, return_exceptions=True)

        if work.cancelled():
            return _CANCELED
        return work.result()
