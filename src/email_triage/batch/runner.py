"""Sequential batch classification.

``BatchRunner`` walks a list of email units one at a time, awaiting each
classify call before issuing the next. Each unit is billed by the service, so
units are never dispatched concurrently.

States::

    IDLE -> RUNNING -> COMPLETED | FAILED | CANCELLED

A new ``run()`` may start from any state except RUNNING. The runner does not
guard against re-entrant calls; callers check ``busy`` first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from email_triage.classifier.models import ClassificationResult
from email_triage.exceptions import ConfigurationError, EmptyInputError, TriageError

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, ClassificationResult], None]


class BatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class BatchOutcome:
    """Final state of one batch run."""

    state: BatchState
    results: list[ClassificationResult] = field(default_factory=list)
    error: TriageError | None = None
    attempted: int = 0

    @property
    def ok(self) -> bool:
        return self.state is BatchState.COMPLETED

    @property
    def message(self) -> str | None:
        """Human-readable failure message for the operator."""
        if self.error is None:
            return None
        return str(self.error)


class BatchRunner:
    """Drive a classification client over an ordered list of emails.

    Args:
        client: Anything with a ``configured`` flag and an async
            ``classify(email)`` method, normally ``ClassificationClient``.
        keep_partial_results: On failure or cancellation, keep the results
            collected before the failing unit (default). When False the
            accumulator is cleared instead.
        on_result: Optional callback invoked with ``(index, result)`` after
            each successful unit.
    """

    def __init__(
        self,
        client,
        keep_partial_results: bool = True,
        on_result: ResultCallback | None = None,
    ):
        self.client = client
        self.keep_partial_results = keep_partial_results
        self.on_result = on_result
        self.state = BatchState.IDLE
        self.results: list[ClassificationResult] = []
        self.error: TriageError | None = None
        self.busy = False
        self._task: asyncio.Task | None = None

    async def run(self, emails: Iterable[str]) -> BatchOutcome:
        """Classify ``emails`` in order, stopping at the first failure."""
        units = list(emails)
        if self.busy:
            logger.warning("Batch started while another run is in progress")

        if not self.client.configured:
            return self._reject(ConfigurationError("Classification service URL is not set."))
        if not units:
            return self._reject(EmptyInputError("Please paste at least one email."))

        self.results = []
        self.error = None
        self.state = BatchState.RUNNING
        self.busy = True
        logger.info(f"Classifying {len(units)} email(s)")

        attempted = 0
        try:
            for index, email in enumerate(units):
                attempted = index + 1
                logger.debug(f"Classifying email {attempted}/{len(units)}")
                result = await self.client.classify(email)
                self.results.append(result)
                if self.on_result is not None:
                    self.on_result(index, result)
        except TriageError as e:
            logger.warning(f"Batch aborted at email {attempted}/{len(units)}: {e}")
            self._settle(BatchState.FAILED, e)
            return self._outcome(attempted)
        except asyncio.CancelledError:
            logger.info(f"Batch cancelled at email {attempted}/{len(units)}")
            self._settle(BatchState.CANCELLED)
            raise
        except Exception:
            self._settle(BatchState.FAILED)
            raise
        finally:
            self.busy = False

        self.state = BatchState.COMPLETED
        logger.info(f"Batch completed: {len(self.results)} result(s)")
        return self._outcome(attempted)

    def start(self, emails: Iterable[str]) -> asyncio.Task:
        """Schedule ``run`` as a task on the running loop so it can be cancelled."""
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.run(emails))
        return self._task

    def cancel(self) -> bool:
        """Cancel the task created by ``start``. Returns False if nothing was running."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    def _reject(self, error: TriageError) -> BatchOutcome:
        logger.info(f"Batch not started: {error}")
        # Results from an earlier batch stay on the runner but are not part of this outcome.
        self.state = BatchState.FAILED
        self.error = error
        return BatchOutcome(state=self.state, error=error)

    def _settle(self, state: BatchState, error: TriageError | None = None) -> None:
        if not self.keep_partial_results:
            self.results = []
        self.state = state
        self.error = error

    def _outcome(self, attempted: int) -> BatchOutcome:
        return BatchOutcome(
            state=self.state,
            results=list(self.results),
            error=self.error,
            attempted=attempted,
        )
