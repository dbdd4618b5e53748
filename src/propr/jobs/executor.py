"""Work executors that drive jobs through their lifecycle.

A job moves ``pending -> processing -> completed | failed``. Executors never
write job records directly; they report progress through ``begin`` and
``finish``, which delegate to the store's guarded transitions.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from propr.jobs.payloads import SIMULATED_FAILURE, SIMULATED_RESULT
from propr.jobs.store import JobStore
from propr.models.enums import JobStatus, SimulationMode
from propr.models.review import Job, ReviewResult

logger = logging.getLogger(__name__)

# Upper bound on the pending -> processing delay, in seconds
MAX_PROCESSING_DELAY = 2.0
PROCESSING_DELAY_FRACTION = 0.33


def transition_delays(delay_ms: int) -> tuple[float, float]:
    """Return (processing, terminal) delays in seconds for a total ``delay_ms``."""
    total = max(delay_ms, 0) / 1000
    return min(MAX_PROCESSING_DELAY, total * PROCESSING_DELAY_FRACTION), total


class BaseExecutor(ABC):
    """Abstract base class for job executors."""

    def __init__(self, store: JobStore):
        self.store = store

    @abstractmethod
    def submit(self, job: Job) -> None:
        """Arrange for ``job`` to be worked on. Must not block."""
        ...

    def shutdown(self) -> None:
        """Release executor resources at process shutdown."""

    def begin(self, job_id: str) -> Job | None:
        """Report that work on ``job_id`` has started."""
        return self.store.mark_processing(job_id)

    def finish(
        self,
        job_id: str,
        result: ReviewResult | None = None,
        error: str | None = None,
    ) -> Job | None:
        """Report the outcome of ``job_id``; exactly one of result/error is given."""
        if (result is None) == (error is None):
            raise ValueError("finish() takes exactly one of result or error")
        job = self.store.get(job_id)
        if job is not None and job.status == JobStatus.PENDING:
            self.begin(job_id)
        if error is not None:
            return self.store.mark_failed(job_id, error)
        return self.store.mark_completed(job_id, result)


class SimulatedExecutor(BaseExecutor):
    """Timer-driven executor: no real work, just the passage of time.

    Each submitted job gets two one-shot timers on the running event loop,
    both measured from submission. The outcome is fixed by ``simulate``.
    """

    def __init__(
        self,
        store: JobStore,
        delay_ms: int = 6000,
        simulate: SimulationMode = SimulationMode.SUCCESS,
    ):
        super().__init__(store)
        self.delay_ms = delay_ms
        self.simulate = SimulationMode(simulate)
        self._handles: set[asyncio.TimerHandle] = set()

    def submit(self, job: Job) -> None:
        loop = asyncio.get_running_loop()
        processing_delay, terminal_delay = transition_delays(self.delay_ms)
        self._arm(loop, processing_delay, self._on_processing, job.job_id)
        self._arm(loop, terminal_delay, self._on_terminal, job.job_id)

    def shutdown(self) -> None:
        for handle in self._handles:
            handle.cancel()
        if self._handles:
            logger.info("Cancelled %d outstanding job timers", len(self._handles))
        self._handles.clear()

    @property
    def pending_timers(self) -> int:
        return len(self._handles)

    def _arm(self, loop: asyncio.AbstractEventLoop, delay: float, callback, job_id: str) -> None:
        handle: asyncio.TimerHandle | None = None

        def fire() -> None:
            self._handles.discard(handle)
            callback(job_id)

        handle = loop.call_later(delay, fire)
        self._handles.add(handle)

    def _on_processing(self, job_id: str) -> None:
        self.begin(job_id)

    def _on_terminal(self, job_id: str) -> None:
        if self.simulate == SimulationMode.FAIL:
            self.finish(job_id, error=SIMULATED_FAILURE)
        else:
            self.finish(job_id, result=SIMULATED_RESULT)
