"""In-memory job table owned by the serving process."""

import itertools
import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from propr.models.enums import JobStatus
from propr.models.review import Job, ReviewRequest, ReviewResult

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """Job records keyed by job id.

    Single writer (the executor), many readers (poll and list handlers).
    Every write swaps in a new immutable ``Job`` under the lock, so a reader
    holding a record never observes a half-applied transition.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._jobs: dict[str, Job] = {}
        self._order: dict[str, int] = {}
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def now(self) -> datetime:
        return self._clock()

    def create(self, request: ReviewRequest) -> Job:
        """Insert a new pending job for ``request`` and return it."""
        with self._lock:
            job_id = str(uuid.uuid4())
            while job_id in self._jobs:
                job_id = str(uuid.uuid4())
            job = Job(
                **request.model_dump(),
                job_id=job_id,
                status=JobStatus.PENDING,
                submitted_at=self._clock(),
            )
            self._jobs[job_id] = job
            self._order[job_id] = next(self._seq)
        return job

    def get(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def list(self) -> list[Job]:
        """All jobs, most recently submitted first; ties in insertion order."""
        with self._lock:
            jobs = list(self._jobs.values())
            order = dict(self._order)
        jobs.sort(key=lambda j: order[j.job_id])
        # Stable: equal timestamps keep insertion order under reverse=True
        jobs.sort(key=lambda j: j.submitted_at, reverse=True)
        return jobs

    # -- transitions (executor only) ------------------------------------------

    def mark_processing(self, job_id: str) -> Job | None:
        return self._transition(job_id, JobStatus.PENDING, status=JobStatus.PROCESSING)

    def mark_completed(self, job_id: str, result: ReviewResult) -> Job | None:
        return self._transition(
            job_id,
            JobStatus.PROCESSING,
            status=JobStatus.COMPLETED,
            result=result,
            completed_at=self._clock(),
        )

    def mark_failed(self, job_id: str, error: str) -> Job | None:
        return self._transition(
            job_id,
            JobStatus.PROCESSING,
            status=JobStatus.FAILED,
            error=error,
            completed_at=self._clock(),
        )

    def _transition(self, job_id: str, expected: JobStatus, **changes) -> Job | None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.debug("Skipping transition for unknown job %s", job_id)
                return None
            if job.status != expected:
                logger.warning(
                    "Skipping transition %s -> %s for job %s (current status %s)",
                    expected, changes["status"], job_id, job.status,
                )
                return None
            updated = job.evolve(**changes)
            self._jobs[job_id] = updated
        logger.info("Job %s %s -> %s", job_id, expected, updated.status)
        return updated
