"""Review submission orchestration."""

import logging

from propr.errors.exceptions import ValidationError
from propr.jobs.executor import BaseExecutor
from propr.jobs.store import JobStore
from propr.models.review import Job, ReviewRequest

logger = logging.getLogger(__name__)


def parse_review_request(body: dict) -> ReviewRequest:
    """Validate a submission body.

    Only absent and null fields are rejected; they are reported together,
    by wire name, in declaration order.
    """
    missing = [name for name in ReviewRequest.required_fields() if body.get(name) is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", details=missing)

    return ReviewRequest.model_validate({k: body[k] for k in ReviewRequest.required_fields()})


def submit_review(store: JobStore, executor: BaseExecutor, request: ReviewRequest) -> Job:
    """Create a pending job for ``request`` and hand it to the executor."""
    job = store.create(request)
    executor.submit(job)
    logger.info(
        "Job created: %s (PR #%s, executor=%s)",
        job.job_id, job.pull_request_id, type(executor).__name__,
    )
    return job
