"""Review job endpoints: submit, list and poll."""

import logging

from fastapi import APIRouter

from propr.api.responses import PrettyJSONResponse
from propr.dependencies import Executor, JsonBody, RequireClientKey, Store
from propr.errors.exceptions import NotFoundError
from propr.jobs.service import parse_review_request, submit_review
from propr.models.review import JobAccepted

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Reviews"],
    dependencies=[RequireClientKey],
    default_response_class=PrettyJSONResponse,
)


@router.post("/reviews", status_code=202)
async def create_review(body: JsonBody, store: Store, executor: Executor) -> PrettyJSONResponse:
    request = parse_review_request(body)
    job = submit_review(store, executor, request)
    return PrettyJSONResponse(status_code=202, content=JobAccepted(job_id=job.job_id).to_wire())


@router.get("/reviews")
async def list_reviews(store: Store) -> PrettyJSONResponse:
    return PrettyJSONResponse(content=[job.to_summary() for job in store.list()])


@router.get("/reviews/{job_id}")
async def get_review_status(job_id: str, store: Store) -> PrettyJSONResponse:
    job = store.get(job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    logger.debug("Poll: %s -> %s", job_id, job.status)
    return PrettyJSONResponse(content=job.to_status())
