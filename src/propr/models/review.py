"""Pydantic models for review jobs and their payloads.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic.alias_generators import to_camel

from propr.models.enums import CommentSeverity, JobStatus


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self, **kwargs: Any) -> dict:
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class ReviewRequest(WireModel):
    """Request context for a review; immutable once a job is created.

    Values are opaque to the server: any non-null JSON value is accepted and
    echoed back unchanged.
    """

    organization_url: JsonValue
    project_id: JsonValue
    repository_id: JsonValue
    pull_request_id: JsonValue
    iteration_id: JsonValue

    @classmethod
    def required_fields(cls) -> list[str]:
        """Wire names of the fields a submission must carry, in declaration order."""
        return [field.alias or name for name, field in cls.model_fields.items()]


class ReviewComment(WireModel):
    """A single review finding. No file and no line means a PR-level comment."""

    file_path: str | None = None
    line_number: int | None = None
    severity: CommentSeverity
    message: str


class ReviewResult(WireModel):
    summary: str
    comments: list[ReviewComment] = Field(default_factory=list)


class JobAccepted(WireModel):
    job_id: str


class Job(ReviewRequest):
    """Snapshot of a review job.

    Records are never mutated; a transition produces a new snapshot via
    ``evolve`` so readers always see a consistent combination of
    status, completed_at, result and error.
    """

    job_id: str
    status: JobStatus = JobStatus.PENDING
    submitted_at: datetime
    completed_at: datetime | None = None
    result: ReviewResult | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_terminal_fields(self) -> "Job":
        terminal = self.status.is_terminal
        if terminal != (self.completed_at is not None):
            raise ValueError("completed_at must be set exactly when the job is terminal")
        if (self.status == JobStatus.COMPLETED) != (self.result is not None):
            raise ValueError("result must be set exactly when the job is completed")
        if (self.status == JobStatus.FAILED) != (self.error is not None):
            raise ValueError("error must be set exactly when the job has failed")
        return self

    def evolve(self, **changes: Any) -> "Job":
        """Return a validated copy of this job with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return Job.model_validate(data)

    @property
    def context(self) -> ReviewRequest:
        return ReviewRequest.model_validate(self.model_dump(include=set(ReviewRequest.model_fields)))

    def to_summary(self) -> dict:
        """Wire form used by the job list: no result or error."""
        return self.to_wire(exclude={"result", "error"})

    def to_status(self) -> dict:
        """Wire form used when polling a single job."""
        return self.to_wire()
