"""String enums shared by the job engine and the HTTP layer."""

from enum import StrEnum


class JobStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class CommentSeverity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUGGESTION = "suggestion"


class SimulationMode(StrEnum):
    SUCCESS = "success"
    FAIL = "fail"


class CertificateState(StrEnum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRING = "expiring"
    INVALID = "invalid"
