"""
Uploads feature: Schemas for the processing queue contract.
"""

from enum import Enum

from pydantic import BaseModel, Field

from eido.core.exceptions import ValidationError


class JobStatus(str, Enum):
    """Lifecycle of a processing_queue row.

    pending -> uploading | processing -> complete | error
    """
    PENDING = "pending"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return _RANK[self] == TERMINAL_RANK

    def can_transition_to(self, new: "JobStatus") -> bool:
        """Forward moves only; terminal statuses accept nothing."""
        if self.is_terminal:
            return False
        return _RANK[new] > _RANK[self]

    @classmethod
    def parse(cls, value: "JobStatus | str") -> "JobStatus":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Unknown job status: {value}",
                detail=f"Expected one of: {', '.join(s.value for s in cls)}",
            )


TERMINAL_RANK = 3

_RANK = {
    JobStatus.PENDING: 0,
    JobStatus.UPLOADING: 1,
    JobStatus.PROCESSING: 2,
    JobStatus.COMPLETE: TERMINAL_RANK,
    JobStatus.ERROR: TERMINAL_RANK,
}

TERMINAL_STATUSES = frozenset(s for s in JobStatus if s.is_terminal)


class EnqueueRequest(BaseModel):
    """File hand-off from the uploader. The blob is already in object storage.

    ``storage_path`` and ``class_id`` are checked by the service so that a
    missing value is reported like any other validation error.
    """
    storage_path: str | None = None
    original_name: str = ""
    mime_type: str = "application/octet-stream"
    size: int = Field(default=0, ge=0)
    class_id: str | None = None
    folder_id: str | None = None


class BatchSummary(BaseModel):
    """Aggregate view over one batch of jobs, as shown in the upload toast."""
    total: int
    completed: int
    processing: int
    uploading: int
    errors: int
    in_progress: bool
    has_errors: bool
    header: str
    auto_dismiss_after: int | None = None
