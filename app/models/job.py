"""Shared job models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""

    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    """Possible states for transformation jobs."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PROCESSING


class Job(BaseModel):
    """Immutable snapshot of a tracked transformation job.

    Transitions never mutate an instance; they return a replacement copy, so a
    reader holding a snapshot always sees fields from one logical update.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    status: JobStatus = JobStatus.PROCESSING
    result_url: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    def with_result(self, result_url: str, completed_at: datetime) -> "Job":
        """Return a completed copy carrying the result URL."""

        return self.model_copy(
            update={
                "status": JobStatus.COMPLETED,
                "result_url": result_url,
                "completed_at": completed_at,
            }
        )

    def with_failure(self, completed_at: datetime) -> "Job":
        """Return a failed copy."""

        return self.model_copy(
            update={
                "status": JobStatus.FAILED,
                "result_url": None,
                "completed_at": completed_at,
            }
        )
