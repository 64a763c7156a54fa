"""In-memory job store owning every transformation job record."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from threading import Lock
from typing import Dict, Optional

from app.core.logging import get_logger
from app.models.job import Job, JobStatus, utcnow

logger = get_logger(__name__)


class JobStoreError(Exception):
    """Base error for misuse of the job store."""


class DuplicateJobError(JobStoreError):
    """Raised when a job id is registered twice."""


class InvalidTransitionError(JobStoreError, ValueError):
    """Raised when an update would break the job state machine."""


class InMemoryJobStore:
    """Thread-safe job registry. State lives for the lifetime of the process only.

    Records are immutable and replaced wholesale under the lock, so ``get`` can
    never observe a half-applied update.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._lock = Lock()
        self._jobs: Dict[str, Job] = {}
        self._clock = clock

    def create(self, job_id: str) -> Job:
        """Register a new job in processing state."""

        with self._lock:
            if job_id in self._jobs:
                raise DuplicateJobError(f"Job {job_id} already exists")
            job = Job(id=job_id, status=JobStatus.PROCESSING, created_at=self._clock())
            self._jobs[job_id] = job
        return job

    def update(self, job_id: str, status: JobStatus, result_url: Optional[str] = None) -> bool:
        """Apply the terminal transition for a job.

        Returns ``False`` without raising when the job is unknown, which is the
        case for a completion arriving after the job was evicted.
        """

        if not status.is_terminal:
            raise InvalidTransitionError(f"Cannot move job {job_id} back to {status.value}")
        if status is JobStatus.COMPLETED and not result_url:
            raise InvalidTransitionError(f"Completed job {job_id} requires a result URL")
        if status is JobStatus.FAILED and result_url is not None:
            raise InvalidTransitionError(f"Failed job {job_id} cannot carry a result URL")

        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.debug("late_update_ignored", job_id=job_id, status=status.value)
                return False
            if job.status.is_terminal:
                raise InvalidTransitionError(
                    f"Job {job_id} is already {job.status.value}, cannot move to {status.value}"
                )

            now = self._clock()
            if status is JobStatus.COMPLETED:
                self._jobs[job_id] = job.with_result(result_url, completed_at=now)
            else:
                self._jobs[job_id] = job.with_failure(completed_at=now)
        return True

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def remove_older_than(self, cutoff: datetime) -> int:
        """Evict every job created before ``cutoff``, whatever its status."""

        with self._lock:
            expired = [job_id for job_id, job in self._jobs.items() if job.created_at < cutoff]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def all_jobs(self) -> Mapping[str, Job]:
        with self._lock:
            return dict(self._jobs)
