"""Read-only projection of job state for the HTTP boundary."""

from __future__ import annotations

from typing import Optional

from app.models.image import JobStatusView
from app.models.job import Job, JobStatus
from app.services.job_store import InMemoryJobStore

STATUS_MESSAGES = {
    JobStatus.PROCESSING: "Image is still being processed",
    JobStatus.COMPLETED: "Image generation completed successfully",
    JobStatus.FAILED: "Image generation failed",
}


def project_job(job: Job) -> JobStatusView:
    result_url = job.result_url if job.status is JobStatus.COMPLETED else None
    return JobStatusView(
        job_id=job.id,
        status=job.status,
        result_url=result_url,
        message=STATUS_MESSAGES[job.status],
    )


class StatusQuery:
    """Maps a job id to its observable state; ``None`` means not found."""

    def __init__(self, store: InMemoryJobStore) -> None:
        self._store = store

    def query(self, job_id: str) -> Optional[JobStatusView]:
        job = self._store.get(job_id)
        if job is None:
            return None
        return project_job(job)
