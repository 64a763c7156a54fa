"""Pydantic models for the image generation boundary."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .job import JobStatus

NOT_FOUND_STATUS = "NOT_FOUND"
ERROR_STATUS = "ERROR"


class JobStatusView(BaseModel):
    """Boundary-facing projection of a job's observable state."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    status: JobStatus
    result_url: Optional[str] = None
    message: str


class ImageResponse(BaseModel):
    """API response for generation submissions and status queries."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_id: Optional[str] = None
    status: str = Field(..., description="PROCESSING, COMPLETED, FAILED, NOT_FOUND or ERROR.")
    image_url: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_view(cls, view: JobStatusView) -> "ImageResponse":
        """Build the wire response from a status projection."""

        return cls(
            job_id=view.job_id,
            status=view.status.value,
            image_url=view.result_url,
            message=view.message,
        )
