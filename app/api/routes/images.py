"""Routes for profession portrait generation."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_orchestrator, get_status_query
from app.core.config import settings
from app.core.logging import get_logger
from app.models.image import ERROR_STATUS, NOT_FOUND_STATUS, ImageResponse
from app.models.job import JobStatus
from app.services.orchestrator import DispatchError, JobOrchestrator
from app.services.prompts import list_professions
from app.services.status_query import StatusQuery

logger = get_logger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


def _error_response(status_code: int, body: ImageResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.get("/professions", response_model=List[str], summary="List supported professions")
def get_professions() -> List[str]:
    """Return the profession keys the prompt catalogue knows about."""

    return list_professions()


@router.post(
    "/generate",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ImageResponse,
    response_model_exclude_none=True,
    summary="Start a portrait generation job",
)
async def generate_image(
    image: UploadFile = File(...),
    profession: str = Form(...),
    age: int = Form(settings.default_target_age, ge=1),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """Register a job and return its id while the transformation runs in the background."""

    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded image is empty")

    try:
        job_id = orchestrator.submit(image_bytes, profession, age)
    except DispatchError as exc:
        logger.error("generate_image_dispatch_failed", error=str(exc))
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ImageResponse(status=ERROR_STATUS, message="Failed to process image"),
        )

    return ImageResponse(
        job_id=job_id,
        status=JobStatus.PROCESSING.value,
        message="Image generation started. Use jobId to check status.",
    )


@router.get(
    "/status/{job_id}",
    response_model=ImageResponse,
    response_model_exclude_none=True,
    summary="Retrieve generation job status",
)
def get_status(job_id: str, status_query: StatusQuery = Depends(get_status_query)):
    """Return the current status of a job, with the image URL once completed."""

    view = status_query.query(job_id)
    if view is None:
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            ImageResponse(status=NOT_FOUND_STATUS, message="Job not found"),
        )
    return ImageResponse.from_view(view)
