"""Background task turning a submitted photo into a generated portrait."""

from __future__ import annotations

from app.core.logging import get_logger
from app.models.job import JobStatus
from app.services.job_store import InMemoryJobStore
from app.services.prompts import build_prompt
from app.services.transformation_gateway import GatewayError, TransformationGateway

logger = get_logger(__name__)


def run_transformation(
    job_id: str,
    image_bytes: bytes,
    profession: str,
    target_age: int,
    *,
    store: InMemoryJobStore,
    gateway: TransformationGateway,
) -> JobStatus:
    """Call the gateway once and record the single terminal state for the job."""

    logger.info("transformation_task_started", job_id=job_id, profession=profession, target_age=target_age)
    try:
        prompt = build_prompt(profession, target_age)
        result_url = gateway.generate(image_bytes, prompt)
        if not isinstance(result_url, str) or not result_url:
            raise GatewayError(f"Gateway returned an unusable result: {result_url!r}")
    except Exception as exc:
        logger.exception("transformation_task_failed", job_id=job_id, error=str(exc))
        store.update(job_id, JobStatus.FAILED)
        return JobStatus.FAILED

    store.update(job_id, JobStatus.COMPLETED, result_url)
    logger.info("transformation_task_completed", job_id=job_id)
    return JobStatus.COMPLETED
