"""Job orchestration: register jobs and dispatch transformations to the worker pool."""

from __future__ import annotations

import uuid
from concurrent.futures import Executor, Future
from functools import partial

from app.core.logging import get_logger
from app.models.job import JobStatus
from app.services.job_store import InMemoryJobStore
from app.services.transformation_gateway import TransformationGateway
from app.tasks.transformation_tasks import run_transformation

logger = get_logger(__name__)


class DispatchError(RuntimeError):
    """Raised when the worker pool refuses a transformation task."""


class JobOrchestrator:
    """Creates jobs and hands their transformation to background workers.

    ``submit`` returns as soon as the job is registered; the gateway call and
    the terminal store write both happen on a worker thread.
    """

    def __init__(
        self,
        store: InMemoryJobStore,
        gateway: TransformationGateway,
        executor: Executor,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._executor = executor

    def submit(self, image_bytes: bytes, profession: str, target_age: int) -> str:
        """Register a job and start its transformation without waiting for it."""

        job_id = str(uuid.uuid4())
        self._store.create(job_id)
        logger.info("job_created", job_id=job_id, profession=profession, target_age=target_age)

        try:
            future = self._executor.submit(
                run_transformation,
                job_id,
                image_bytes,
                profession,
                target_age,
                store=self._store,
                gateway=self._gateway,
            )
        except RuntimeError as exc:
            logger.error("job_dispatch_failed", job_id=job_id, error=str(exc))
            self._store.update(job_id, JobStatus.FAILED)
            raise DispatchError(f"Could not dispatch job {job_id}") from exc

        future.add_done_callback(partial(self._on_task_done, job_id))
        return job_id

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with ``wait`` block until running tasks finish."""

        self._executor.shutdown(wait=wait)

    def _on_task_done(self, job_id: str, future: Future) -> None:
        if future.cancelled():
            # Never ran, so nothing else will close the job out.
            logger.warning("transformation_task_cancelled", job_id=job_id)
            self._store.update(job_id, JobStatus.FAILED)
            return

        exc = future.exception()
        if exc is not None:
            logger.error("transformation_task_crashed", job_id=job_id, error=str(exc), exc_info=exc)
