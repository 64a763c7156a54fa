"""FastAPI application entrypoint."""

from __future__ import annotations

from collections import Counter
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging, get_logger
from app.models.job import JobStatus
from app.services.job_store import InMemoryJobStore
from app.services.orchestrator import JobOrchestrator
from app.services.status_query import StatusQuery
from app.services.sweeper import RetentionSweeper
from app.services.transformation_gateway import ReplicateGateway, TransformationGateway
from app.worker.executor import create_executor

configure_logging()
logger = get_logger(__name__)


def create_app(
    config: Optional[Settings] = None,
    gateway: Optional[TransformationGateway] = None,
    store: Optional[InMemoryJobStore] = None,
) -> FastAPI:
    """Build the application; collaborators can be swapped for tests."""

    config = config or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        job_store = store or InMemoryJobStore()
        owns_gateway = gateway is None
        transformation_gateway = gateway or ReplicateGateway(config=config)

        orchestrator = JobOrchestrator(job_store, transformation_gateway, create_executor(config))
        sweeper = RetentionSweeper(
            job_store,
            retention=timedelta(hours=config.job_retention_hours),
            interval_seconds=config.sweep_interval_seconds,
        )

        app.state.job_store = job_store
        app.state.orchestrator = orchestrator
        app.state.status_query = StatusQuery(job_store)
        app.state.sweeper = sweeper

        sweeper.start()
        logger.info("application_started", environment=config.environment, workers=config.worker_pool_size)

        yield

        logger.info("application_stopping")
        sweeper.stop()
        orchestrator.shutdown(wait=False)
        if owns_gateway:
            transformation_gateway.close()

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router.api_router, prefix=config.api_prefix)

    @app.get("/healthz", tags=["health"])
    def health_check(request: Request) -> dict:
        """Simple health probe endpoint with job counts per status."""

        logger.debug("health_check_invoked")
        counts = Counter(job.status for job in request.app.state.job_store.all_jobs().values())
        return {
            "status": "ok",
            "environment": config.environment,
            "jobs": {job_status.value: counts.get(job_status, 0) for job_status in JobStatus},
        }

    return app


app = create_app()
