"""Shared API dependencies."""

from fastapi import HTTPException, Request, status

from app.services.orchestrator import JobOrchestrator
from app.services.status_query import StatusQuery


def get_orchestrator(request: Request) -> JobOrchestrator:
    """Return the orchestrator wired during application startup."""

    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Job orchestrator not initialized")
    return orchestrator


def get_status_query(request: Request) -> StatusQuery:
    """Return the status query interface wired during application startup."""

    status_query = getattr(request.app.state, "status_query", None)
    if status_query is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Status query not initialized")
    return status_query
