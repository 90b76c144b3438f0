"""FastAPI dependencies for the keyword enrichment engine.

Dependency injection functions for route handlers.
"""

from fastapi import HTTPException, Request

from seo_engine.core.jobs import JobController


def get_job_controller(request: Request) -> JobController:
    """Get the process-wide JobController from app state.

    Args:
        request: FastAPI request object

    Returns:
        JobController shared by every route

    Raises:
        HTTPException: 503 if the controller was never configured
    """
    controller = getattr(request.app.state, "job_controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Keyword job engine is not configured")
    return controller
