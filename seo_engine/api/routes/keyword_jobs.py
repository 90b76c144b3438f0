"""Keyword job routes - start, pause, resume and inspect the bulk keyword job."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_engine.api.dependencies import get_job_controller
from seo_engine.core.errors import ConflictError
from seo_engine.core.jobs import JobController
from seo_engine.core.logging import logger
from seo_engine.infrastructure.auth import require_admin
from seo_engine.models import KeywordJobStartRequest

router = APIRouter(
    prefix="/jobs/keywords", tags=["Keyword Jobs"], dependencies=[Depends(require_admin)]
)


def _conflict(e: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"success": False, "error": str(e)})


@router.post("/start")
async def start_keyword_job(
    request: Optional[KeywordJobStartRequest] = None,
    controller: JobController = Depends(get_job_controller),
):
    """Start bulk keyword generation for every product without keywords.

    - **batch_size**: Products per page (default KEYWORD_JOB_BATCH_SIZE)
    - **concurrency_level**: Simultaneous Gemini calls (default KEYWORD_JOB_CONCURRENCY)
    - **prioritized_categories**: Categories processed before the rest

    Returns 202 immediately; progress is read from /jobs/keywords/status.
    """
    request = request or KeywordJobStartRequest()
    try:
        accepted = await controller.start(request.to_options())
    except ConflictError as e:
        return _conflict(e)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    except Exception as e:
        logger.error("keyword_job_start_failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": f"Failed to start keyword job: {str(e)}"},
        )

    return JSONResponse(
        status_code=202,
        content={
            "success": True,
            "data": accepted,
            "message": f"Keyword job started for {accepted['total_records']} products",
        },
    )


@router.post("/pause")
async def pause_keyword_job(controller: JobController = Depends(get_job_controller)):
    """Pause after the current page. In-flight Gemini calls finish normally."""
    try:
        snapshot = await controller.pause()
    except ConflictError as e:
        return _conflict(e)

    return JSONResponse(
        content={"success": True, "data": snapshot, "message": "Keyword job paused"}
    )


@router.post("/resume")
async def resume_keyword_job(controller: JobController = Depends(get_job_controller)):
    """Resume a paused keyword job."""
    try:
        snapshot = await controller.resume()
    except ConflictError as e:
        return _conflict(e)

    return JSONResponse(
        content={"success": True, "data": snapshot, "message": "Keyword job resumed"}
    )


@router.get("/status")
async def keyword_job_status(controller: JobController = Depends(get_job_controller)):
    """Progress, pacing and ETA of the current or last keyword job."""
    return JSONResponse(content={"success": True, "data": controller.status()})


@router.get("/failures")
async def keyword_job_failures(controller: JobController = Depends(get_job_controller)):
    """Products that failed in the current or last keyword job, with reasons."""
    failures = controller.failures()
    return JSONResponse(
        content={"success": True, "data": {"count": len(failures), "failures": failures}}
    )
