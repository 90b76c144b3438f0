"""System routes for the keyword enrichment engine."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request

from seo_engine.infrastructure.health import get_health_status

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check(request: Request):
    """Health check with Gemini/Supabase testing and the current keyword job state."""
    controller = getattr(request.app.state, "job_controller", None)
    job_status: Optional[dict] = controller.status() if controller is not None else None

    health = await get_health_status(job_status=job_status)
    health["timestamp"] = datetime.now(timezone.utc).isoformat()
    return health
