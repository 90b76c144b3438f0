"""Health check endpoint handler for the keyword enrichment engine.

Provides /health payload with dependency testing and the keyword job state.
"""

import asyncio
from typing import Any, Dict, Optional

from seo_engine.infrastructure.health.checks import test_gemini_connection, test_supabase_connection


async def get_health_status(
    job_status: Optional[Dict[str, Any]] = None, service_name: str = "seo-keyword-engine"
) -> Dict[str, Any]:
    """Get comprehensive health status.

    Args:
        job_status: Current keyword job snapshot (optional)
        service_name: Service name for response

    Returns:
        Dict with overall status and dependency health
    """
    # Test dependencies in parallel
    gemini_health, supabase_health = await asyncio.gather(
        test_gemini_connection(), test_supabase_connection(), return_exceptions=True
    )

    if isinstance(gemini_health, Exception):
        gemini_health = {"status": "error", "error": str(gemini_health)}
    if isinstance(supabase_health, Exception):
        supabase_health = {"status": "error", "error": str(supabase_health)}

    all_healthy = (
        gemini_health.get("status") == "healthy"
        and supabase_health.get("status") == "healthy"
    )

    return {
        "status": "healthy" if all_healthy else "degraded",
        "service": service_name,
        "version": "1.0.0",
        "keyword_job": (job_status or {}).get("status", "idle"),
        "dependencies": {"gemini": gemini_health, "supabase": supabase_health},
    }
