"""Health monitoring module for the keyword enrichment engine.

Provides health check endpoints and dependency testing.
"""

from seo_engine.infrastructure.health.checks import test_gemini_connection, test_supabase_connection
from seo_engine.infrastructure.health.endpoints import get_health_status

__all__ = [
    "test_gemini_connection",
    "test_supabase_connection",
    "get_health_status",
]
