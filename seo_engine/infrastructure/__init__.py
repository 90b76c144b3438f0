"""Infrastructure modules for the keyword enrichment engine.

Production-grade infrastructure components:
- Database: Supabase client singleton and product repository
- Auth: Admin API key authentication
- Health: Dependency health checks
"""

# Database
from seo_engine.infrastructure.database import BaseRepository, ProductRepository, SupabaseClient

# Auth
from seo_engine.infrastructure.auth import require_admin, verify_api_key

# Health
from seo_engine.infrastructure.health import (
    get_health_status,
    test_gemini_connection,
    test_supabase_connection,
)

__all__ = [
    # Database
    "SupabaseClient",
    "BaseRepository",
    "ProductRepository",
    # Auth
    "verify_api_key",
    "require_admin",
    # Health
    "test_gemini_connection",
    "test_supabase_connection",
    "get_health_status",
]
