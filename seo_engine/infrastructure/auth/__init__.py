"""Authentication module for the keyword enrichment engine.

Provides admin API key authentication for job control routes.
"""

from seo_engine.infrastructure.auth.api_key import verify_api_key
from seo_engine.infrastructure.auth.deps import require_admin

__all__ = [
    "verify_api_key",
    "require_admin",
]
