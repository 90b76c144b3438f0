"""FastAPI authentication dependencies for the keyword enrichment engine.

Job control routes are admin-only; they are guarded by a shared API key.
"""

from typing import Optional

from fastapi import Header, HTTPException

from seo_engine.infrastructure.auth.api_key import verify_api_key


async def require_admin(x_api_key: Optional[str] = Header(None)) -> None:
    """Reject the request unless it carries the admin API key.

    Args:
        x_api_key: Admin API key header

    Raises:
        HTTPException: 401 if the key is missing or wrong
    """
    if not verify_api_key(x_api_key):
        raise HTTPException(
            status_code=401, detail="Authentication required. Provide a valid x-api-key header."
        )
