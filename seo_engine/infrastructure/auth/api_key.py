"""Admin API key authentication for the keyword enrichment engine."""

import hmac
from typing import Optional

from seo_engine.config import config
from seo_engine.core.logging import logger


def verify_api_key(api_key: Optional[str]) -> bool:
    """Verify the admin API key.

    Args:
        api_key: API key from x-api-key header

    Returns:
        True if valid (or no key configured), False if invalid
    """
    required_key = config.admin_api_key()

    # If no API key required, allow all requests
    if not required_key:
        logger.debug("api_key_check_skipped", reason="ADMIN_API_KEY not set")
        return True

    is_valid = api_key is not None and hmac.compare_digest(api_key, required_key)

    if is_valid:
        logger.debug("api_key_verified")
    else:
        logger.warning("api_key_invalid")

    return is_valid
