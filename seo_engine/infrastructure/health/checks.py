"""Health check functions for the keyword enrichment engine.

Tests connectivity to external dependencies (Gemini, Supabase).
"""

import asyncio
from typing import Any, Dict

import google.generativeai as genai

from seo_engine.config import config
from seo_engine.infrastructure.database import SupabaseClient

CHECK_TIMEOUT_SECONDS = 2.0


async def test_gemini_connection() -> Dict[str, Any]:
    """Test Gemini API connectivity with minimal request.

    Returns:
        Dict with status ("healthy", "unconfigured", "timeout", "unavailable")
        and optional error message
    """
    try:
        api_key = config.gemini_api_key()

        if not api_key:
            return {"status": "unconfigured", "error": "GEMINI_API_KEY not set"}

        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(config.gemini_model())

        await asyncio.wait_for(
            asyncio.to_thread(model.generate_content, "ping"), timeout=CHECK_TIMEOUT_SECONDS
        )

        return {"status": "healthy", "model": config.gemini_model()}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": f"Request timed out after {CHECK_TIMEOUT_SECONDS:.0f}s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}


async def test_supabase_connection() -> Dict[str, Any]:
    """Test Supabase connectivity with a one-row query on the product table.

    Returns:
        Dict with status ("healthy", "unconfigured", "timeout", "unavailable")
        and optional error message
    """
    try:
        client = SupabaseClient()
        if not client.is_configured():
            return {"status": "unconfigured", "error": "Supabase credentials not set"}

        table = config.products_table()

        await asyncio.wait_for(
            asyncio.to_thread(lambda: client.table(table).select("sku").limit(1).execute()),
            timeout=CHECK_TIMEOUT_SECONDS,
        )

        return {"status": "healthy", "database": "connected", "table": table}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": f"Request timed out after {CHECK_TIMEOUT_SECONDS:.0f}s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}
