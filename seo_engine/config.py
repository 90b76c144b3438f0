"""Configuration management for the keyword enrichment engine.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from typing import Optional


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Config:
    """Application configuration loaded from environment variables."""

    # Gemini AI API
    @staticmethod
    def gemini_api_key() -> Optional[str]:
        """Get Gemini API key from environment."""
        return os.getenv("GOOGLE_GENERATIVE_AI_API_KEY") or os.getenv("GEMINI_API_KEY")

    @staticmethod
    def gemini_model() -> str:
        """Get Gemini model name used for keyword generation."""
        return os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Supabase configuration
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @staticmethod
    def products_table() -> str:
        """Get the product catalog table name."""
        return os.environ.get("PRODUCTS_TABLE", "web_products")

    # Admin control surface
    @staticmethod
    def admin_api_key() -> Optional[str]:
        """Get the admin API key guarding job control routes."""
        return os.environ.get("ADMIN_API_KEY")

    # Keyword job defaults
    @staticmethod
    def keyword_batch_size() -> int:
        return _env_int("KEYWORD_JOB_BATCH_SIZE", 50)

    @staticmethod
    def keyword_concurrency() -> int:
        return _env_int("KEYWORD_JOB_CONCURRENCY", 5)

    @staticmethod
    def keyword_page_delay_ms() -> int:
        return _env_int("KEYWORD_JOB_PAGE_DELAY_MS", 1000)

    @staticmethod
    def keyword_pause_poll_seconds() -> int:
        return _env_int("KEYWORD_JOB_PAUSE_POLL_SECONDS", 5)

    @staticmethod
    def keyword_max_pause_seconds() -> int:
        return _env_int("KEYWORD_JOB_MAX_PAUSE_SECONDS", 3600)

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return all([
            Config.gemini_api_key(),
            Config.supabase_url(),
            Config.supabase_service_role_key(),
        ])

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.gemini_api_key():
            missing.append("GEMINI_API_KEY or GOOGLE_GENERATIVE_AI_API_KEY")
        if not Config.supabase_url():
            missing.append("SUPABASE_URL")
        if not Config.supabase_service_role_key():
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


# Singleton instance for easy access
config = Config()
