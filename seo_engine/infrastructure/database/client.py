"""Supabase client singleton for the keyword enrichment engine.

One client per process; the product repository and the health check share it.
"""

from typing import Any, Dict, Optional

from supabase import Client, create_client

from seo_engine.config import config
from seo_engine.core.logging import logger


class SupabaseClient:
    """Singleton Supabase client with lazy initialization."""

    _instance: Optional["SupabaseClient"] = None
    _client: Optional[Client] = None

    def __new__(cls):
        """Ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client so the next access re-reads configuration."""
        if cls._instance is not None:
            cls._instance._client = None
        cls._instance = None

    @property
    def client(self) -> Client:
        """Get Supabase client, initializing if needed.

        Raises:
            RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing
        """
        if self._client is None:
            url = config.supabase_url()
            key = config.supabase_service_role_key()

            if not url or not key:
                raise RuntimeError(
                    "Supabase not configured. Set SUPABASE_URL and "
                    "SUPABASE_SERVICE_ROLE_KEY environment variables."
                )

            self._client = create_client(url, key)
            logger.info("supabase_client_initialized", url=url)

        return self._client

    def table(self, name: str):
        """Start a PostgREST query on a table."""
        return self.client.table(name)

    def rpc(self, function: str, params: Dict[str, Any]):
        """Prepare a call to a Postgres function."""
        return self.client.rpc(function, params)

    def is_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return bool(config.supabase_url()) and bool(config.supabase_service_role_key())
