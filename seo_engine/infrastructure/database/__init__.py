"""Database module for the keyword enrichment engine.

Provides Supabase client singleton and repository pattern for database operations.
"""

from seo_engine.infrastructure.database.client import SupabaseClient
from seo_engine.infrastructure.database.repositories import BaseRepository, ProductRepository

__all__ = [
    "SupabaseClient",
    "BaseRepository",
    "ProductRepository",
]
