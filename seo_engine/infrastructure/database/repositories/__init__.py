"""Repository implementations for the keyword enrichment engine.

Implements Repository pattern with Dependency Inversion principle.
"""

from seo_engine.infrastructure.database.repositories.base import BaseRepository
from seo_engine.infrastructure.database.repositories.products import ProductRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
]
