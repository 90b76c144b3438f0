"""Pydantic models for the keyword enrichment engine.

All models are organized by domain:
- jobs: Bulk keyword job control requests
- products: Single product keyword requests
"""

from seo_engine.models.jobs import KeywordJobStartRequest
from seo_engine.models.products import GenerateKeywordsRequest

__all__ = [
    "KeywordJobStartRequest",
    "GenerateKeywordsRequest",
]
