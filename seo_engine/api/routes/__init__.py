"""Routes for the keyword enrichment engine API."""

from seo_engine.api.routes import keyword_jobs, products, system

__all__ = ["keyword_jobs", "products", "system"]
