"""HTTP API for the keyword enrichment engine."""

from seo_engine.api.app import create_app

__all__ = ["create_app"]
