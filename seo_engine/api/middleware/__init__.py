"""Middleware for the keyword enrichment engine API."""

from seo_engine.api.middleware.request_id import request_id_middleware

__all__ = ["request_id_middleware"]
