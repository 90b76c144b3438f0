"""Bulk SEO keyword enrichment engine for the product catalog."""

__version__ = "1.0.0"
