"""Utility modules for the keyword enrichment engine."""

from seo_engine.utils.enrichment import keywords_to_json, normalize_keywords, split_keywords

__all__ = ["keywords_to_json", "normalize_keywords", "split_keywords"]
