"""Gemini keyword generation client."""

from seo_engine.integrations.gemini.client import KEYWORD_PROMPT, GeminiKeywordClient

__all__ = ["KEYWORD_PROMPT", "GeminiKeywordClient"]
