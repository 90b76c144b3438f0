"""Unit tests for keyword response cleanup."""

import json

import pytest

from seo_engine.utils.enrichment import keywords_to_json, normalize_keywords, split_keywords


class TestSplitKeywords:
    """Test splitting AI keyword responses."""

    def test_trims_and_deduplicates(self):
        assert split_keywords("lavadora,  Lavadora , nevera\n") == ["lavadora", "nevera"]

    def test_newlines_and_fences(self):
        text = "```\nestufa de gas\nestufa barata, \"fogón\"\n```"
        assert split_keywords(text) == ["estufa de gas", "estufa barata", "fogón"]

    def test_empty(self):
        assert split_keywords("  , ,\n") == []


class TestNormalizeKeywords:
    """Test the stored keyword format."""

    def test_joins_with_comma_space(self):
        assert normalize_keywords("a,b ,  c") == "a, b, c"

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            normalize_keywords("")
        with pytest.raises(ValueError):
            normalize_keywords(None)


class TestKeywordsToJson:
    """Test the JSON array format persisted in search_keywords."""

    def test_encodes_array(self):
        stored = keywords_to_json("lavadora, nevera, Lavadora")

        assert json.loads(stored) == ["lavadora", "nevera"]

    def test_keeps_accents(self):
        assert keywords_to_json("fogón, máquina") == '["fogón", "máquina"]'

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            keywords_to_json(" , ")
