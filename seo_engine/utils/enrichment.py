"""Enrichment utilities for the keyword engine.

Helpers for cleaning AI-generated keyword lists before they are stored.
"""

import json
import re
from typing import List

_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def split_keywords(text: str) -> List[str]:
    """Split a comma-separated keyword response into unique, trimmed items.

    Example:
        >>> split_keywords("lavadora,  Lavadora , nevera\\n")
        ['lavadora', 'nevera']
    """
    cleaned = _FENCE.sub("", text.strip())
    seen = set()
    keywords = []
    for item in re.split(r"[,\n]", cleaned):
        keyword = " ".join(item.split()).strip(" .;\"'")
        marker = keyword.lower()
        if keyword and marker not in seen:
            seen.add(marker)
            keywords.append(keyword)
    return keywords


def normalize_keywords(text: str) -> str:
    """Normalize a keyword response to the stored "a, b, c" format.

    Raises:
        ValueError: If the response contains no keywords
    """
    keywords = split_keywords(text or "")
    if not keywords:
        raise ValueError("AI response contained no keywords")
    return ", ".join(keywords)


def keywords_to_json(text: str) -> str:
    """Encode a keyword response as the JSON array stored in search_keywords.

    Example:
        >>> keywords_to_json("lavadora, nevera")
        '["lavadora", "nevera"]'

    Raises:
        ValueError: If the response contains no keywords
    """
    keywords = split_keywords(text or "")
    if not keywords:
        raise ValueError("AI response contained no keywords")
    return json.dumps(keywords, ensure_ascii=False)
