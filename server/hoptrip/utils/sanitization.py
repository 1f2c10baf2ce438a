"""
Input sanitization utilities
=============================

Purpose:
- Reject request JSON payloads carrying MongoDB operators (NoSQL injection).
- Normalize free-text query parameters before they reach a regex filter.
"""

from typing import Any, List, Optional
import re


MONGO_OPERATOR_PREFIX = "$"
CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")


def contains_mongo_operators(obj: Any) -> bool:
    """Recursively check if the data contains MongoDB operators (keys starting with $).

    Dotted keys are flagged as well since they address nested paths in $set.
    """
    if isinstance(obj, dict):
        for k, v in obj.items():
            if isinstance(k, str):
                if k.startswith(MONGO_OPERATOR_PREFIX) or "." in k:
                    return True
            if contains_mongo_operators(v):
                return True
        return False
    elif isinstance(obj, list):
        return any(contains_mongo_operators(item) for item in obj)
    else:
        return False


def clean_query_text(text: Optional[str], max_length: int = 100) -> Optional[str]:
    """Strip control characters and surrounding whitespace; empty becomes None."""
    if not isinstance(text, str):
        return None
    s = CONTROL_CHARS.sub(" ", text).strip()
    return s[:max_length] or None


def split_tags(raw: Optional[str]) -> List[str]:
    """'beach, food,,Paris' -> ['beach', 'food', 'Paris']"""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]
