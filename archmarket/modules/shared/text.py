"""
Text helpers for slugs and catalogue search.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

_NON_SLUG = re.compile(r"[^a-z0-9 -]")
_SPACES = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify(title: str) -> str:
    """``"Modern Villa: 2024!"`` -> ``"modern-villa-2024"``."""
    slug = _NON_SLUG.sub("", title.lower())
    slug = _SPACES.sub("-", slug)
    slug = _DASHES.sub("-", slug)
    return slug.strip("-")


def contains_text(needle: Optional[str], *haystacks: Any) -> bool:
    """Case-insensitive substring match over strings and lists of strings."""
    if not needle:
        return True
    needle = needle.lower()
    for value in haystacks:
        if isinstance(value, str):
            if needle in value.lower():
                return True
        elif isinstance(value, Iterable) and not isinstance(value, (bytes, dict)):
            if any(isinstance(v, str) and needle in v.lower() for v in value):
                return True
    return False
