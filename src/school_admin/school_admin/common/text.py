from __future__ import annotations

import unicodedata
from typing import Optional


def normalize(value: Optional[str]) -> str:
    """Lower-case ``value`` and drop accents ("MÉXICO" -> "mexico")."""
    decomposed = unicodedata.normalize("NFD", value or "")
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn").lower()


def matches(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case/accent-insensitive substring test. An empty needle matches anything."""
    return normalize(needle) in normalize(haystack)
