"""
Term normalization shared by alias-index construction and query lookup.

Both sides of a lookup must go through normalize_term so that
"Côte d'Ivoire", "COTE D'IVOIRE" and "cote-d-ivoire" land on the same key.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")


# Spacing modifiers such as the okina in "Saʻoloto" or a stray acute accent
_MODIFIER_CATEGORIES = frozenset({"Lm", "Sk"})


def strip_diacritics(text: str) -> str:
    """Decompose accented characters and drop combining and modifier marks."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) and unicodedata.category(ch) not in _MODIFIER_CATEGORIES
    )


def normalize_term(text: str) -> str:
    """
    Canonicalize free text into a comparable key.
    Rules:
      1. Strip diacritics
      2. "&" becomes the word "and"
      3. Every run of non [a-zA-Z0-9] characters becomes one space
      4. Trim, collapse whitespace, lowercase
    """
    if not text:
        return ""
    normalized = strip_diacritics(text)
    normalized = normalized.replace("&", " and ")
    normalized = _NON_ALNUM_RE.sub(" ", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized.strip())
    return normalized.lower()
