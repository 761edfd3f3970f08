"""Ingredient name canonicalization for footprint lookup."""

from __future__ import annotations

import re

QUALIFIER_WORDS = ("fresh", "dried", "raw", "cooked", "organic", "ground")

_DISALLOWED = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_QUALIFIERS = re.compile(r"\b(?:" + "|".join(QUALIFIER_WORDS) + r")\b")


def normalize_ingredient_name(raw_name: str) -> str:
    """
    Return the canonical lookup key for a free-text ingredient name.

    "CHICKEN  BREAST   " -> "chicken breast", "fresh organic rice" -> "rice".
    """
    text = _DISALLOWED.sub("", raw_name.lower().strip())
    text = _WHITESPACE.sub(" ", text)
    text = _QUALIFIERS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


class NameNormalizer:
    """Normalizer stage wrapping normalize_ingredient_name."""

    def normalize(self, raw_name: str) -> str:
        return normalize_ingredient_name(raw_name)
