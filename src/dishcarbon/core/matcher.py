"""Resolve canonical ingredient keys to footprint table entries."""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz import fuzz, process

from dishcarbon.core.footprints import UNKNOWN_KEY, CarbonDatabase
from dishcarbon.core.models import MatchTier

EXACT_CONFIDENCE = 1.0
SUBSTRING_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.3


@dataclass(frozen=True)
class FootprintMatch:
    key: str
    confidence: float
    tier: MatchTier


class FootprintMatcher:
    """
    Exact -> longest substring -> unknown lookup against a CarbonDatabase.

    - Exact: the canonical key is a table key (confidence 1.0).
    - Substring: a table key contains, or is contained in, the canonical key.
      The longest such key wins since it is the most specific ("olive oil"
      over "oil"); equal lengths are broken alphabetically (confidence 0.8).
    - Fallback: the ``unknown`` sentinel (confidence 0.3).

    The sentinel only matches exactly; it never wins a substring match, and
    an empty key always falls back.
    """

    def match(self, canonical_key: str, db: CarbonDatabase) -> FootprintMatch:
        if canonical_key in db:
            return FootprintMatch(canonical_key, EXACT_CONFIDENCE, MatchTier.EXACT)

        if canonical_key:
            best_key = self._longest_substring_key(canonical_key, db)
            if best_key:
                return FootprintMatch(best_key, SUBSTRING_CONFIDENCE, MatchTier.SUBSTRING)

        return FootprintMatch(UNKNOWN_KEY, FALLBACK_CONFIDENCE, MatchTier.FALLBACK)

    def _longest_substring_key(self, canonical_key: str, db: CarbonDatabase) -> str | None:
        best_key = None
        for key in db.keys():
            if key == UNKNOWN_KEY:
                continue
            if key in canonical_key or canonical_key in key:
                if (
                    best_key is None
                    or len(key) > len(best_key)
                    or (len(key) == len(best_key) and key < best_key)
                ):
                    best_key = key
        return best_key

    def suggest(
        self, canonical_key: str, db: CarbonDatabase, limit: int = 3
    ) -> list[tuple[str, float]]:
        """
        Closest table keys by fuzzy score, for diagnostics only.

        Returns (key, score 0-100) pairs, best first. Does not affect match().
        """
        if not canonical_key:
            return []
        choices = [key for key in db.keys() if key != UNKNOWN_KEY]
        results = process.extract(canonical_key, choices, scorer=fuzz.WRatio, limit=limit)
        return [(choice, float(score)) for choice, score, _ in results]
