"""Tests for footprint key matching."""

import pytest

from dishcarbon.core.footprints import CarbonDatabase, load_default_database
from dishcarbon.core.matcher import FootprintMatcher
from dishcarbon.core.models import MatchTier


@pytest.fixture
def db() -> CarbonDatabase:
    return load_default_database()


def test_exact_match(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("chicken", db)
    assert match.key == "chicken"
    assert match.confidence == 1.0
    assert match.tier == MatchTier.EXACT


def test_substring_prefers_longest_key(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("extra virgin olive oil", db)
    assert match.key == "olive oil"
    assert match.confidence == 0.8
    assert match.tier == MatchTier.SUBSTRING


def test_key_contained_in_table_key(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("potato", db)
    assert match.key == "potatoes"
    assert match.confidence == 0.8


def test_exact_beats_longer_substring() -> None:
    db = CarbonDatabase({"oil": 1.0, "olive oil": 5.0, "unknown": 2.0})
    match = FootprintMatcher().match("oil", db)
    assert match.key == "oil"
    assert match.confidence == 1.0


def test_equal_length_tie_is_alphabetical() -> None:
    db = CarbonDatabase({"rice": 4.0, "beef": 60.0, "unknown": 2.0})
    match = FootprintMatcher().match("rice and beef", db)
    assert match.key == "beef"

    reordered = CarbonDatabase({"beef": 60.0, "rice": 4.0, "unknown": 2.0})
    assert FootprintMatcher().match("rice and beef", reordered).key == "beef"


def test_fallback_to_unknown(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("dragonfruit", db)
    assert match.key == "unknown"
    assert match.confidence == 0.3
    assert match.tier == MatchTier.FALLBACK


def test_sentinel_never_wins_substring(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("exoticunknowningredientxyz", db)
    assert match.key == "unknown"
    assert match.tier == MatchTier.FALLBACK


def test_empty_key_falls_back(db: CarbonDatabase) -> None:
    match = FootprintMatcher().match("", db)
    assert match.key == "unknown"
    assert match.confidence == 0.3


@pytest.mark.parametrize("key", ["", " ", "beef", "unknown", "zz top", "vegetable", "a"])
def test_match_always_returns_table_key(db: CarbonDatabase, key: str) -> None:
    assert FootprintMatcher().match(key, db).key in db


def test_every_table_key_matches_itself_exactly(db: CarbonDatabase) -> None:
    matcher = FootprintMatcher()
    for key in db:
        match = matcher.match(key, db)
        assert match.key == key
        assert match.confidence == 1.0


def test_suggest_returns_close_keys(db: CarbonDatabase) -> None:
    suggestions = FootprintMatcher().suggest("chiken", db, limit=2)
    assert len(suggestions) == 2
    assert suggestions[0][0] == "chicken"
    assert all(key != "unknown" for key, _ in suggestions)


def test_suggest_empty_key(db: CarbonDatabase) -> None:
    assert FootprintMatcher().suggest("", db) == []
