"""Turn collaborator ingredient lists into carbon estimates."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from dishcarbon.core.confidence import blend_confidence, round_half_up
from dishcarbon.core.footprints import CarbonDatabase, load_default_database
from dishcarbon.core.matcher import FALLBACK_CONFIDENCE, FootprintMatcher
from dishcarbon.core.models import (
    CarbonEstimate,
    EstimateMetadata,
    EstimateSource,
    RawIngredient,
    ResolvedIngredient,
)
from dishcarbon.core.normalize import NameNormalizer

logger = logging.getLogger(__name__)

IngredientInput = Union[RawIngredient, Mapping[str, Any]]


def _coerce_ingredient(entry: Any) -> tuple[str, Optional[float], bool]:
    """Return (display name, reported confidence, usable) for an untrusted entry."""
    if isinstance(entry, RawIngredient):
        name: Any = entry.name
        confidence: Any = entry.confidence
    elif isinstance(entry, Mapping):
        name = entry.get("name")
        confidence = entry.get("confidence")
    else:
        return ("" if entry is None else str(entry), None, False)

    if confidence is not None and (
        isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or not math.isfinite(confidence)
    ):
        confidence = None
    if not isinstance(name, str):
        return ("" if name is None else str(name), confidence, False)
    return (name, None if confidence is None else float(confidence), True)


class FootprintAggregator:
    """
    Resolve each ingredient against the footprint table and sum the result.

    Never raises on ingredient input: entries that cannot be matched resolve
    to the ``unknown`` footprint.
    """

    def __init__(
        self,
        database: CarbonDatabase | None = None,
        normalizer: NameNormalizer | None = None,
        matcher: FootprintMatcher | None = None,
    ) -> None:
        self.database = database if database is not None else load_default_database()
        self.normalizer = normalizer or NameNormalizer()
        self.matcher = matcher or FootprintMatcher()

    def aggregate(
        self,
        dish_name: str,
        raw_ingredients: Iterable[IngredientInput],
        source: EstimateSource | str,
        prior_processing_time_ms: float | None = None,
    ) -> CarbonEstimate:
        started = time.perf_counter()
        source = EstimateSource(source)
        entries = list(raw_ingredients or [])

        logger.info(
            "Calculating carbon footprint dish=%r ingredients=%d source=%s",
            dish_name,
            len(entries),
            source.value,
        )

        resolved = [self.resolve(entry) for entry in entries]
        total = round_half_up(sum(item.carbon_kg for item in resolved))

        local_ms = (time.perf_counter() - started) * 1000
        if prior_processing_time_ms is not None and math.isfinite(prior_processing_time_ms):
            processing_ms = round(max(0.0, prior_processing_time_ms) + local_ms)
        else:
            processing_ms = round(local_ms)

        estimate = CarbonEstimate(
            dish=dish_name,
            estimated_carbon_kg=total,
            ingredients=resolved,
            metadata=EstimateMetadata(source=source, processing_time_ms=processing_ms),
        )
        logger.info(
            "Carbon footprint calculated dish=%r total_kg=%.2f ingredients=%d time_ms=%d",
            dish_name,
            total,
            len(resolved),
            processing_ms,
        )
        return estimate

    def resolve(self, entry: IngredientInput) -> ResolvedIngredient:
        """Resolve one raw ingredient to a rounded line item."""
        name, reported, usable = _coerce_ingredient(entry)

        if not usable:
            carbon = self.database.unknown
            confidence = FALLBACK_CONFIDENCE
            logger.debug("Unusable ingredient entry %r, using unknown footprint", entry)
        else:
            canonical = self.normalizer.normalize(name)
            match = self.matcher.match(canonical, self.database)
            carbon = self.database.get_or_default(match.key)
            confidence = blend_confidence(match.confidence, reported)
            logger.debug(
                "Ingredient mapping original=%r normalized=%r key=%s tier=%s "
                "carbon=%s confidence=%.3f",
                name,
                canonical,
                match.key,
                match.tier.value,
                carbon,
                confidence,
            )

        return ResolvedIngredient(
            name=name,
            carbon_kg=round_half_up(carbon),
            confidence=round_half_up(confidence),
        )


def compute_estimate(
    dish_name: str,
    raw_ingredients: Iterable[IngredientInput],
    source: EstimateSource | str,
    prior_processing_time_ms: float | None = None,
    database: CarbonDatabase | None = None,
) -> CarbonEstimate:
    """Aggregate against the given table, or the process-wide default one."""
    return FootprintAggregator(database=database).aggregate(
        dish_name, raw_ingredients, source, prior_processing_time_ms
    )
