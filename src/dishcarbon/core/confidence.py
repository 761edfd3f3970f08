"""Confidence blending and rounding utilities for resolved ingredients."""

import math
from typing import Optional

DEFAULT_COLLABORATOR_CONFIDENCE = 0.8


def round_half_up(value: float, digits: int = 2) -> float:
    """
    Round to the given number of decimals, halves away from zero for positives.

    Equivalent to floor(value * 10**digits + 0.5) / 10**digits.
    """
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score to 0-1; NaN counts as 0."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def blend_confidence(match_confidence: float, reported: Optional[float]) -> float:
    """
    Combine the matcher's structural confidence with the collaborator's.

    Args:
        match_confidence: Confidence of the lookup rule (1.0, 0.8 or 0.3)
        reported: Confidence reported by the AI collaborator, None if absent

    Returns:
        Product of both scores (0-1); a missing report counts as 0.8
    """
    if reported is None:
        reported = DEFAULT_COLLABORATOR_CONFIDENCE
    return clamp_confidence(match_confidence * clamp_confidence(reported))
