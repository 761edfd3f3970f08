"""Parse and sanitize JSON payloads returned by the AI collaborators."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from dishcarbon.core.confidence import clamp_confidence
from dishcarbon.core.models import ExtractionResult, RawIngredient
from dishcarbon.errors import AIServiceError

logger = logging.getLogger(__name__)

MAX_INGREDIENTS = 50
TRUNCATED_INGREDIENTS = 20
MAX_INGREDIENT_NAME_LENGTH = 100
MAX_RESPONSE_CHARS = 50_000


def _as_confidence(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return clamp_confidence(float(value))


def _decode(content: str | bytes, collaborator: str) -> Any:
    if not content:
        raise AIServiceError(f"No response content from {collaborator}")
    if len(content) > MAX_RESPONSE_CHARS:
        raise AIServiceError(f"{collaborator} response too large", details={"length": len(content)})
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Failed to parse %s response: %s", collaborator, exc)
        raise AIServiceError(f"Failed to parse {collaborator} response as JSON") from exc


def parse_extraction_payload(payload: Any, collaborator: str = "LLM") -> ExtractionResult:
    """
    Turn a collaborator response into an ExtractionResult.

    Args:
        payload: Raw JSON text or the decoded object from the text or vision
            collaborator
        collaborator: Name used in error messages and logs

    Returns:
        ExtractionResult holding only well-formed ingredients

    Raises:
        AIServiceError: If the text is oversized or not JSON, or the payload is
            not an object with an ingredient list
    """
    if isinstance(payload, (str, bytes)):
        payload = _decode(payload, collaborator)

    if not isinstance(payload, dict):
        raise AIServiceError(f"Invalid {collaborator} response structure")

    entries = payload.get("ingredients")
    if not isinstance(entries, list):
        raise AIServiceError(f"Invalid {collaborator} response structure")

    if len(entries) > MAX_INGREDIENTS:
        logger.warning(
            "%s returned too many ingredients count=%d, keeping %d",
            collaborator,
            len(entries),
            TRUNCATED_INGREDIENTS,
        )
        entries = entries[:TRUNCATED_INGREDIENTS]

    ingredients: list[RawIngredient] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name or len(name) >= MAX_INGREDIENT_NAME_LENGTH:
            continue
        ingredients.append(
            RawIngredient(name=name, confidence=_as_confidence(entry.get("confidence")))
        )

    dish_name = payload.get("dish_name")
    recognized = payload.get("dish_recognized", True)
    return ExtractionResult(
        ingredients=ingredients,
        dish_recognized=recognized if isinstance(recognized, bool) else True,
        confidence=_as_confidence(payload.get("confidence")) or 0.0,
        dish_name=dish_name.strip() if isinstance(dish_name, str) and dish_name.strip() else None,
    )
