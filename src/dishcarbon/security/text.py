"""Validation and sanitization of the dish-name request body."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from dishcarbon.core.models import Accepted, Rejected, RejectionCode, ValidationOutcome

logger = logging.getLogger(__name__)

DISH_FIELD = "dish"
MAX_BODY_BYTES = 10_000
MAX_BODY_KEYS = 10
MAX_DISH_LENGTH = 200
MAX_REPEATED_RUN = 50

ALLOWED_DISH_PATTERN = re.compile(
    r"[a-zA-Z0-9\s\-.,!?'\"()"
    r"\u00C0-\u017F"  # extended Latin
    r"\u4E00-\u9FFF"  # CJK
    r"\u0600-\u06FF"  # Arabic
    r"\u0900-\u097F"  # Devanagari
    r"]+"
)

# Ordered (pattern, label) pairs; the first hit decides the log label.
MALICIOUS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), label)
    for pattern, label in (
        (r"<script", "script_tag"),
        (r"javascript:", "javascript_uri"),
        (r"onload=", "event_handler"),
        (r"onerror=", "event_handler"),
        (r"SELECT.*FROM", "sql_injection"),
        (r"UNION.*SELECT", "sql_injection"),
        (r"DROP.*TABLE", "sql_injection"),
        (r"INSERT.*INTO", "sql_injection"),
        (r"DELETE.*FROM", "sql_injection"),
        (r"UPDATE.*SET", "sql_injection"),
        (r"exec\s*\(", "code_execution"),
        (r"eval\s*\(", "code_execution"),
        (r"function\s*\(", "code_execution"),
        (r"\.\./", "path_traversal"),
        (r"\.\.\\", "path_traversal"),
        (r"/etc/passwd", "path_traversal"),
        (r"__proto__", "prototype_pollution"),
        (r"prototype", "prototype_pollution"),
        (r"constructor", "prototype_pollution"),
    )
)

REPEATED_CHARACTERS = re.compile(r"(.)\1{%d,}" % MAX_REPEATED_RUN)

MESSAGES = {
    RejectionCode.INVALID_BODY: "Request body must be a valid JSON object",
    RejectionCode.BODY_TOO_LARGE: "Request body is too large",
    RejectionCode.TOO_MANY_KEYS: "Request body has too many properties",
    RejectionCode.UNKNOWN_FIELD: "Request body contains an unsupported property",
    RejectionCode.REQUIRED: "Dish name is required",
    RejectionCode.INVALID_TYPE: "Dish name must be a string",
    RejectionCode.EMPTY: "Dish name cannot be empty",
    RejectionCode.TOO_LONG: f"Dish name cannot exceed {MAX_DISH_LENGTH} characters",
    RejectionCode.MALICIOUS_CONTENT: "Dish name contains potentially malicious content",
    RejectionCode.REPEATED_CHARACTERS: "Dish name contains excessive repeated characters",
    RejectionCode.INVALID_CHARACTERS: "Dish name contains invalid characters",
}


def find_malicious_pattern(value: str) -> str | None:
    """Return the label of the first matching malicious signature, if any."""
    for pattern, label in MALICIOUS_PATTERNS:
        if pattern.search(value):
            return label
    return None


def sanitize_text_input(value: str) -> str:
    """Trim, drop angle brackets and cap the length."""
    return value.strip().replace("<", "").replace(">", "")[:MAX_DISH_LENGTH]


def _serialized_size(body: dict[str, Any]) -> int | None:
    try:
        return len(json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8"))
    except (TypeError, ValueError):
        return None


class TextSecurityValidator:
    """
    Layered checks for ``{"dish": ...}`` bodies.

    Checks run in a fixed order and the first failure is returned as a
    Rejected outcome. Hostile-content signatures are checked before the
    character allow-list so injection attempts are reported as such.
    """

    def validate(self, raw_body: Any) -> ValidationOutcome[dict[str, str]]:
        if not isinstance(raw_body, dict):
            return self._reject(
                RejectionCode.INVALID_BODY, None, body_type=type(raw_body).__name__
            )

        size = _serialized_size(raw_body)
        if size is None:
            return self._reject(RejectionCode.INVALID_BODY, None, body_type="unserializable")
        if size > MAX_BODY_BYTES:
            return self._reject(RejectionCode.BODY_TOO_LARGE, None, size=size)

        if len(raw_body) > MAX_BODY_KEYS:
            return self._reject(RejectionCode.TOO_MANY_KEYS, None, key_count=len(raw_body))

        for key in raw_body:
            if key != DISH_FIELD:
                return self._reject(RejectionCode.UNKNOWN_FIELD, str(key))

        if DISH_FIELD not in raw_body:
            return self._reject(RejectionCode.REQUIRED, DISH_FIELD)

        dish = raw_body[DISH_FIELD]
        if not isinstance(dish, str):
            return self._reject(
                RejectionCode.INVALID_TYPE, DISH_FIELD, value_type=type(dish).__name__
            )

        trimmed = dish.strip()
        if not trimmed:
            return self._reject(RejectionCode.EMPTY, DISH_FIELD)
        if len(trimmed) > MAX_DISH_LENGTH:
            return self._reject(RejectionCode.TOO_LONG, DISH_FIELD, length=len(trimmed))

        label = find_malicious_pattern(dish)
        if label:
            return self._reject(
                RejectionCode.MALICIOUS_CONTENT, DISH_FIELD, pattern=label, dish=dish[:50]
            )

        if REPEATED_CHARACTERS.search(dish):
            return self._reject(RejectionCode.REPEATED_CHARACTERS, DISH_FIELD, dish=dish[:50])

        if not ALLOWED_DISH_PATTERN.fullmatch(dish):
            return self._reject(RejectionCode.INVALID_CHARACTERS, DISH_FIELD, dish=dish[:50])

        return Accepted({DISH_FIELD: sanitize_text_input(dish)})

    def _reject(self, code: RejectionCode, field: str | None, **context: Any) -> Rejected:
        logger.warning("Text validation failed code=%s field=%s %s", code.value, field, context)
        return Rejected(code=code, message=MESSAGES[code], field=field)
