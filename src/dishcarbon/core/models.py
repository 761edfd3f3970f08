"""Core immutable data models and validation outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class EstimateSource(str, Enum):
    """Entry point an estimate was produced from."""

    TEXT = "text"
    IMAGE = "image"


class MatchTier(str, Enum):
    """Which lookup rule resolved an ingredient."""

    EXACT = "exact"
    SUBSTRING = "substring"
    FALLBACK = "fallback"


class RejectionCode(str, Enum):
    """Stable machine-readable reasons for rejecting untrusted input."""

    INVALID_BODY = "invalid_body"
    BODY_TOO_LARGE = "body_too_large"
    TOO_MANY_KEYS = "too_many_keys"
    UNKNOWN_FIELD = "unknown_field"
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    EMPTY = "empty"
    TOO_LONG = "too_long"
    INVALID_CHARACTERS = "invalid_characters"
    MALICIOUS_CONTENT = "malicious_content"
    REPEATED_CHARACTERS = "repeated_characters"

    MISSING_FILE = "missing_file"
    INVALID_MIME_TYPE = "invalid_mime_type"
    FILE_TOO_LARGE = "file_too_large"
    EMPTY_FILE = "empty_file"
    FILENAME_TOO_LONG = "filename_too_long"
    BLOCKED_EXTENSION = "blocked_extension"
    FILE_TOO_SMALL = "file_too_small"
    HEADER_MISMATCH = "header_mismatch"


@dataclass(frozen=True)
class RawIngredient:
    """
    Ingredient as reported by an AI collaborator.

    Untrusted: the name may be empty, duplicated or overlong.
    """

    name: str
    confidence: Optional[float] = None
    """Collaborator confidence 0-1, or None when it did not report one."""


@dataclass(frozen=True)
class ResolvedIngredient:
    """One line item of a carbon estimate."""

    name: str
    """Original display form of the ingredient name."""

    carbon_kg: float
    """Table value for the matched key, rounded to 2 decimals."""

    confidence: float
    """Blended confidence 0-1, rounded to 2 decimals."""


@dataclass(frozen=True)
class EstimateMetadata:
    source: EstimateSource
    processing_time_ms: Optional[int] = None


@dataclass(frozen=True)
class CarbonEstimate:
    """
    Full carbon estimate for a dish.

    estimated_carbon_kg is always the sum of the rounded line items so the
    total can be audited against the ingredient list.
    """

    dish: str
    estimated_carbon_kg: float
    ingredients: list[ResolvedIngredient] = field(default_factory=list)
    metadata: EstimateMetadata = field(
        default_factory=lambda: EstimateMetadata(source=EstimateSource.TEXT)
    )


@dataclass(frozen=True)
class UploadedFile:
    """Decoded multipart file descriptor handed over by the request layer."""

    buffer: bytes
    mimetype: str
    size: int
    originalname: Optional[str] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Typed output of the text or vision collaborator."""

    ingredients: list[RawIngredient] = field(default_factory=list)
    dish_recognized: bool = True
    confidence: float = 0.0
    dish_name: Optional[str] = None
    """Only set by vision analysis."""


@dataclass(frozen=True)
class Accepted(Generic[T]):
    """Input passed every check; value is the sanitized form."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Input failed a check. The message is safe to show to end users."""

    code: RejectionCode
    message: str
    field: Optional[str] = None

    category = "VALIDATION_ERROR"
    status_code = 400

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category,
            "field": self.field,
            "message": self.message,
        }


ValidationOutcome = Union[Accepted[T], Rejected]
