"""Pipeline orchestration: validate -> extract -> aggregate, with injected stages."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Optional

from dishcarbon.config import get_settings
from dishcarbon.core.aggregate import FootprintAggregator
from dishcarbon.core.footprints import load_default_database
from dishcarbon.core.interfaces import (
    FileValidator,
    IngredientExtractor,
    TextValidator,
    VisionAnalyzer,
)
from dishcarbon.core.models import (
    CarbonEstimate,
    EstimateSource,
    ExtractionResult,
    Rejected,
    UploadedFile,
    ValidationOutcome,
)
from dishcarbon.security.files import FileSecurityValidator
from dishcarbon.security.text import DISH_FIELD, TextSecurityValidator

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 0.1
UNKNOWN_IMAGE_DISH = "Unknown dish from image"


@dataclass
class PipelineResult:
    outcome: ValidationOutcome[Any]
    estimate: CarbonEstimate | None = None
    extraction: ExtractionResult | None = None

    @property
    def ok(self) -> bool:
        return self.estimate is not None

    @property
    def rejection(self) -> Rejected | None:
        return self.outcome if isinstance(self.outcome, Rejected) else None


def _is_low_confidence(confidence: float) -> bool:
    return not math.isfinite(confidence) or confidence < LOW_CONFIDENCE_THRESHOLD


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


class EstimatePipeline:
    """
    Orchestrates both entry points of the estimator.

    Text: validate body -> extract ingredients -> aggregate.
    Image: validate upload -> analyze image -> aggregate.

    A rejected input never reaches a collaborator. All stages are injected,
    so implementations can be swapped at runtime.
    """

    def __init__(
        self,
        extractor: Optional[IngredientExtractor] = None,
        vision: Optional[VisionAnalyzer] = None,
        aggregator: Optional[FootprintAggregator] = None,
        text_validator: Optional[TextValidator] = None,
        file_validator: Optional[FileValidator] = None,
    ) -> None:
        self.extractor = extractor
        self.vision = vision
        self.aggregator = aggregator or FootprintAggregator(
            load_default_database(get_settings().footprint_table)
        )
        self.text_validator = text_validator or TextSecurityValidator()
        self.file_validator = file_validator or FileSecurityValidator(
            get_settings().max_file_size_bytes
        )

    def estimate_text(self, raw_body: Any) -> PipelineResult:
        """Estimate from a raw ``{"dish": ...}`` request body."""
        started = time.perf_counter()
        outcome = self.text_validator.validate(raw_body)
        if isinstance(outcome, Rejected):
            return PipelineResult(outcome=outcome)
        if self.extractor is None:
            raise RuntimeError("EstimatePipeline has no ingredient extractor configured")

        dish = outcome.value[DISH_FIELD]
        logger.info("Processing text estimation request dish=%r", dish)
        extraction = self.extractor.extract(dish)
        if not extraction.dish_recognized or _is_low_confidence(extraction.confidence):
            logger.warning(
                "Dish not recognized or low confidence dish=%r recognized=%s confidence=%.2f",
                dish,
                extraction.dish_recognized,
                extraction.confidence,
            )

        estimate = self.aggregator.aggregate(
            dish, extraction.ingredients, EstimateSource.TEXT, _elapsed_ms(started)
        )
        return PipelineResult(outcome=outcome, estimate=estimate, extraction=extraction)

    def estimate_image(self, file: UploadedFile | None) -> PipelineResult:
        """Estimate from an uploaded image descriptor."""
        started = time.perf_counter()
        outcome = self.file_validator.validate(file)
        if isinstance(outcome, Rejected) or file is None:
            return PipelineResult(outcome=outcome)
        if self.vision is None:
            raise RuntimeError("EstimatePipeline has no vision analyzer configured")

        logger.info(
            "Processing image estimation request size=%d mimetype=%s",
            len(file.buffer),
            file.mimetype,
        )
        extraction = self.vision.analyze(file.buffer, file.mimetype)
        if _is_low_confidence(extraction.confidence):
            logger.warning(
                "Low confidence in image analysis confidence=%.2f dish=%r",
                extraction.confidence,
                extraction.dish_name,
            )

        dish = extraction.dish_name or UNKNOWN_IMAGE_DISH
        estimate = self.aggregator.aggregate(
            dish, extraction.ingredients, EstimateSource.IMAGE, _elapsed_ms(started)
        )
        return PipelineResult(outcome=outcome, estimate=estimate, extraction=extraction)


def validate_text(raw_body: Any) -> ValidationOutcome[dict[str, str]]:
    """Validate a raw dish request body with the default rules."""
    return TextSecurityValidator().validate(raw_body)


def validate_file(
    file: UploadedFile | None, max_file_size_bytes: int | None = None
) -> ValidationOutcome[None]:
    """Validate an uploaded image; size limit defaults to the configured one."""
    if max_file_size_bytes is None:
        max_file_size_bytes = get_settings().max_file_size_bytes
    return FileSecurityValidator(max_file_size_bytes).validate(file)
