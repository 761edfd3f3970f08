"""dishcarbon: carbon footprint estimation for dishes from ingredient lists."""

__version__ = "0.1.0"

# Core exports
from dishcarbon.core.models import (
    Accepted,
    CarbonEstimate,
    EstimateMetadata,
    EstimateSource,
    ExtractionResult,
    MatchTier,
    RawIngredient,
    Rejected,
    RejectionCode,
    ResolvedIngredient,
    UploadedFile,
)
from dishcarbon.core.interfaces import IngredientExtractor, VisionAnalyzer
from dishcarbon.core.footprints import CarbonDatabase, load_default_database
from dishcarbon.core.normalize import NameNormalizer, normalize_ingredient_name
from dishcarbon.core.matcher import FootprintMatch, FootprintMatcher
from dishcarbon.core.aggregate import FootprintAggregator, compute_estimate
from dishcarbon.core.extraction import parse_extraction_payload
from dishcarbon.core.pipeline import EstimatePipeline, PipelineResult, validate_file, validate_text
from dishcarbon.security import FileSecurityValidator, TextSecurityValidator
from dishcarbon.errors import AIServiceError, DishCarbonError, FootprintTableError

__all__ = [
    "Accepted",
    "CarbonEstimate",
    "EstimateMetadata",
    "EstimateSource",
    "ExtractionResult",
    "MatchTier",
    "RawIngredient",
    "Rejected",
    "RejectionCode",
    "ResolvedIngredient",
    "UploadedFile",
    "IngredientExtractor",
    "VisionAnalyzer",
    "CarbonDatabase",
    "load_default_database",
    "NameNormalizer",
    "normalize_ingredient_name",
    "FootprintMatch",
    "FootprintMatcher",
    "FootprintAggregator",
    "compute_estimate",
    "parse_extraction_payload",
    "EstimatePipeline",
    "PipelineResult",
    "validate_file",
    "validate_text",
    "FileSecurityValidator",
    "TextSecurityValidator",
    "AIServiceError",
    "DishCarbonError",
    "FootprintTableError",
]
