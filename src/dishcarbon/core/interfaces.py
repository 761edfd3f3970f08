"""Protocol definitions for the AI collaborators and pipeline stages."""

from typing import Any, Protocol, runtime_checkable

from dishcarbon.core.models import ExtractionResult, UploadedFile, ValidationOutcome


@runtime_checkable
class IngredientExtractor(Protocol):
    """
    Text collaborator: lists the likely ingredients of a named dish.

    Timeouts and retries are the collaborator's own concern.
    """

    def extract(self, dish: str) -> ExtractionResult:
        """
        Extract ingredients for a sanitized dish name.

        Args:
            dish: Dish name that already passed text validation

        Returns:
            ExtractionResult with ingredients and dish recognition flags

        Raises:
            AIServiceError: If the collaborator output is unusable
        """
        ...


@runtime_checkable
class VisionAnalyzer(Protocol):
    """Vision collaborator: identifies a dish and its ingredients in an image."""

    def analyze(self, buffer: bytes, mimetype: str) -> ExtractionResult:
        """
        Analyze a validated image.

        Args:
            buffer: Raw image bytes (signature already verified)
            mimetype: Declared image type

        Returns:
            ExtractionResult, optionally carrying the recognized dish_name

        Raises:
            AIServiceError: If the collaborator output is unusable
        """
        ...


@runtime_checkable
class TextValidator(Protocol):
    def validate(self, raw_body: Any) -> ValidationOutcome[dict[str, str]]: ...


@runtime_checkable
class FileValidator(Protocol):
    def validate(self, file: UploadedFile | None) -> ValidationOutcome[None]: ...
