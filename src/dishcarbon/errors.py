"""Exception classes for dishcarbon.

Input validation never raises; validators return a ``Rejected`` outcome.
These exceptions cover broken configuration and unusable collaborator output.
"""

from typing import Any


class DishCarbonError(Exception):
    """Base exception for dishcarbon errors."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class FootprintTableError(DishCarbonError, ValueError):
    """The carbon footprint table is missing, malformed or lacks the sentinel."""

    code = "FOOTPRINT_TABLE_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=500, details=details)


class AIServiceError(DishCarbonError):
    """An AI collaborator returned output that cannot be used."""

    code = "AI_SERVICE_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=503, details=details)
