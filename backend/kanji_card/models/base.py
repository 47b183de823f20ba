"""
Strict Base Models for API Request/Response Validation

Request bodies reject unknown fields so frontend/backend mismatches surface
as 422 errors instead of silently dropped data. Response bodies are more
lenient and ignore extra attributes.

Usage:
    class CandidateWord(StrictRequest):
        word: str
        translation: str

    class SetSummary(StrictResponse):
        id: str
        card_count: int
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Features:
        - extra="forbid": Unknown fields raise 422 Unprocessable Entity
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    Features:
        - extra="ignore": Silently ignores extra fields
        - validate_default=True: Validates default values
        - from_attributes=True: Allows building from domain objects
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class ErrorDetail(StrictResponse):
    """
    Standardized error response detail.

    Matches the error format from the error_handling middleware.
    """

    error: str
    message: str
    error_id: str
    details: Optional[dict] = None
    timestamp: datetime
