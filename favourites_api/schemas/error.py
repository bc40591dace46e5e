"""Error response schemas for consistent error handling."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Types of errors that can occur."""

    VALIDATION_ERROR = "validation_error"
    INVALID_IDENTITY = "invalid_identity"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNKNOWN_ASSET_KIND = "unknown_asset_kind"
    SCHEMA_VIOLATION = "schema_violation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION_ERROR = "authentication_error"
    INTERNAL_ERROR = "internal_error"


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "not_found",
                "message": "Favourite not found",
                "detail": "User 'kostas' has no favourite '3f2b0c1e9d7a4c0f8a61d2b3c4e5f607'",
                "status_code": 404,
                "timestamp": "2025-11-03T10:30:00Z",
                "request_id": "0b6f0f0e-8d0c-4d4a-9f51-2b7b1d2c9e11",
                "path": "/users/kostas/favourites/3f2b0c1e9d7a4c0f8a61d2b3c4e5f607",
                "retry_after": None,
            }
        }
    )

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Additional error details or context")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When error occurred"
    )
    request_id: str | None = Field(None, description="Unique request identifier for tracking")
    path: str | None = Field(None, description="Request path that caused the error")
    retry_after: int | None = Field(
        None, description="Seconds to wait before retrying (for rate limit errors)"
    )


class ValidationErrorDetail(BaseModel):
    """Details for validation errors."""

    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Validation error message")
    value: Any = Field(None, description="Value that failed validation")


class ValidationErrorResponse(ErrorResponse):
    """Extended error response for validation errors."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "schema_violation",
                "message": "Asset failed schema validation",
                "detail": "chart requires non-empty title, data",
                "status_code": 422,
                "timestamp": "2025-11-03T10:30:00Z",
                "request_id": "0b6f0f0e-8d0c-4d4a-9f51-2b7b1d2c9e11",
                "path": "/users/kostas/favourites",
                "errors": [
                    {"field": "asset.title", "message": "Must not be empty", "value": None},
                    {"field": "asset.data", "message": "Must not be empty", "value": None},
                ],
            }
        }
    )

    error_type: ErrorType = Field(default=ErrorType.VALIDATION_ERROR)
    errors: list[ValidationErrorDetail] = Field(
        default_factory=list, description="List of validation errors"
    )
