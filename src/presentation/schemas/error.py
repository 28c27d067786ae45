"""Pydantic schema for API error responses."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["ADJUSTMENT_BUDGET_EXCEEDED"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["New amount 900 exceeds the maximum allowed 700"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Values needed to correct the request, when available",
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "ADJUSTMENT_BUDGET_EXCEEDED",
                    "message": "New amount 900 exceeds the maximum allowed 700",
                    "details": {"new_amount": 900, "max_allowed_amount": 700},
                    "request_id": "abc123",
                }
            ]
        }
    }
