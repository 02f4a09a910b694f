"""
RouteDemo: Pydantic Response Schemas
====================================

What:  Pydantic models for the JSON bodies the services return.
How:   FastAPI serializes handler results through these models and
       lists them in the generated OpenAPI document.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    """
    What:  Body of the ping routes.
    Who:   Returned by GET /ping ("pong") and GET /pingping ("pongpong").
    """
    message: str = Field(description="Fixed reply text")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error envelope for every handled error.

    Example:
        {
            "error": "validation_error",
            "message": "Multipart field 'file' is missing",
            "details": {"field": "file", "reason": "missing"},
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
