"""
API response models.

Pydantic models for FastAPI endpoint responses and OpenAPI schema
generation. Request bodies are deliberately not modelled: the raw record
goes to the domain validator untouched so its rule ordering decides
which error the caller sees.
"""

from pydantic import BaseModel, Field


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    username: str
    role: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    code: int = Field(..., description="HTTP status code (422 or 500)")
    reason: str = Field(..., description="ValidationError or InternalError")
    message: str
    location: str | None = Field(
        default=None, description="Offending field, absent for internal errors"
    )


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
