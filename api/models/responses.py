"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "cabal-wallet-api"
    version: str = "v1"


class SubmissionItem(BaseModel):
    """One stored wallet submission."""

    address: str = Field(..., description="Lower-case wallet address")
    submittedAt: str = Field(..., description="ISO-8601 time of the latest submission")


class SubmissionListResponse(BaseModel):
    """Response for GET /api/wallet-submissions."""

    submissions: list[SubmissionItem] = Field(default_factory=list)


class SubmissionCreatedResponse(BaseModel):
    """Response for POST /api/wallet-submissions."""

    ok: bool = True
    address: str
    submittedAt: str


class ErrorResponse(BaseModel):
    """Error response envelope; ``error`` is a human-readable message."""

    ok: bool = False
    error: str
    code: str
