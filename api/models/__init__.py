"""API request and response models."""

from api.models.requests import WalletSubmissionRequest
from api.models.responses import (
    ErrorResponse,
    HealthResponse,
    SubmissionCreatedResponse,
    SubmissionItem,
    SubmissionListResponse,
)

__all__ = [
    "WalletSubmissionRequest",
    "HealthResponse",
    "SubmissionItem",
    "SubmissionListResponse",
    "SubmissionCreatedResponse",
    "ErrorResponse",
]
