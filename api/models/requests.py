"""
Module 09D - API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WalletSubmissionRequest(BaseModel):
    """
    Request body for POST /api/wallet-submissions.

    The browser form also sends ``source`` and ``submittedAt``; they are
    accepted and ignored. The address is validated by the route so that
    every malformed value gets the same client error.
    """

    model_config = ConfigDict(extra="allow")

    address: Any = Field(
        default=None,
        description="Wallet address, 0x-prefixed, 40 hex digits (any case)",
    )
