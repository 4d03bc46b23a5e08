"""
Module 01 - Schemas
File: submissions.py

Purpose: Wallet submission record as stored in ``wallet_submissions``.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WalletSubmission(BaseModel):
    """A normalized wallet address and the time it was last submitted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(
        ...,
        description="Lower-case 0x-prefixed address",
        pattern=r"^0x[a-f0-9]{40}$",
    )
    submitted_at: datetime = Field(
        ...,
        description="Time of the latest submission (UTC)",
    )

    @field_validator("submitted_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; the column is stored as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_api(self) -> dict[str, Any]:
        """Wire shape used by the HTTP endpoint."""
        return {
            "address": self.address,
            "submittedAt": self.submitted_at.isoformat(),
        }


__all__ = ["WalletSubmission"]
