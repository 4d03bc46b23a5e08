"""
Client for the wallet submission API.

Speaks the same protocol as the signup form: POST the address with a
source tag and client timestamp, and turn failures into a message a user
can read.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.config.runtime import ClientConfig
from core.http.client import HttpClient, HttpError, HttpResponse
from core.schemas.submissions import WalletSubmission
from mintflow.errors import SubmissionError


logger = logging.getLogger(__name__)

SUBMISSIONS_PATH = "/api/wallet-submissions"
DEFAULT_SUBMIT_ERROR = "Unable to submit wallet address right now. Please try again shortly."


def submission_error_message(response: HttpResponse) -> str:
    """
    Message for a failed response.

    JSON bodies yield their ``error`` string; other bodies are used as-is
    unless they look like an HTML error page.
    """
    content_type = response.headers.get("content-type") or response.headers.get("Content-Type") or ""
    try:
        if "application/json" in content_type:
            data = response.json()
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                return data["error"]
        else:
            text = response.text.strip()
            if text and not text.startswith("<"):
                return text
    except ValueError:
        pass
    return DEFAULT_SUBMIT_ERROR


class SubmissionClient:
    """
    Usage:
        client = SubmissionClient(HttpClient(), ClientConfig(api_base_url="https://..."))
        record = client.submit("0xabc...")
    """

    def __init__(self, http: HttpClient, config: Optional[ClientConfig] = None) -> None:
        self.http = http
        self.config = config or ClientConfig()

    @property
    def endpoint(self) -> str:
        base = (self.config.api_base_url or "").rstrip("/")
        return f"{base}{SUBMISSIONS_PATH}" if base else SUBMISSIONS_PATH

    def _checked(self, response: HttpResponse) -> Any:
        if not response.ok:
            message = submission_error_message(response)
            logger.error("Wallet submission API returned %d: %s", response.status_code, message)
            raise SubmissionError(message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise SubmissionError(DEFAULT_SUBMIT_ERROR, status_code=response.status_code) from e

    def submit(self, address: str, submitted_at: Optional[datetime] = None) -> WalletSubmission:
        """
        Submit an address. The server normalizes and validates it.

        Raises:
            SubmissionError: On transport failure or a non-2xx response
        """
        submitted_at = submitted_at or datetime.now(timezone.utc)
        payload = {
            "address": address,
            "source": self.config.submission_source,
            "submittedAt": submitted_at.isoformat().replace("+00:00", "Z"),
        }
        try:
            response = self.http.post(self.endpoint, json=payload)
        except HttpError as e:
            raise SubmissionError(DEFAULT_SUBMIT_ERROR) from e

        data = self._checked(response)
        return WalletSubmission(address=data["address"], submitted_at=data["submittedAt"])

    def list(self) -> list[WalletSubmission]:
        """All stored submissions, newest first."""
        try:
            response = self.http.get(self.endpoint)
        except HttpError as e:
            raise SubmissionError(DEFAULT_SUBMIT_ERROR) from e

        data = self._checked(response)
        return [
            WalletSubmission(address=item["address"], submitted_at=item["submittedAt"])
            for item in data.get("submissions", [])
        ]


__all__ = [
    "SUBMISSIONS_PATH",
    "DEFAULT_SUBMIT_ERROR",
    "submission_error_message",
    "SubmissionClient",
]
