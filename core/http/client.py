"""
HTTP Client

Provides a small requests-based HTTP client used by the submission client
and CLI.
"""

from __future__ import annotations

import json as _json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from core.config.runtime import HttpConfig


logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON."""
        return _json.loads(self.content)

    def raise_for_status(self) -> None:
        """Raise exception if status is not 2xx."""
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """HTTP request error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    Thin wrapper over a requests session.

    Usage:
        client = HttpClient(timeout=10)

        response = client.get("https://api.example.com/data")
        if response.ok:
            data = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            default_headers: Headers to include in all requests
            session: Existing session to use instead of creating one
        """
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._session = session

    @classmethod
    def from_config(cls, config: "HttpConfig") -> "HttpClient":
        return cls(
            timeout=config.timeout,
            default_headers={"User-Agent": config.user_agent},
        )

    def _get_session(self) -> requests.Session:
        """Lazy-create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            HttpError: On connection failures and timeouts. Non-2xx
                responses are returned, not raised.
        """
        session = self._get_session()
        effective_timeout = timeout or self.timeout

        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        try:
            response = session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json,
                timeout=effective_timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise HttpError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Make a GET request."""
        return self.request(
            "GET", url,
            headers=headers,
            params=params,
            timeout=timeout,
        )

    def post(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Make a POST request."""
        return self.request(
            "POST", url,
            headers=headers,
            params=params,
            json=json,
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
