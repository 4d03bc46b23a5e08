"""
HTTP Client Module

requests-based HTTP client shared by the submission client and CLI.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
