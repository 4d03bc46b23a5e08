"""API route handlers."""

from api.routes import health, submissions

__all__ = ["health", "submissions"]
