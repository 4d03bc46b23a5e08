"""
Module 09D - API Error Handling

Standardized error handling for the API.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse
from core.schemas.errors import ErrorCodes


logger = logging.getLogger(__name__)

INVALID_ADDRESS_MESSAGE = "A valid wallet address is required"


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(ok=False, error=self.message, code=self.code)


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, code: str = ErrorCodes.INVALID_REQUEST):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = ErrorCodes.INTERNAL_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=500,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Malformed or non-object bodies are client errors (400).

    The only field the API reads is ``address``, so the message is the
    address message regardless of which part failed.
    """
    logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            ok=False,
            error=INVALID_ADDRESS_MESSAGE,
            code=ErrorCodes.INVALID_REQUEST,
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error="An unexpected error occurred",
            code=ErrorCodes.INTERNAL_ERROR,
        ).model_dump(),
    )
