"""
Module 09D - Wallet Submission Routes

GET and POST /api/wallet-submissions.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_config, get_submission_store
from api.errors import INVALID_ADDRESS_MESSAGE, InternalError, InvalidRequestError
from api.models.requests import WalletSubmissionRequest
from api.models.responses import (
    ErrorResponse,
    SubmissionCreatedResponse,
    SubmissionItem,
    SubmissionListResponse,
)
from core.allowlist.address import normalize_address
from core.config.runtime import RuntimeConfig
from core.schemas.errors import ErrorCodes, InvalidAddressError, StorageError
from core.storage.submissions import SubmissionStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["wallet-submissions"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _storage_failure(
    exc: StorageError, config: RuntimeConfig, generic_message: str
) -> InternalError:
    message = exc.message if config.server.expose_storage_errors else generic_message
    return InternalError(message=message, code=ErrorCodes.STORAGE_ERROR)


@router.get(
    "/wallet-submissions",
    response_model=SubmissionListResponse,
    responses=_ERROR_RESPONSES,
)
async def list_wallet_submissions(
    store: SubmissionStore = Depends(get_submission_store),
    config: RuntimeConfig = Depends(get_config),
) -> SubmissionListResponse:
    """All submitted wallets, newest first."""
    try:
        records = await store.list_submissions()
    except StorageError as e:
        logger.exception("Failed to fetch wallet submissions")
        raise _storage_failure(e, config, "Unable to load wallet submissions") from e

    return SubmissionListResponse(
        submissions=[SubmissionItem(**record.to_api()) for record in records]
    )


@router.post(
    "/wallet-submissions",
    response_model=SubmissionCreatedResponse,
    responses=_ERROR_RESPONSES,
)
async def create_wallet_submission(
    body: WalletSubmissionRequest,
    store: SubmissionStore = Depends(get_submission_store),
    config: RuntimeConfig = Depends(get_config),
) -> SubmissionCreatedResponse:
    """
    Record a wallet address.

    Resubmitting an address refreshes its timestamp instead of adding a row.
    """
    try:
        address = normalize_address(body.address)
    except InvalidAddressError as e:
        raise InvalidRequestError(INVALID_ADDRESS_MESSAGE, code=e.code) from e

    try:
        record = await store.upsert(address)
    except StorageError as e:
        logger.exception("Failed to store wallet submission")
        raise _storage_failure(e, config, "Unable to record wallet submission") from e

    return SubmissionCreatedResponse(ok=True, **record.to_api())
