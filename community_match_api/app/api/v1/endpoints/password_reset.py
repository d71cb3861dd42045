"""
Password reset endpoints.

``/request`` emails a six‑digit code valid for
``RESET_CODE_TTL_MINUTES``.  When the email cannot be sent the code is
included in the response as ``resetCode``.  ``/confirm`` exchanges a
valid code for a new password.
"""

import sqlite3

from fastapi import APIRouter, Depends

from community_match_api.app.core.db import get_db
from community_match_api.app.schemas.common import MessageResponse
from community_match_api.app.schemas.password_reset import (
    PasswordResetConfirm,
    PasswordResetIssued,
    PasswordResetRequest,
)
from community_match_api.app.services.password_reset_service import PasswordResetService

router = APIRouter()


@router.post("/request", response_model=PasswordResetIssued, response_model_exclude_none=True)
async def request_reset(body: PasswordResetRequest, conn: sqlite3.Connection = Depends(get_db)) -> PasswordResetIssued:
    return await PasswordResetService.request_reset(conn, body.email)


@router.post("/confirm", response_model=MessageResponse)
async def confirm_reset(body: PasswordResetConfirm, conn: sqlite3.Connection = Depends(get_db)) -> MessageResponse:
    await PasswordResetService.confirm_reset(conn, body)
    return MessageResponse(message="Password reset successfully")
