"""
Password reset by emailed six‑digit code.

A request stores a new code for the member that expires
``settings.reset_code_ttl_minutes`` after issue.  Several outstanding
codes per member are allowed; confirmation picks the most recent
unused, unexpired request whose code matches exactly, sets the new
password and marks that request used, so every code works at most
once.

The code is emailed right away.  If that fails (or email is not
configured) the code is returned to the caller instead.
"""

import logging
import secrets
import sqlite3
from datetime import datetime, timedelta

import anyio

from community_match_api.app.core.config import settings
from community_match_api.app.core.db import format_timestamp, transaction, utcnow
from community_match_api.app.core.errors import NotFoundError, ValidationError
from community_match_api.app.core.security import hash_password
from ..schemas.password_reset import PasswordResetConfirm, PasswordResetIssued
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _utcnow() -> datetime:
    return utcnow()


def generate_reset_code() -> str:
    """Uniformly random code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


class PasswordResetService:
    """Issue and redeem password reset codes."""

    @classmethod
    async def request_reset(cls, conn: sqlite3.Connection, email: str | None) -> PasswordResetIssued:
        if not email:
            raise ValidationError("Email is required")
        now = _utcnow()
        code = generate_reset_code()
        with transaction(conn) as cursor:
            user = cursor.execute("SELECT id, name FROM users WHERE email = ?", (email,)).fetchone()
            if not user:
                raise NotFoundError("Email not found")
            cursor.execute(
                "INSERT INTO password_resets (user_id, reset_code, expires_at, created_at) VALUES (?, ?, ?, ?)",
                (
                    user["id"],
                    code,
                    format_timestamp(now + timedelta(minutes=settings.reset_code_ttl_minutes)),
                    format_timestamp(now),
                ),
            )
        logger.info("Issued password reset code for user %s", user["id"])

        # The email API call blocks; keep it off the event loop.
        sent = await anyio.to_thread.run_sync(NotificationService.send_reset_code, email, user["name"], code)
        if sent:
            return PasswordResetIssued(message="Reset code has been sent to your email", email=email)
        return PasswordResetIssued(message="Reset code generated", email=email, reset_code=code)

    @classmethod
    async def confirm_reset(cls, conn: sqlite3.Connection, data: PasswordResetConfirm) -> None:
        """Set a new password using a valid reset code.

        Raises ``ValidationError`` for missing fields, a password shorter
        than six characters or an invalid/expired/used code, and
        ``NotFoundError`` for an unknown email.
        """
        if not (data.email and data.reset_code and data.new_password):
            raise ValidationError("Email, reset code, and new password are required")
        if len(data.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        with transaction(conn) as cursor:
            user = cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone()
            if not user:
                raise NotFoundError("Email not found")
            reset = cursor.execute(
                """
                SELECT id FROM password_resets
                WHERE user_id = ? AND reset_code = ? AND used = 0 AND expires_at > ?
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """,
                (user["id"], data.reset_code, format_timestamp(_utcnow())),
            ).fetchone()
            if not reset:
                raise ValidationError("Invalid or expired reset code")
            cursor.execute(
                "UPDATE users SET password_hash = ? WHERE id = ?",
                (hash_password(data.new_password), user["id"]),
            )
            cursor.execute("UPDATE password_resets SET used = 1 WHERE id = ?", (reset["id"],))
        logger.info("Password reset for user %s", user["id"])
