"""
Service layer for direct messages between members.

Messages are immutable apart from the ``read`` flag, which only the
recipient can set.  Listing returns both directions of every
conversation the caller takes part in, newest first.
"""

import logging
import sqlite3
from typing import List, Optional

from community_match_api.app.core.db import transaction
from community_match_api.app.core.errors import NotFoundError, ValidationError
from ..schemas.message import MessageRead

logger = logging.getLogger(__name__)

_MESSAGE_COLUMNS = "m.id, m.from_user_id, m.to_user_id, m.message, m.read, m.created_at"


def _message_from_row(row: sqlite3.Row, with_parties: bool = False) -> MessageRead:
    message = MessageRead(
        id=row["id"],
        from_user_id=row["from_user_id"],
        to_user_id=row["to_user_id"],
        message=row["message"],
        read=bool(row["read"]),
        created_at=row["created_at"],
    )
    if with_parties:
        message.from_name = row["from_name"]
        message.from_email = row["from_email"]
        message.from_avatar = row["from_avatar"]
        message.to_name = row["to_name"]
        message.to_email = row["to_email"]
        message.to_avatar = row["to_avatar"]
    return message


class MessageService:
    """Send, list and acknowledge direct messages."""

    @classmethod
    async def send_message(
        cls,
        conn: sqlite3.Connection,
        sender_id: int,
        to_user_id: Optional[int],
        body: Optional[str],
    ) -> MessageRead:
        """Store a message from ``sender_id`` to ``to_user_id``.

        The recipient must exist.  Notifying the recipient is left to
        the caller so it can happen after the transaction commits.
        """
        if not to_user_id or not body:
            raise ValidationError("Recipient and message are required")
        with transaction(conn) as cursor:
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (to_user_id,)).fetchone():
                raise NotFoundError("Recipient not found")
            cursor.execute(
                "INSERT INTO messages (from_user_id, to_user_id, message) VALUES (?, ?, ?)",
                (sender_id, to_user_id, body),
            )
            row = cursor.execute(
                f"SELECT {_MESSAGE_COLUMNS} FROM messages m WHERE m.id = ?", (cursor.lastrowid,)
            ).fetchone()
        logger.info("User %s sent message %s to user %s", sender_id, row["id"], to_user_id)
        return _message_from_row(row)

    @classmethod
    async def list_messages(cls, conn: sqlite3.Connection, user_id: int) -> List[MessageRead]:
        """Every message sent or received by ``user_id``, newest first."""
        with transaction(conn) as cursor:
            rows = cursor.execute(
                f"""
                SELECT {_MESSAGE_COLUMNS},
                       u_from.name AS from_name,
                       u_from.email AS from_email,
                       u_from.avatar AS from_avatar,
                       u_to.name AS to_name,
                       u_to.email AS to_email,
                       u_to.avatar AS to_avatar
                FROM messages m
                JOIN users u_from ON m.from_user_id = u_from.id
                JOIN users u_to ON m.to_user_id = u_to.id
                WHERE m.from_user_id = ? OR m.to_user_id = ?
                ORDER BY m.created_at DESC, m.id DESC
                """,
                (user_id, user_id),
            ).fetchall()
        return [_message_from_row(row, with_parties=True) for row in rows]

    @classmethod
    async def mark_read(cls, conn: sqlite3.Connection, user_id: int, message_id: int) -> MessageRead:
        """Set the read flag on a message addressed to ``user_id``.

        Messages sent by the caller, or not involving them at all, are
        reported as not found.
        """
        with transaction(conn) as cursor:
            cursor.execute(
                "UPDATE messages SET read = 1 WHERE id = ? AND to_user_id = ?", (message_id, user_id)
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Message not found")
            row = cursor.execute(
                f"SELECT {_MESSAGE_COLUMNS} FROM messages m WHERE m.id = ?", (message_id,)
            ).fetchone()
        return _message_from_row(row)
