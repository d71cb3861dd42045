"""
Direct message endpoints.

Sending queues an email notification to the recipient after the
message is stored.
"""

import sqlite3
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Path, status

from community_match_api.app.core.db import get_db
from community_match_api.app.core.security import get_current_user
from community_match_api.app.schemas.common import SQLITE_MAX_INTEGER
from community_match_api.app.schemas.message import MessageCreate, MessageRead
from community_match_api.app.services.message_service import MessageService
from community_match_api.app.services.notification_service import NotificationService

router = APIRouter()


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    body: MessageCreate,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageRead:
    message = await MessageService.send_message(conn, current_user["user_id"], body.to_user_id, body.message)
    background_tasks.add_task(NotificationService.notify_new_message, message.id)
    return message


@router.get("", response_model=List[MessageRead])
async def list_messages(
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[MessageRead]:
    """Messages the caller sent or received, newest first."""
    return await MessageService.list_messages(conn, current_user["user_id"])


@router.put("/{message_id}/read", response_model=MessageRead)
async def mark_read(
    message_id: int = Path(..., gt=0, le=SQLITE_MAX_INTEGER),
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageRead:
    return await MessageService.mark_read(conn, current_user["user_id"], message_id)
