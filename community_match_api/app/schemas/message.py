"""
Pydantic models for direct messages between members.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .common import SQLITE_MAX_INTEGER


class MessageCreate(BaseModel):
    to_user_id: Optional[int] = Field(None, alias="toUserId", gt=0, le=SQLITE_MAX_INTEGER, examples=[2])
    message: Optional[str] = Field(None, examples=["Ahoj, ráda ti pohlídám děti."])

    model_config = {"populate_by_name": True}


class MessageRead(BaseModel):
    """A stored message.

    The sender/recipient name, email and avatar fields are filled in
    when listing a conversation and left empty on the message returned
    right after sending.
    """

    id: int
    from_user_id: int
    to_user_id: int
    message: str
    read: bool = False
    created_at: Optional[str] = None
    from_name: Optional[str] = None
    from_email: Optional[str] = None
    from_avatar: Optional[str] = None
    to_name: Optional[str] = None
    to_email: Optional[str] = None
    to_avatar: Optional[str] = None
