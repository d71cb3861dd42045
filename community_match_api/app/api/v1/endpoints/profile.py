"""
Endpoints for the caller's own profile.

All routes require a bearer token and act on the member it belongs
to.
"""

import sqlite3

from fastapi import APIRouter, Depends

from community_match_api.app.core.db import get_db
from community_match_api.app.core.security import get_current_user
from community_match_api.app.schemas.common import MessageResponse
from community_match_api.app.schemas.user import AvatarUpdate, CityUpdate, ServicesUpdate, UserRead
from community_match_api.app.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=UserRead)
async def get_profile(
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> UserRead:
    return await UserService.get_profile(conn, current_user["user_id"])


@router.put("/services", response_model=MessageResponse)
async def update_services(
    body: ServicesUpdate,
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    """Replace everything the caller offers and needs.

    This is a full replacement, not a merge: ids missing from the body
    are unlinked.
    """
    await UserService.replace_services(
        conn, current_user["user_id"], body.services_offered, body.services_needed
    )
    return MessageResponse(message="Services updated successfully")


@router.put("/city", response_model=MessageResponse)
async def update_city(
    body: CityUpdate,
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    await UserService.update_city(conn, current_user["user_id"], body.city)
    return MessageResponse(message="City updated successfully")


@router.put("/avatar", response_model=MessageResponse)
async def update_avatar(
    body: AvatarUpdate,
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    await UserService.update_avatar(conn, current_user["user_id"], body.avatar)
    return MessageResponse(message="Avatar updated successfully")


@router.delete("", response_model=MessageResponse)
async def delete_profile(
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    """Delete the caller's account, links, messages and reset codes."""
    await UserService.delete_user(conn, current_user["user_id"])
    return MessageResponse(message="Profile deleted successfully")
