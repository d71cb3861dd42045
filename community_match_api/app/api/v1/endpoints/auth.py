"""
Registration and login.

Both return the member's profile with resolved service lists and a
bearer token valid for ``ACCESS_TOKEN_EXPIRE_MINUTES``.  A welcome
email is queued after a successful registration; failing to send it
never affects the response.
"""

import sqlite3

from fastapi import APIRouter, BackgroundTasks, Depends, status

from community_match_api.app.core.db import get_db
from community_match_api.app.core.security import create_user_token
from community_match_api.app.schemas.user import AuthResponse, UserLogin, UserRegister
from community_match_api.app.services.notification_service import NotificationService
from community_match_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    background_tasks: BackgroundTasks,
    conn: sqlite3.Connection = Depends(get_db),
) -> AuthResponse:
    """Register a member.

    Answers 400 when name, email, password or city is missing or a
    service id is unknown, and 409 when the email is already taken.
    """
    user = await UserService.register(conn, data)
    background_tasks.add_task(
        NotificationService.send_welcome,
        user.email,
        user.name,
        user.city or "",
        len(user.services_offered),
        len(user.services_needed),
    )
    return AuthResponse(user=user, token=create_user_token(user.id, user.email))


@router.post("/login", response_model=AuthResponse)
async def login(data: UserLogin, conn: sqlite3.Connection = Depends(get_db)) -> AuthResponse:
    user = await UserService.authenticate(conn, data.email, data.password)
    return AuthResponse(user=user, token=create_user_token(user.id, user.email))
