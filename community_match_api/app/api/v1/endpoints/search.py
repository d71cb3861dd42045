"""
Search endpoint: same‑city members offering what the caller needs.
"""

import sqlite3
from typing import List

from fastapi import APIRouter, Depends

from community_match_api.app.core.db import get_db
from community_match_api.app.core.security import get_current_user
from community_match_api.app.schemas.user import MatchRead
from community_match_api.app.services.matching_service import MatchingService

router = APIRouter()


@router.get("/search", response_model=List[MatchRead])
async def search(
    current_user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[MatchRead]:
    """Return matching members with the overlapping services only.

    An empty list means either no matches or that the caller needs no
    services.
    """
    return await MatchingService.search(conn, current_user["user_id"])
