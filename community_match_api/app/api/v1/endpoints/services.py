"""
Service catalog endpoints.

Listing is public.  Adding and removing services requires the static
administrator token (``ADMIN_TOKEN``).
"""

import sqlite3
from typing import List

from fastapi import APIRouter, Depends, Path, status

from community_match_api.app.core.db import get_db
from community_match_api.app.core.security import require_admin
from community_match_api.app.schemas.common import SQLITE_MAX_INTEGER, MessageResponse
from community_match_api.app.schemas.service import ServiceCreate, ServiceRead
from community_match_api.app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=List[ServiceRead])
async def list_services(conn: sqlite3.Connection = Depends(get_db)) -> List[ServiceRead]:
    """Return the whole catalog ordered by name."""
    return await CatalogService.list_services(conn)


@router.post(
    "",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_service(body: ServiceCreate, conn: sqlite3.Connection = Depends(get_db)) -> ServiceRead:
    """Add a service (admin only).  Duplicate names answer 409."""
    return await CatalogService.create_service(conn, body.name)


@router.delete("/{service_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_service(
    service_id: int = Path(..., gt=0, le=SQLITE_MAX_INTEGER),
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    """Remove a service and every offered/needed link to it (admin only)."""
    await CatalogService.delete_service(conn, service_id)
    return MessageResponse(message="Service deleted successfully")
