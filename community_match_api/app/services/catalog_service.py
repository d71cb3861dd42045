"""
Service catalog: the skills and activities members can offer or need.

The catalog is seeded by the first migration.  Administrators may add
and remove entries; removing one drops every offered/needed link that
references it.
"""

import logging
import sqlite3
from typing import Iterable, List

from community_match_api.app.core.db import transaction
from community_match_api.app.core.errors import NotFoundError, ValidationError
from ..schemas.service import ServiceRead

logger = logging.getLogger(__name__)


def ensure_services_exist(cursor: sqlite3.Cursor, service_ids: Iterable[int]) -> None:
    """Raise ``ValidationError`` naming any id missing from the catalog."""
    wanted = set(service_ids)
    if not wanted:
        return
    placeholders = ", ".join("?" for _ in wanted)
    rows = cursor.execute(
        f"SELECT id FROM services WHERE id IN ({placeholders})", tuple(wanted)
    ).fetchall()
    unknown = wanted - {row["id"] for row in rows}
    if unknown:
        raise ValidationError(f"Unknown service id(s): {', '.join(str(i) for i in sorted(unknown))}")


class CatalogService:
    """Read and administer the service catalog."""

    @classmethod
    async def list_services(cls, conn: sqlite3.Connection) -> List[ServiceRead]:
        """Return every service ordered by name."""
        with transaction(conn) as cursor:
            rows = cursor.execute("SELECT id, name FROM services ORDER BY name").fetchall()
        return [ServiceRead(id=row["id"], name=row["name"]) for row in rows]

    @classmethod
    async def create_service(cls, conn: sqlite3.Connection, name: str | None) -> ServiceRead:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Service name is required")
        with transaction(conn, conflict_detail="Service already exists") as cursor:
            cursor.execute("INSERT INTO services (name) VALUES (?)", (name,))
            service_id = cursor.lastrowid
        logger.info("Service %s created: %s", service_id, name)
        return ServiceRead(id=service_id, name=name)

    @classmethod
    async def delete_service(cls, conn: sqlite3.Connection, service_id: int) -> None:
        """Delete a service and the links that reference it."""
        with transaction(conn) as cursor:
            row = cursor.execute("SELECT id FROM services WHERE id = ?", (service_id,)).fetchone()
            if not row:
                raise NotFoundError("Service not found")
            cursor.execute("DELETE FROM user_services_offered WHERE service_id = ?", (service_id,))
            cursor.execute("DELETE FROM user_services_needed WHERE service_id = ?", (service_id,))
            cursor.execute("DELETE FROM services WHERE id = ?", (service_id,))
        logger.info("Service %s deleted", service_id)
