"""
Matching engine: who in my city can help with what I need?

For a requesting member U the result is every other member V with the
same city who offers at least one service U needs.  Each V is listed
once and carries only the services from that overlap, not everything
V offers.  There is no scoring and no pagination.

The lookup is two queries: a ``DISTINCT`` join that finds the
candidates, then one bulk load of the overlapping offered links for
all of them, grouped in memory.
"""

import logging
import sqlite3
from collections import defaultdict
from typing import Dict, List

from community_match_api.app.core.db import transaction
from community_match_api.app.core.errors import NotFoundError
from ..schemas.service import ServiceRead
from ..schemas.user import MatchRead

logger = logging.getLogger(__name__)


def _placeholders(values: List[int]) -> str:
    return ", ".join("?" for _ in values)


class MatchingService:
    """Read‑only city/service matching."""

    @classmethod
    async def search(cls, conn: sqlite3.Connection, user_id: int) -> List[MatchRead]:
        """Return the matches for ``user_id``.

        An empty needed set yields an empty result.  A member without a
        city simply matches nobody.  Raises ``NotFoundError`` if the
        requesting member does not exist.
        """
        with transaction(conn) as cursor:
            user = cursor.execute("SELECT id, city FROM users WHERE id = ?", (user_id,)).fetchone()
            if not user:
                raise NotFoundError("User not found")

            needed_ids = [
                row["service_id"]
                for row in cursor.execute(
                    "SELECT service_id FROM user_services_needed WHERE user_id = ?", (user_id,)
                ).fetchall()
            ]
            if not needed_ids:
                return []

            candidates = cursor.execute(
                f"""
                SELECT DISTINCT u.id, u.name, u.email, u.city, u.bio, u.avatar
                FROM users u
                JOIN user_services_offered uso ON u.id = uso.user_id
                WHERE u.city = ?
                  AND u.id != ?
                  AND uso.service_id IN ({_placeholders(needed_ids)})
                ORDER BY u.id
                """,
                (user["city"], user_id, *needed_ids),
            ).fetchall()
            if not candidates:
                return []

            candidate_ids = [row["id"] for row in candidates]
            overlap: Dict[int, List[ServiceRead]] = defaultdict(list)
            for row in cursor.execute(
                f"""
                SELECT uso.user_id, s.id, s.name
                FROM user_services_offered uso
                JOIN services s ON s.id = uso.service_id
                WHERE uso.user_id IN ({_placeholders(candidate_ids)})
                  AND uso.service_id IN ({_placeholders(needed_ids)})
                ORDER BY s.name
                """,
                (*candidate_ids, *needed_ids),
            ).fetchall():
                overlap[row["user_id"]].append(ServiceRead(id=row["id"], name=row["name"]))

        logger.debug("User %s matched %d candidates", user_id, len(candidates))
        return [
            MatchRead(
                id=row["id"],
                name=row["name"],
                email=row["email"],
                city=row["city"],
                bio=row["bio"],
                avatar=row["avatar"],
                services_offered=overlap[row["id"]],
            )
            for row in candidates
        ]
