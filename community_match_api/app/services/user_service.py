"""
Business logic for member accounts and profiles.

Covers registration, login, profile reads and updates, the full
replacement of a member's offered/needed services and account
deletion.  Every operation runs inside ``core.db.transaction`` so the
user row and its service links are always written together.
"""

import logging
import sqlite3
from typing import Dict, Iterable, List, Optional

from community_match_api.app.core.db import transaction
from community_match_api.app.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from community_match_api.app.core.security import hash_password, verify_password
from ..schemas.service import ServiceRead
from ..schemas.user import UserRead, UserRegister
from .catalog_service import ensure_services_exist

logger = logging.getLogger(__name__)

OFFERED = "user_services_offered"
NEEDED = "user_services_needed"

DEFAULT_AVATAR = "avatar1"


def _dedupe(service_ids: Optional[Iterable[int]]) -> List[int]:
    return list(dict.fromkeys(service_ids or []))


def _insert_links(cursor: sqlite3.Cursor, table: str, user_id: int, service_ids: List[int]) -> None:
    cursor.executemany(
        f"INSERT INTO {table} (user_id, service_id) VALUES (?, ?)",
        [(user_id, service_id) for service_id in service_ids],
    )


def _linked_services(cursor: sqlite3.Cursor, table: str, user_id: int) -> List[ServiceRead]:
    rows = cursor.execute(
        f"SELECT s.id, s.name FROM services s JOIN {table} l ON s.id = l.service_id "
        "WHERE l.user_id = ? ORDER BY s.name",
        (user_id,),
    ).fetchall()
    return [ServiceRead(id=row["id"], name=row["name"]) for row in rows]


def _user_from_row(cursor: sqlite3.Cursor, row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        city=row["city"],
        bio=row["bio"],
        avatar=row["avatar"],
        created_at=row["created_at"],
        services_offered=_linked_services(cursor, OFFERED, row["id"]),
        services_needed=_linked_services(cursor, NEEDED, row["id"]),
    )


class UserService:
    """Accounts, profiles and service links."""

    @classmethod
    async def register(cls, conn: sqlite3.Connection, data: UserRegister) -> UserRead:
        """Create a member together with their offered/needed links.

        Name, email, password and city are required.  Email is matched
        exactly (case‑sensitive).  Unknown service ids are rejected
        before anything is written.
        """
        if not (data.name and data.email and data.password and data.city):
            raise ValidationError("Name, email, password, and city are required")
        offered = _dedupe(data.services_offered)
        needed = _dedupe(data.services_needed)

        with transaction(conn, conflict_detail="Email already registered") as cursor:
            if cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone():
                raise ConflictError("Email already registered")
            ensure_services_exist(cursor, offered + needed)
            cursor.execute(
                "INSERT INTO users (name, email, password_hash, city, bio, avatar) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    data.name,
                    data.email,
                    hash_password(data.password),
                    data.city,
                    data.bio or None,
                    data.avatar or DEFAULT_AVATAR,
                ),
            )
            user_id = cursor.lastrowid
            _insert_links(cursor, OFFERED, user_id, offered)
            _insert_links(cursor, NEEDED, user_id, needed)
            row = cursor.execute(
                "SELECT id, name, email, city, bio, avatar, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            user = _user_from_row(cursor, row)
        logger.info("Registered user %s (%s)", user_id, data.email)
        return user

    @classmethod
    async def authenticate(cls, conn: sqlite3.Connection, email: Optional[str], password: Optional[str]) -> UserRead:
        """Return the member matching the credentials.

        Unknown email and wrong password are reported identically.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        with transaction(conn) as cursor:
            row = cursor.execute(
                "SELECT id, name, email, password_hash, city, bio, avatar, created_at FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            if not row or not verify_password(password, row["password_hash"]):
                logger.info("Failed login for %s", email)
                raise AuthError("Invalid credentials")
            return _user_from_row(cursor, row)

    @classmethod
    async def get_profile(cls, conn: sqlite3.Connection, user_id: int) -> UserRead:
        with transaction(conn) as cursor:
            row = cursor.execute(
                "SELECT id, name, email, city, bio, avatar, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("User not found")
            return _user_from_row(cursor, row)

    @classmethod
    async def replace_services(
        cls,
        conn: sqlite3.Connection,
        user_id: int,
        offered: Optional[Iterable[int]],
        needed: Optional[Iterable[int]],
    ) -> Dict[str, List[int]]:
        """Replace both service relations of a member in one transaction.

        Existing links are deleted and the supplied ids inserted.  An
        omitted or empty list leaves that relation empty.  Duplicate ids
        are collapsed; unknown ids abort the whole update.
        """
        offered_ids = _dedupe(offered)
        needed_ids = _dedupe(needed)
        with transaction(conn) as cursor:
            ensure_services_exist(cursor, offered_ids + needed_ids)
            cursor.execute(f"DELETE FROM {OFFERED} WHERE user_id = ?", (user_id,))
            cursor.execute(f"DELETE FROM {NEEDED} WHERE user_id = ?", (user_id,))
            _insert_links(cursor, OFFERED, user_id, offered_ids)
            _insert_links(cursor, NEEDED, user_id, needed_ids)
        logger.info(
            "User %s now offers %d and needs %d services", user_id, len(offered_ids), len(needed_ids)
        )
        return {"offered": offered_ids, "needed": needed_ids}

    @classmethod
    async def update_city(cls, conn: sqlite3.Connection, user_id: int, city: Optional[str]) -> None:
        if not city:
            raise ValidationError("City is required")
        cls._update_field(conn, user_id, "city", city)

    @classmethod
    async def update_avatar(cls, conn: sqlite3.Connection, user_id: int, avatar: Optional[str]) -> None:
        if not avatar:
            raise ValidationError("Avatar is required")
        cls._update_field(conn, user_id, "avatar", avatar)

    @classmethod
    def _update_field(cls, conn: sqlite3.Connection, user_id: int, column: str, value: str) -> None:
        with transaction(conn) as cursor:
            cursor.execute(f"UPDATE users SET {column} = ? WHERE id = ?", (value, user_id))
            if cursor.rowcount == 0:
                raise NotFoundError("User not found")

    @classmethod
    async def delete_user(cls, conn: sqlite3.Connection, user_id: int) -> None:
        """Delete a member and everything they own.

        Children are removed before the user row even though the schema
        also cascades, so the outcome does not depend on the foreign key
        pragma being active.
        """
        with transaction(conn) as cursor:
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            cursor.execute(f"DELETE FROM {OFFERED} WHERE user_id = ?", (user_id,))
            cursor.execute(f"DELETE FROM {NEEDED} WHERE user_id = ?", (user_id,))
            cursor.execute("DELETE FROM messages WHERE from_user_id = ? OR to_user_id = ?", (user_id, user_id))
            cursor.execute("DELETE FROM password_resets WHERE user_id = ?", (user_id,))
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
        logger.info("Deleted user %s", user_id)
