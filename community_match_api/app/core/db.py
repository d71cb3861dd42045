"""
SQLite database integration and simple migration system.

This module provides connection handling (``get_connection`` and the
per‑request FastAPI dependency ``get_db``), the ``transaction`` unit
of work used by every service, and ``init_db`` which applies schema
migrations on application start.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.  The first migration also seeds
the service catalog, so services removed by an administrator are not
re‑created on the next boot.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import ConflictError, InternalError, ValidationError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_SERVICES: tuple[str, ...] = (
    "Hlídání dětí",
    "Výuka jazyků",
    "Koučink",
    "Účetnictví",
    "Právní poradenství",
    "IT podpora",
    "Grafický design",
    "Psaní textů",
    "Překlady",
    "Fotografie",
    "Make-up",
    "Kadeřnictví",
    "Masáže",
    "Cvičení/fitness",
    "Vaření",
    "Úklid",
    "Žehlení",
    "Zahradničení",
    "Opravy oblečení",
    "Výměna oblečení",
    "Společnost na aktivity",
    "Doprovod k lékaři",
    "Pomoc se stěhováním",
    "Pomoc se zvířaty",
)

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            city TEXT NOT NULL,
            bio TEXT,
            avatar TEXT DEFAULT 'avatar1',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS user_services_offered (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            service_id INTEGER NOT NULL REFERENCES services(id) ON DELETE CASCADE,
            UNIQUE(user_id, service_id)
        );

        CREATE TABLE IF NOT EXISTS user_services_needed (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            service_id INTEGER NOT NULL REFERENCES services(id) ON DELETE CASCADE,
            UNIQUE(user_id, service_id)
        );

        CREATE TABLE IF NOT EXISTS messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            from_user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            to_user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            message TEXT NOT NULL,
            read INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS password_resets (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            reset_code TEXT NOT NULL,
            expires_at TIMESTAMP NOT NULL,
            used INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_users_city ON users(city);
        CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
        CREATE INDEX IF NOT EXISTS idx_messages_from ON messages(from_user_id);
        CREATE INDEX IF NOT EXISTS idx_messages_to ON messages(to_user_id);
        CREATE INDEX IF NOT EXISTS idx_offered_service ON user_services_offered(service_id);
        CREATE INDEX IF NOT EXISTS idx_needed_user ON user_services_needed(user_id);
        CREATE INDEX IF NOT EXISTS idx_password_resets_user ON password_resets(user_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign keys are switched on for every connection; without
    the pragma SQLite silently ignores the ``REFERENCES`` clauses and
    the ``ON DELETE CASCADE`` rules above.  FastAPI may resolve the
    dependency and run the endpoint on different threads, hence
    ``check_same_thread=False``; a connection is still only used by
    one request at a time.
    """
    conn = sqlite3.connect(get_database_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency yielding a connection for the current request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection, conflict_detail: str = "Already exists") -> Iterator[sqlite3.Cursor]:
    """Run a block of statements as one unit of work.

    Commits when the block finishes and rolls back on any exception.
    ``sqlite3`` errors are translated into the API error taxonomy:
    unique violations become ``ConflictError`` (with
    ``conflict_detail``), foreign key violations ``ValidationError``
    and anything else ``InternalError`` with the cause logged here.
    """
    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    except sqlite3.IntegrityError as exc:
        conn.rollback()
        message = str(exc)
        if "UNIQUE constraint failed" in message:
            raise ConflictError(conflict_detail) from exc
        if "FOREIGN KEY constraint failed" in message:
            raise ValidationError("Referenced record does not exist") from exc
        logger.exception("Integrity error")
        raise InternalError() from exc
    except sqlite3.Error as exc:
        conn.rollback()
        logger.exception("Storage error")
        raise InternalError() from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime the way SQLite's ``CURRENT_TIMESTAMP`` does (UTC)."""
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def init_db() -> None:
    """Initialise the database and apply pending migrations."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version <= current_version:
                continue
            cursor.executescript(sql)
            if version == 1:
                cursor.executemany(
                    "INSERT OR IGNORE INTO services (name) VALUES (?)",
                    [(name,) for name in DEFAULT_SERVICES],
                )
                logger.info("Seeded %d default services", len(DEFAULT_SERVICES))
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            conn.commit()
            logger.info("Applied migration %d", version)
            current_version = version
    finally:
        conn.close()
