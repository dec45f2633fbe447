"""
SQLite store handle and simple migration system.

``Database`` is constructed once per process (by the application
lifespan, or by tests) and injected into every service.  ``connect``
opens the connection and applies pending migrations; ``close`` tears it
down.  Reference sets are stored as JSON arrays of identifiers in TEXT
columns, one column per related entity type, on each side of the
relationship independently.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .errors import DuplicateError, StoreError, StoreUnavailable

logger = logging.getLogger(__name__)

MEMORY_URL = ":memory:"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS researchers (
            id TEXT PRIMARY KEY,
            first_name TEXT,
            last_name TEXT,
            institution TEXT,
            orcid_id TEXT,
            subjects TEXT NOT NULL DEFAULT '[]',
            findings TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS subjects (
            id TEXT PRIMARY KEY,
            name TEXT,
            field_of_study TEXT,
            researchers TEXT NOT NULL DEFAULT '[]',
            findings TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS findings (
            id TEXT PRIMARY KEY,
            title TEXT,
            abstract TEXT,
            publication_date TEXT,
            researchers TEXT NOT NULL DEFAULT '[]',
            subjects TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: indices for the default sort key
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_researchers_updated_at ON researchers(updated_at);
        CREATE INDEX IF NOT EXISTS idx_subjects_updated_at ON subjects(updated_at);
        CREATE INDEX IF NOT EXISTS idx_findings_updated_at ON findings(updated_at);
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are returned unchanged; relative
    paths are resolved against the project root.
    """
    if database_url == MEMORY_URL or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def translate_error(exc: sqlite3.Error) -> StoreError:
    """Map a sqlite3 exception onto the store error hierarchy."""
    if isinstance(exc, sqlite3.IntegrityError):
        return DuplicateError(f"Integrity constraint violated: {exc}")
    if isinstance(exc, sqlite3.OperationalError):
        return StoreUnavailable(f"Store operation failed: {exc}")
    return StoreError(f"Store error: {exc}")


class Database:
    """Process wide handle on the SQLite store."""

    def __init__(self, database_url: str = MEMORY_URL):
        self.database_url = database_url
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreUnavailable("Database is not connected")
        return self._conn

    def connect(self) -> "Database":
        """Open the connection and apply pending migrations."""
        if self._conn is not None:
            return self
        path = resolve_database_path(self.database_url)
        try:
            conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.Error as exc:
            logger.error("Cannot open database %s: %s", path, exc)
            raise translate_error(exc) from exc
        # Rows are accessed by column name throughout the store.
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self.migrate()
        logger.info("Connected to database %s", path)
        return self

    def close(self) -> None:
        """Close the connection.  Safe to call when not connected."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Database connection closed")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back on error.

        sqlite3 errors are translated into ``StoreError`` subclasses so
        that callers never see driver exceptions.
        """
        conn = self.connection
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("Store transaction failed: %s", exc)
            raise translate_error(exc) from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            cursor.close()

    def migrate(self) -> int:
        """Apply migrations newer than the recorded schema version.

        Returns the resulting schema version.
        """
        with self.transaction() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version <= current_version:
                continue
            # executescript issues its own COMMIT, so it runs outside
            # the transaction helper.
            try:
                self.connection.executescript(sql)
            except sqlite3.Error as exc:
                logger.error("Migration %s failed: %s", version, exc)
                raise translate_error(exc) from exc
            with self.transaction() as cursor:
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.debug("Applied migration %s", version)
            current_version = version
        return current_version

    def health_check(self) -> bool:
        """Check store connectivity (for readiness probes)."""
        try:
            with self.transaction() as cursor:
                cursor.execute("SELECT 1")
            return True
        except StoreError as exc:
            logger.error("Database health check failed: %s", exc)
            return False
