"""SQLite storage for the site builder.

A ``Database`` owns one connection to one SQLite file and hands out
transactions. Repository modules (websites_db, pages_db, blocks_db,
assets_db, templates_db) take the ``Database`` as their first argument
rather than reaching for a global, so tests can point them at a throwaway
file or ``:memory:``.

Schema (v1):
- websites: top-level owned unit
- pages: belong to a website, carry sort_order and the homepage flag
- block_templates: shared reference data
- page_blocks: belong to a page, reference a block template
- assets: belong to a website, metadata only
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterator

from .errors import NotFoundError, StorageError
from .models import parse_timestamp
from .settings import settings

logger = logging.getLogger(__name__)

# Schema version for migrations
# v1: websites, pages, block_templates, page_blocks, assets
SCHEMA_VERSION = 1

_SCHEMA = """
    -- Schema version tracking
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY
    );

    CREATE TABLE IF NOT EXISTS websites (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        domain TEXT,
        is_published INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS pages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        website_id INTEGER NOT NULL REFERENCES websites(id),
        title TEXT NOT NULL,
        slug TEXT NOT NULL,
        meta_description TEXT,
        seo_title TEXT,
        seo_keywords TEXT,
        is_homepage INTEGER NOT NULL DEFAULT 0,
        sort_order INTEGER NOT NULL DEFAULT 0,
        is_published INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_pages_website_id ON pages(website_id);

    CREATE TABLE IF NOT EXISTS block_templates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        description TEXT,
        default_content TEXT NOT NULL DEFAULT '{}',  -- JSON object
        settings_schema TEXT NOT NULL DEFAULT '{}',  -- JSON object
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS page_blocks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL REFERENCES pages(id),
        block_template_id INTEGER NOT NULL REFERENCES block_templates(id),
        content TEXT NOT NULL DEFAULT '{}',  -- JSON object
        settings TEXT NOT NULL DEFAULT '{}',  -- JSON object
        sort_order INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_page_blocks_page_id ON page_blocks(page_id);

    CREATE TABLE IF NOT EXISTS assets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        website_id INTEGER NOT NULL REFERENCES websites(id),
        filename TEXT NOT NULL,
        original_name TEXT NOT NULL,
        mime_type TEXT NOT NULL,
        file_size INTEGER NOT NULL CHECK (file_size >= 0),
        url TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_assets_website_id ON assets(website_id);
"""


def now_iso() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def next_timestamp(previous: str) -> str:
    """Get an ``updated_at`` value strictly later than ``previous``.

    Two mutations inside the same clock tick would otherwise store equal
    timestamps.
    """
    now = datetime.now(timezone.utc)
    last = parse_timestamp(previous)
    if now <= last:
        now = last + timedelta(microseconds=1)
    return now.isoformat()


class Database:
    """One SQLite database file and its connection."""

    def __init__(self, db_path: Path | str | None = None) -> None:
        self.db_path = str(db_path) if db_path is not None else str(settings.db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Database({self.db_path!r})"

    def connect(self) -> sqlite3.Connection:
        """Get the connection, opening it on first use."""
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                # isolation_level=None: transactions are opened explicitly in transaction()
                conn = sqlite3.connect(self.db_path, check_same_thread=False, isolation_level=None)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA foreign_keys = ON")
                if self.db_path != ":memory:":
                    conn.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                raise StorageError(
                    f"Cannot open database {self.db_path}: {e}",
                    operation="connect",
                ) from e
            self._conn = conn
        return self._conn

    def close(self) -> None:
        """Close the connection. The next operation reopens it."""
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                except sqlite3.Error as e:
                    logger.debug("Error closing database connection (non-critical): %s", e)
                self._conn = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for an all-or-nothing unit of work.

        Commits when the block exits normally and rolls back on any
        exception. A ``sqlite3.Error`` is re-raised as ``StorageError``.
        Nested use joins the outer transaction.
        """
        with self._lock:
            conn = self.connect()
            if conn.in_transaction:
                yield conn
                return
            try:
                conn.execute("BEGIN")
            except sqlite3.Error as e:
                raise StorageError(f"Cannot begin transaction: {e}", operation="begin") from e
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.error("Transaction rolled back: %s", e, exc_info=True)
                raise StorageError(f"Storage failure: {e}", operation="transaction") from e
            except BaseException:
                conn.rollback()
                raise

    def query(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> list[sqlite3.Row]:
        """Run a read-only statement and return all rows."""
        with self._lock:
            try:
                return self.connect().execute(sql, params).fetchall()
            except sqlite3.Error as e:
                logger.error("Query failed: %s", e, exc_info=True)
                raise StorageError(f"Storage failure: {e}", operation="query") from e

    def query_one(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> sqlite3.Row | None:
        """Run a read-only statement and return the first row, if any."""
        rows = self.query(sql, params)
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def migrate(self) -> None:
        """Create the schema on a fresh database, or check an existing one."""
        with self.transaction() as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
            )
            if cursor.fetchone() is not None:
                row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
                if row is not None:
                    if row[0] > SCHEMA_VERSION:
                        raise StorageError(
                            f"Database schema v{row[0]} is newer than supported v{SCHEMA_VERSION}",
                            operation="migrate",
                            table="schema_version",
                        )
                    return

            # executescript() would commit our open transaction, so run statements one by one
            for statement in _SCHEMA.split(";"):
                if statement.strip():
                    conn.execute(statement)
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
            logger.info("Initialized schema v%s at %s", SCHEMA_VERSION, self.db_path)

    def schema_version(self) -> int | None:
        row = self.query_one(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if row is None:
            return None
        row = self.query_one("SELECT version FROM schema_version LIMIT 1")
        return row[0] if row else None


# =============================================================================
# Helpers shared by the repository modules
# =============================================================================


def ensure_exists(conn: sqlite3.Connection, table: str, row_id: int, label: str) -> sqlite3.Row:
    """Fetch a parent row or raise NotFoundError("<label> with id N does not exist")."""
    # SAFETY: table is always a hardcoded literal from the calling module.
    row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone()
    if row is None:
        raise NotFoundError(
            f"{label} with id {row_id} does not exist",
            resource_type=label.lower().replace(" ", "_"),
            resource_id=row_id,
        )
    return row


def apply_update(
    conn: sqlite3.Connection,
    table: str,
    row_id: int,
    assignments: dict[str, Any],
    allowed: frozenset[str],
) -> None:
    """Run ``UPDATE <table> SET col = ?, ... WHERE id = ?`` for the given columns."""
    # SAFETY: column names MUST come from the caller's hardcoded allow-list.
    # Never pass user-controlled keys here.
    assert set(assignments) <= allowed, (
        f"SQL injection guard: unexpected column in updates: {sorted(assignments)}"
    )
    if not assignments:
        return
    columns = ", ".join(f"{column} = ?" for column in assignments)
    conn.execute(f"UPDATE {table} SET {columns} WHERE id = ?", [*assignments.values(), row_id])
