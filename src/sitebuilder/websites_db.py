"""Database operations for websites.

A website owns its pages (and through them, page blocks) and its assets.
Deleting a website removes all of them in one transaction; block templates
are shared reference data and are never touched.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from .db import Database, apply_update, next_timestamp, now_iso
from .errors import NotFoundError
from .models import UNSET, Website
from .validation import validate_bool, validate_id, validate_optional_string, validate_string

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset({"name", "domain", "is_published", "updated_at"})


def _fetch(conn: sqlite3.Connection, website_id: int) -> sqlite3.Row | None:
    return conn.execute("SELECT * FROM websites WHERE id = ?", (website_id,)).fetchone()


def create_website(db: Database, *, name: str, domain: str | None = None) -> Website:
    """Create a new, unpublished website.

    Args:
        db: The database.
        name: Display name (required, non-empty).
        domain: Optional domain; uniqueness is not enforced.

    Returns:
        The created Website.

    Raises:
        ValidationError: If name is empty.
    """
    name = validate_string(name, "name")
    domain = validate_optional_string(domain, "domain")
    now = now_iso()

    with db.transaction() as conn:
        cursor = conn.execute(
            """
            INSERT INTO websites (name, domain, is_published, created_at, updated_at)
            VALUES (?, ?, 0, ?, ?)
            """,
            (name, domain, now, now),
        )
        row = _fetch(conn, cursor.lastrowid)

    logger.info("Created website %s (%s)", row["id"], name)
    return Website.from_row(row)


def get_website(db: Database, website_id: int) -> Website | None:
    """Get a website by ID, or None if it does not exist."""
    row = db.query_one("SELECT * FROM websites WHERE id = ?", (validate_id(website_id, "website_id"),))
    return Website.from_row(row) if row else None


def list_websites(db: Database) -> list[Website]:
    """List all websites in creation order."""
    return [Website.from_row(row) for row in db.query("SELECT * FROM websites ORDER BY id")]


def update_website(
    db: Database,
    website_id: int,
    *,
    name: Any = UNSET,
    domain: Any = UNSET,
    is_published: Any = UNSET,
) -> Website:
    """Partially update a website.

    Only the arguments that are passed change. ``domain=None`` clears the
    domain, while leaving ``domain`` out keeps it. ``updated_at`` is always
    refreshed.

    Raises:
        NotFoundError: If the website does not exist.
        ValidationError: If a supplied value is invalid.
    """
    website_id = validate_id(website_id, "website_id")
    changes: dict[str, Any] = {}
    if name is not UNSET:
        changes["name"] = validate_string(name, "name")
    if domain is not UNSET:
        changes["domain"] = validate_optional_string(domain, "domain")
    if is_published is not UNSET:
        changes["is_published"] = int(validate_bool(is_published, "is_published"))

    with db.transaction() as conn:
        row = _fetch(conn, website_id)
        if row is None:
            raise NotFoundError(
                f"Website with id {website_id} not found",
                resource_type="website",
                resource_id=website_id,
            )
        changes["updated_at"] = next_timestamp(row["updated_at"])
        apply_update(conn, "websites", website_id, changes, _UPDATABLE)
        row = _fetch(conn, website_id)

    logger.debug("Updated website %s: %s", website_id, sorted(changes))
    return Website.from_row(row)


def delete_website(db: Database, website_id: int) -> bool:
    """Delete a website with all of its pages, page blocks and assets.

    Order: blocks of the website's pages, the pages, the assets, then the
    website row. Everything commits or nothing does.

    Returns:
        True if the website existed and was deleted, False if not found.
    """
    website_id = validate_id(website_id, "website_id")

    with db.transaction() as conn:
        if _fetch(conn, website_id) is None:
            logger.debug("Delete skipped: website %s not found", website_id)
            return False

        blocks = conn.execute(
            """
            DELETE FROM page_blocks
            WHERE page_id IN (SELECT id FROM pages WHERE website_id = ?)
            """,
            (website_id,),
        ).rowcount
        pages = conn.execute("DELETE FROM pages WHERE website_id = ?", (website_id,)).rowcount
        assets = conn.execute("DELETE FROM assets WHERE website_id = ?", (website_id,)).rowcount
        conn.execute("DELETE FROM websites WHERE id = ?", (website_id,))

    logger.info(
        "Deleted website %s (%d pages, %d blocks, %d assets)",
        website_id,
        pages,
        blocks,
        assets,
    )
    return True
