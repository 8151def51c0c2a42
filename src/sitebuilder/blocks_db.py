"""Database operations for page blocks.

A page block places a block template on a page with its own content,
settings and sort position. Blocks are always read back in sort order.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from .db import Database, apply_update, ensure_exists, next_timestamp, now_iso
from .errors import NotFoundError
from .models import UNSET, PageBlock
from .ordering import next_block_sort_order
from .validation import validate_id, validate_int, validate_mapping

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset({"content", "settings", "sort_order", "updated_at"})


def _fetch(conn: sqlite3.Connection, block_id: int) -> sqlite3.Row | None:
    return conn.execute("SELECT * FROM page_blocks WHERE id = ?", (block_id,)).fetchone()


# =============================================================================
# Page Block CRUD Operations
# =============================================================================


def create_page_block(
    db: Database,
    *,
    page_id: int,
    block_template_id: int,
    content: dict[str, Any] | None = None,
    settings: dict[str, Any] | None = None,
    sort_order: int | None = None,
) -> PageBlock:
    """Create a new page block.

    Args:
        db: The database.
        page_id: Page the block is placed on.
        block_template_id: Template the block instantiates.
        content: Per-block content overrides (defaults to {}).
        settings: Per-block settings (defaults to {}).
        sort_order: Position on the page. Used verbatim when given, even if
            another block already has it; otherwise one past the page's
            highest position, or 0 for the first block.

    Returns:
        The created PageBlock.

    Raises:
        ValidationError: If content or settings is not a JSON-serializable dict.
        NotFoundError: If the page or the block template does not exist.
    """
    page_id = validate_id(page_id, "page_id")
    block_template_id = validate_id(block_template_id, "block_template_id")
    content_json = json.dumps(validate_mapping(content if content is not None else {}, "content"))
    settings_json = json.dumps(validate_mapping(settings if settings is not None else {}, "settings"))
    if sort_order is not None:
        sort_order = validate_int(sort_order, "sort_order")
    now = now_iso()

    with db.transaction() as conn:
        ensure_exists(conn, "pages", page_id, "Page")
        ensure_exists(conn, "block_templates", block_template_id, "Block template")

        if sort_order is None:
            sort_order = next_block_sort_order(conn, page_id)

        cursor = conn.execute(
            """
            INSERT INTO page_blocks
            (page_id, block_template_id, content, settings, sort_order, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                page_id,
                block_template_id,
                content_json,
                settings_json,
                sort_order,
                now,
                now,
            ),
        )
        row = _fetch(conn, cursor.lastrowid)

    logger.info("Created page block %s on page %s at %s", row["id"], page_id, sort_order)
    return PageBlock.from_row(row)


def get_page_block(db: Database, block_id: int) -> PageBlock | None:
    """Get a page block by ID, or None if it does not exist."""
    row = db.query_one(
        "SELECT * FROM page_blocks WHERE id = ?", (validate_id(block_id, "block_id"),)
    )
    return PageBlock.from_row(row) if row else None


def list_page_blocks(db: Database, page_id: int) -> list[PageBlock]:
    """List a page's blocks ordered by sort_order (ties in creation order)."""
    rows = db.query(
        "SELECT * FROM page_blocks WHERE page_id = ? ORDER BY sort_order, id",
        (validate_id(page_id, "page_id"),),
    )
    return [PageBlock.from_row(row) for row in rows]


def update_page_block(
    db: Database,
    block_id: int,
    *,
    content: Any = UNSET,
    settings: Any = UNSET,
    sort_order: Any = UNSET,
) -> PageBlock:
    """Partially update a page block.

    ``content`` and ``settings`` replace the stored maps wholesale.

    Raises:
        NotFoundError: If the block does not exist.
    """
    block_id = validate_id(block_id, "block_id")
    changes: dict[str, Any] = {}
    if content is not UNSET:
        changes["content"] = json.dumps(validate_mapping(content, "content"))
    if settings is not UNSET:
        changes["settings"] = json.dumps(validate_mapping(settings, "settings"))
    if sort_order is not UNSET:
        changes["sort_order"] = validate_int(sort_order, "sort_order")

    with db.transaction() as conn:
        row = _fetch(conn, block_id)
        if row is None:
            raise NotFoundError(
                f"Page block with id {block_id} not found",
                resource_type="page_block",
                resource_id=block_id,
            )
        changes["updated_at"] = next_timestamp(row["updated_at"])
        apply_update(conn, "page_blocks", block_id, changes, _UPDATABLE)
        row = _fetch(conn, block_id)

    return PageBlock.from_row(row)


def delete_page_block(db: Database, block_id: int) -> bool:
    """Delete a page block.

    Returns:
        True if deleted, False if not found.
    """
    block_id = validate_id(block_id, "block_id")

    with db.transaction() as conn:
        cursor = conn.execute("DELETE FROM page_blocks WHERE id = ?", (block_id,))
        deleted = cursor.rowcount > 0

    if deleted:
        logger.info("Deleted page block %s", block_id)
    else:
        logger.debug("Delete skipped: page block %s not found", block_id)
    return deleted
