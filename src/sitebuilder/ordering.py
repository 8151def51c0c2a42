"""Sort positions for pages and blocks, and the single-homepage rule.

The helpers taking a ``sqlite3.Connection`` are meant to run inside the
caller's open transaction, so the position read and the insert that uses it
commit together.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from .db import Database, next_timestamp
from .validation import validate_id_list

logger = logging.getLogger(__name__)


def next_page_sort_order(conn: sqlite3.Connection, website_id: int) -> int:
    """Position for a new page: the number of pages the website already has.

    Not recomputed after deletes, so gaps can appear.
    """
    cursor = conn.execute("SELECT COUNT(*) FROM pages WHERE website_id = ?", (website_id,))
    return cursor.fetchone()[0]


def next_block_sort_order(conn: sqlite3.Connection, page_id: int) -> int:
    """Position for a new block: one past the page's highest, or 0."""
    cursor = conn.execute(
        "SELECT COALESCE(MAX(sort_order), -1) + 1 FROM page_blocks WHERE page_id = ?",
        (page_id,),
    )
    return cursor.fetchone()[0]


def clear_homepage(
    conn: sqlite3.Connection,
    website_id: int,
    *,
    except_page_id: int | None = None,
) -> int:
    """Unset ``is_homepage`` on the website's pages.

    Runs unconditionally, even when no page currently holds the flag.
    ``updated_at`` is left alone; only the page being promoted is touched.

    Returns:
        Number of pages that lost the flag.
    """
    params: list[Any] = [website_id]
    sql = "UPDATE pages SET is_homepage = 0 WHERE website_id = ? AND is_homepage = 1"
    if except_page_id is not None:
        sql += " AND id != ?"
        params.append(except_page_id)
    cursor = conn.execute(sql, params)
    if cursor.rowcount:
        logger.info("Cleared homepage flag on %d page(s) of website %s", cursor.rowcount, website_id)
    return cursor.rowcount


def reorder_page_blocks(db: Database, block_ids: list[int]) -> bool:
    """Set each block's sort_order to its index in ``block_ids``.

    Blocks left out of the list keep their current sort_order, and the ids
    are not checked to belong to one page. Unknown ids are skipped. All
    updates commit together.

    Args:
        db: The database.
        block_ids: Block IDs in the desired order.

    Returns:
        True. An empty list is a successful no-op.
    """
    block_ids = validate_id_list(block_ids, "block_ids")
    if not block_ids:
        return True

    updated = 0
    with db.transaction() as conn:
        for position, block_id in enumerate(block_ids):
            row = conn.execute(
                "SELECT updated_at FROM page_blocks WHERE id = ?", (block_id,)
            ).fetchone()
            if row is None:
                logger.debug("Reorder skipped unknown page block %s", block_id)
                continue
            conn.execute(
                "UPDATE page_blocks SET sort_order = ?, updated_at = ? WHERE id = ?",
                (position, next_timestamp(row["updated_at"]), block_id),
            )
            updated += 1

    logger.info("Reordered %d page block(s)", updated)
    return True
