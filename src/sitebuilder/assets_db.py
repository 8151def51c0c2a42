"""Database operations for assets.

Only metadata is stored here; the file itself was uploaded somewhere else
and is reachable at ``url``. Assets cannot be edited, only added and removed.
"""

from __future__ import annotations

import logging

from .db import Database, ensure_exists, now_iso
from .models import Asset
from .validation import validate_id, validate_int, validate_string

logger = logging.getLogger(__name__)


def create_asset(
    db: Database,
    *,
    website_id: int,
    filename: str,
    original_name: str,
    mime_type: str,
    file_size: int,
    url: str,
) -> Asset:
    """Record an uploaded file for a website.

    Args:
        db: The database.
        website_id: Owning website.
        filename: Storage name of the file.
        original_name: Name the user uploaded it under.
        mime_type: Content type, e.g. "image/png".
        file_size: Size in bytes (non-negative).
        url: Where the file can be fetched.

    Returns:
        The created Asset.

    Raises:
        ValidationError: If file_size is negative or a field has the wrong type.
        NotFoundError: If the website does not exist.
    """
    website_id = validate_id(website_id, "website_id")
    filename = validate_string(filename, "filename", allow_empty=True)
    original_name = validate_string(original_name, "original_name", allow_empty=True)
    mime_type = validate_string(mime_type, "mime_type", allow_empty=True)
    file_size = validate_int(file_size, "file_size", min_value=0)
    url = validate_string(url, "url", allow_empty=True)
    now = now_iso()

    with db.transaction() as conn:
        ensure_exists(conn, "websites", website_id, "Website")
        cursor = conn.execute(
            """
            INSERT INTO assets
            (website_id, filename, original_name, mime_type, file_size, url, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (website_id, filename, original_name, mime_type, file_size, url, now),
        )
        row = conn.execute("SELECT * FROM assets WHERE id = ?", (cursor.lastrowid,)).fetchone()

    logger.info("Recorded asset %s (%s, %d bytes) for website %s", row["id"], mime_type, file_size, website_id)
    return Asset.from_row(row)


def list_assets(db: Database, website_id: int) -> list[Asset]:
    """List a website's assets in creation order."""
    rows = db.query(
        "SELECT * FROM assets WHERE website_id = ? ORDER BY id",
        (validate_id(website_id, "website_id"),),
    )
    return [Asset.from_row(row) for row in rows]


def delete_asset(db: Database, asset_id: int) -> bool:
    """Delete an asset record.

    Returns:
        True if deleted, False if not found.
    """
    asset_id = validate_id(asset_id, "asset_id")

    with db.transaction() as conn:
        deleted = conn.execute("DELETE FROM assets WHERE id = ?", (asset_id,)).rowcount > 0

    if deleted:
        logger.info("Deleted asset %s", asset_id)
    else:
        logger.debug("Delete skipped: asset %s not found", asset_id)
    return deleted
