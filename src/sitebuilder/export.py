"""Website export: one denormalized snapshot of a website's content graph.

The snapshot is read inside a single transaction so pages, blocks and
assets are consistent with each other. All three lists come back in
creation order, blocks included (not sort_order).
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

from .db import Database
from .errors import NotFoundError
from .models import Asset, Page, PageBlock, Website, WebsiteExport
from .validation import validate_id

logger = logging.getLogger(__name__)


def export_website(db: Database, website_id: int) -> WebsiteExport:
    """Export a website with all of its pages, page blocks and assets.

    Raises:
        NotFoundError: If the website does not exist.
    """
    website_id = validate_id(website_id, "website_id")

    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM websites WHERE id = ?", (website_id,)).fetchone()
        if row is None:
            raise NotFoundError(
                f"Website with id {website_id} not found",
                resource_type="website",
                resource_id=website_id,
            )
        website = Website.from_row(row)

        pages = [
            Page.from_row(r)
            for r in conn.execute(
                "SELECT * FROM pages WHERE website_id = ? ORDER BY id", (website_id,)
            )
        ]

        blocks = [
            PageBlock.from_row(r)
            for r in conn.execute(
                """
                SELECT * FROM page_blocks
                WHERE page_id IN (SELECT id FROM pages WHERE website_id = ?)
                ORDER BY id
                """,
                (website_id,),
            )
        ]

        assets = [
            Asset.from_row(r)
            for r in conn.execute(
                "SELECT * FROM assets WHERE website_id = ? ORDER BY id", (website_id,)
            )
        ]

    logger.info(
        "Exported website %s (%d pages, %d blocks, %d assets)",
        website_id,
        len(pages),
        len(blocks),
        len(assets),
    )
    return WebsiteExport(website=website, pages=pages, blocks=blocks, assets=assets)


def export_filename(website: Website, on: date | None = None) -> str:
    """File name for a downloaded export.

    Example: ``website-export-my-site-2024-05-01.json``.
    """
    on = on or date.today()
    name = re.sub(r"\s+", "-", website.name.lower())
    return f"website-export-{name}-{on.isoformat()}.json"


def write_export(db: Database, website_id: int, directory: Path | str) -> Path:
    """Export a website and write the JSON document into ``directory``.

    Returns:
        Path of the written file.
    """
    snapshot = export_website(db, website_id)
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(snapshot.website)
    path.write_text(snapshot.to_json(), encoding="utf-8")
    logger.info("Wrote export of website %s to %s", website_id, path)
    return path
