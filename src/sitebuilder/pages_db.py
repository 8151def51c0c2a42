"""Database operations for pages.

Pages are appended to their website in creation order (sort_order 0, 1, ...)
and at most one page per website carries ``is_homepage``.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from .db import Database, apply_update, ensure_exists, next_timestamp, now_iso
from .errors import NotFoundError
from .models import UNSET, Page
from .ordering import clear_homepage, next_page_sort_order
from .validation import (
    validate_bool,
    validate_id,
    validate_int,
    validate_optional_string,
    validate_string,
)

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset({
    "title",
    "slug",
    "meta_description",
    "seo_title",
    "seo_keywords",
    "is_homepage",
    "sort_order",
    "is_published",
    "updated_at",
})


def _fetch(conn: sqlite3.Connection, page_id: int) -> sqlite3.Row | None:
    return conn.execute("SELECT * FROM pages WHERE id = ?", (page_id,)).fetchone()


def create_page(
    db: Database,
    *,
    website_id: int,
    title: str,
    slug: str,
    meta_description: str | None = None,
    seo_title: str | None = None,
    seo_keywords: str | None = None,
    is_homepage: bool = False,
) -> Page:
    """Create a new page at the end of its website.

    If ``is_homepage`` is set, every other page of the website loses the
    flag first, in the same transaction. New pages are never published.

    Args:
        db: The database.
        website_id: Owning website.
        title: Page title (required, non-empty).
        slug: URL slug (required, non-empty; uniqueness not enforced).
        meta_description: SEO meta description.
        seo_title: SEO title.
        seo_keywords: SEO keywords.
        is_homepage: Make this the website's homepage.

    Returns:
        The created Page.

    Raises:
        ValidationError: If title or slug is empty.
        NotFoundError: If the website does not exist.
    """
    website_id = validate_id(website_id, "website_id")
    title = validate_string(title, "title")
    slug = validate_string(slug, "slug")
    meta_description = validate_optional_string(meta_description, "meta_description")
    seo_title = validate_optional_string(seo_title, "seo_title")
    seo_keywords = validate_optional_string(seo_keywords, "seo_keywords")
    is_homepage = validate_bool(is_homepage, "is_homepage")
    now = now_iso()

    with db.transaction() as conn:
        ensure_exists(conn, "websites", website_id, "Website")

        if is_homepage:
            clear_homepage(conn, website_id)

        sort_order = next_page_sort_order(conn, website_id)

        cursor = conn.execute(
            """
            INSERT INTO pages
            (website_id, title, slug, meta_description, seo_title, seo_keywords,
             is_homepage, sort_order, is_published, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                website_id,
                title,
                slug,
                meta_description,
                seo_title,
                seo_keywords,
                int(is_homepage),
                sort_order,
                now,
                now,
            ),
        )
        row = _fetch(conn, cursor.lastrowid)

    logger.info("Created page %s (%s) in website %s", row["id"], slug, website_id)
    return Page.from_row(row)


def get_page(db: Database, page_id: int) -> Page | None:
    """Get a page by ID, or None if it does not exist."""
    row = db.query_one("SELECT * FROM pages WHERE id = ?", (validate_id(page_id, "page_id"),))
    return Page.from_row(row) if row else None


def list_pages(db: Database, website_id: int) -> list[Page]:
    """List a website's pages in creation order.

    The result is deliberately not sorted by sort_order; callers that
    display pages in sort order sort it themselves.
    """
    rows = db.query(
        "SELECT * FROM pages WHERE website_id = ? ORDER BY id",
        (validate_id(website_id, "website_id"),),
    )
    return [Page.from_row(row) for row in rows]


def update_page(
    db: Database,
    page_id: int,
    *,
    title: Any = UNSET,
    slug: Any = UNSET,
    meta_description: Any = UNSET,
    seo_title: Any = UNSET,
    seo_keywords: Any = UNSET,
    is_homepage: Any = UNSET,
    sort_order: Any = UNSET,
    is_published: Any = UNSET,
) -> Page:
    """Partially update a page.

    Only the arguments that are passed change; nullable SEO fields can be
    cleared with None. Promoting a page to homepage demotes the website's
    other pages in the same transaction.

    Raises:
        NotFoundError: If the page does not exist.
        ValidationError: If a supplied value is invalid.
    """
    page_id = validate_id(page_id, "page_id")
    changes: dict[str, Any] = {}
    if title is not UNSET:
        changes["title"] = validate_string(title, "title")
    if slug is not UNSET:
        changes["slug"] = validate_string(slug, "slug")
    if meta_description is not UNSET:
        changes["meta_description"] = validate_optional_string(meta_description, "meta_description")
    if seo_title is not UNSET:
        changes["seo_title"] = validate_optional_string(seo_title, "seo_title")
    if seo_keywords is not UNSET:
        changes["seo_keywords"] = validate_optional_string(seo_keywords, "seo_keywords")
    if is_homepage is not UNSET:
        changes["is_homepage"] = int(validate_bool(is_homepage, "is_homepage"))
    if sort_order is not UNSET:
        changes["sort_order"] = validate_int(sort_order, "sort_order")
    if is_published is not UNSET:
        changes["is_published"] = int(validate_bool(is_published, "is_published"))

    with db.transaction() as conn:
        row = _fetch(conn, page_id)
        if row is None:
            raise NotFoundError(
                f"Page with id {page_id} not found",
                resource_type="page",
                resource_id=page_id,
            )
        if changes.get("is_homepage"):
            clear_homepage(conn, row["website_id"], except_page_id=page_id)

        changes["updated_at"] = next_timestamp(row["updated_at"])
        apply_update(conn, "pages", page_id, changes, _UPDATABLE)
        row = _fetch(conn, page_id)

    logger.debug("Updated page %s: %s", page_id, sorted(changes))
    return Page.from_row(row)


def delete_page(db: Database, page_id: int) -> bool:
    """Delete a page and all of its blocks atomically.

    Returns:
        True if the page existed and was deleted, False if not found.
    """
    page_id = validate_id(page_id, "page_id")

    with db.transaction() as conn:
        if _fetch(conn, page_id) is None:
            logger.debug("Delete skipped: page %s not found", page_id)
            return False
        blocks = conn.execute("DELETE FROM page_blocks WHERE page_id = ?", (page_id,)).rowcount
        conn.execute("DELETE FROM pages WHERE id = ?", (page_id,))

    logger.info("Deleted page %s (%d blocks)", page_id, blocks)
    return True
