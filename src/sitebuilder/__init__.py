"""Website builder backend.

Stores websites, their pages, reusable block templates, per-page block
instances and uploaded asset metadata in SQLite, and exports a website as
one JSON document.

Usage:
    from sitebuilder import Database, create_website, create_page

    db = Database("site.db")
    db.migrate()
    site = create_website(db, name="Acme", domain="acme.test")
    home = create_page(db, website_id=site.id, title="Home", slug="home", is_homepage=True)
"""

from __future__ import annotations

from .assets_db import create_asset, delete_asset, list_assets
from .blocks_db import (
    create_page_block,
    delete_page_block,
    get_page_block,
    list_page_blocks,
    update_page_block,
)
from .db import SCHEMA_VERSION, Database
from .errors import NotFoundError, SiteBuilderError, StorageError, ValidationError
from .export import export_filename, export_website, write_export
from .health import healthcheck
from .models import UNSET, Asset, BlockTemplate, Page, PageBlock, Website, WebsiteExport
from .ordering import reorder_page_blocks
from .pages_db import create_page, delete_page, get_page, list_pages, update_page
from .templates_db import DEFAULT_BLOCK_TEMPLATES, list_block_templates, seed_block_templates
from .websites_db import (
    create_website,
    delete_website,
    get_website,
    list_websites,
    update_website,
)

__all__ = [
    "SCHEMA_VERSION",
    "UNSET",
    "DEFAULT_BLOCK_TEMPLATES",
    "Asset",
    "BlockTemplate",
    "Database",
    "NotFoundError",
    "Page",
    "PageBlock",
    "SiteBuilderError",
    "StorageError",
    "ValidationError",
    "Website",
    "WebsiteExport",
    "create_asset",
    "create_page",
    "create_page_block",
    "create_website",
    "delete_asset",
    "delete_page",
    "delete_page_block",
    "delete_website",
    "export_filename",
    "export_website",
    "get_page",
    "get_page_block",
    "get_website",
    "healthcheck",
    "list_assets",
    "list_block_templates",
    "list_page_blocks",
    "list_pages",
    "list_websites",
    "reorder_page_blocks",
    "seed_block_templates",
    "update_page",
    "update_page_block",
    "update_website",
    "write_export",
]
