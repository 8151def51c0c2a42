"""Command line access to the site builder database.

Usage:
    sitebuilder [--db PATH] COMMAND [ARGS...]

Commands:
    init                              Create the schema (and seed templates)
    seed-templates                    Install the default block templates
    health                            Show database health
    websites                          List all websites
    create-website NAME [--domain D]  Create a website
    delete-website ID                 Delete a website with everything it owns
    pages WEBSITE_ID                  List pages of a website
    create-page WEBSITE_ID TITLE SLUG [--homepage]
                                      Create a page
    blocks PAGE_ID                    List blocks of a page in order
    templates                         List block templates
    export WEBSITE_ID [--out DIR]     Print the export JSON, or write it to DIR
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import assets_db, blocks_db, pages_db, templates_db, websites_db
from .db import Database
from .errors import SiteBuilderError
from .export import export_website, write_export
from .health import healthcheck
from .logging_setup import configure_logging
from .settings import settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitebuilder",
        description="Manage websites, pages, blocks and assets",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=settings.db_path,
        help=f"Database file (default: {settings.db_path})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init")
    sub.add_parser("seed-templates")
    sub.add_parser("health")
    sub.add_parser("websites")

    p = sub.add_parser("create-website")
    p.add_argument("name")
    p.add_argument("--domain")

    p = sub.add_parser("delete-website")
    p.add_argument("website_id", type=int)

    p = sub.add_parser("pages")
    p.add_argument("website_id", type=int)

    p = sub.add_parser("create-page")
    p.add_argument("website_id", type=int)
    p.add_argument("title")
    p.add_argument("slug")
    p.add_argument("--homepage", action="store_true")

    p = sub.add_parser("blocks")
    p.add_argument("page_id", type=int)

    sub.add_parser("templates")

    p = sub.add_parser("export")
    p.add_argument("website_id", type=int)
    p.add_argument("--out", type=Path)

    return parser


def cmd_websites(db: Database) -> int:
    """List all websites."""
    websites = websites_db.list_websites(db)

    print(f"\n{'ID':<6} {'Name':<30} {'Domain':<30} {'Published'}")
    print("-" * 78)
    for website in websites:
        published = "  *" if website.is_published else ""
        print(f"{website.id:<6} {website.name:<30} {website.domain or '-':<30} {published}")

    print(f"\nTotal: {len(websites)} websites")
    return 0


def cmd_pages(db: Database, website_id: int) -> int:
    """List pages of a website."""
    pages = pages_db.list_pages(db, website_id)

    print(f"\n{'ID':<6} {'Order':<6} {'Title':<30} {'Slug':<25} {'Home'}")
    print("-" * 78)
    for page in pages:
        home = "  *" if page.is_homepage else ""
        print(f"{page.id:<6} {page.sort_order:<6} {page.title:<30} {page.slug:<25} {home}")

    assets = assets_db.list_assets(db, website_id)
    print(f"\nTotal: {len(pages)} pages, {len(assets)} assets in website {website_id}")
    return 0


def cmd_blocks(db: Database, page_id: int) -> int:
    """List blocks of a page in sort order."""
    templates = {t.id: t for t in templates_db.list_block_templates(db)}
    blocks = blocks_db.list_page_blocks(db, page_id)

    print(f"\nBlocks in page {page_id}:")
    print("-" * 60)
    for block in blocks:
        template = templates.get(block.block_template_id)
        name = template.name if template else f"template {block.block_template_id}"
        print(f"{block.sort_order:>4}  #{block.id:<6} {name}")

    print(f"\nTotal: {len(blocks)} blocks")
    return 0


def cmd_templates(db: Database) -> int:
    """List block templates."""
    templates = templates_db.list_block_templates(db)

    print(f"\n{'ID':<6} {'Name':<25} {'Category':<15} {'Description'}")
    print("-" * 78)
    for template in templates:
        print(f"{template.id:<6} {template.name:<25} {template.category:<15} {template.description or ''}")

    print(f"\nTotal: {len(templates)} templates")
    return 0


def _dispatch(db: Database, args: argparse.Namespace) -> int:
    command = args.command

    if command == "init":
        if settings.seed_templates:
            templates_db.seed_block_templates(db)
        print(f"Initialized {db.db_path}")
        return 0
    if command == "seed-templates":
        templates = templates_db.seed_block_templates(db)
        print(f"{len(templates)} block templates installed")
        return 0
    if command == "health":
        print(json.dumps(healthcheck(db), indent=2))
        return 0
    if command == "websites":
        return cmd_websites(db)
    if command == "create-website":
        website = websites_db.create_website(db, name=args.name, domain=args.domain)
        print(f"Created website: {website.id}")
        print(f"Name: {website.name}")
        return 0
    if command == "delete-website":
        if not websites_db.delete_website(db, args.website_id):
            print(f"Website {args.website_id} not found", file=sys.stderr)
            return 1
        print(f"Deleted website: {args.website_id}")
        return 0
    if command == "pages":
        return cmd_pages(db, args.website_id)
    if command == "create-page":
        page = pages_db.create_page(
            db,
            website_id=args.website_id,
            title=args.title,
            slug=args.slug,
            is_homepage=args.homepage,
        )
        print(f"Created page: {page.id}")
        print(f"Slug: {page.slug}")
        print(f"In website: {page.website_id}")
        return 0
    if command == "blocks":
        return cmd_blocks(db, args.page_id)
    if command == "templates":
        return cmd_templates(db)
    if command == "export":
        if args.out is None:
            print(export_website(db, args.website_id).to_json())
        else:
            path = write_export(db, args.website_id, args.out)
            print(f"Wrote {path}")
        return 0

    print(f"Unknown command: {command}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    db = Database(args.db)
    try:
        db.migrate()
        return _dispatch(db, args)
    except SiteBuilderError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
