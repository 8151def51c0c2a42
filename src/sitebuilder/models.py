"""Data models for websites, pages, block templates, page blocks and assets.

Rows come out of SQLite as ``sqlite3.Row``; ``from_row`` turns them into these
dataclasses and ``to_dict`` turns them back into JSON-ready dictionaries.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from dateutil.parser import isoparse


class _Unset:
    """Marker for "field not provided" in partial updates.

    ``None`` is a real value for nullable columns, so it cannot double as
    the "leave unchanged" marker.
    """

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp."""
    return isoparse(value)


def _load_map(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    return json.loads(raw)


@dataclass
class Website:
    """Top-level owned unit containing pages and assets."""

    id: int
    name: str
    domain: str | None
    is_published: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "is_published": self.is_published,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Website:
        return cls(
            id=row["id"],
            name=row["name"],
            domain=row["domain"],
            is_published=bool(row["is_published"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


@dataclass
class Page:
    """A single addressable page (by slug) within a website."""

    id: int
    website_id: int
    title: str
    slug: str
    meta_description: str | None
    seo_title: str | None
    seo_keywords: str | None
    is_homepage: bool
    sort_order: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "website_id": self.website_id,
            "title": self.title,
            "slug": self.slug,
            "meta_description": self.meta_description,
            "seo_title": self.seo_title,
            "seo_keywords": self.seo_keywords,
            "is_homepage": self.is_homepage,
            "sort_order": self.sort_order,
            "is_published": self.is_published,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Page:
        return cls(
            id=row["id"],
            website_id=row["website_id"],
            title=row["title"],
            slug=row["slug"],
            meta_description=row["meta_description"],
            seo_title=row["seo_title"],
            seo_keywords=row["seo_keywords"],
            is_homepage=bool(row["is_homepage"]),
            sort_order=row["sort_order"],
            is_published=bool(row["is_published"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


@dataclass
class BlockTemplate:
    """Reusable content-block definition shared by all websites.

    ``default_content`` holds the default field values and
    ``settings_schema`` describes the configurable settings, e.g.
    ``{"textAlign": {"type": "select", "options": ["left", "center"]}}``.
    Neither map has a fixed schema.
    """

    id: int
    name: str
    category: str
    description: str | None
    default_content: dict[str, Any] = field(default_factory=dict)
    settings_schema: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "default_content": self.default_content,
            "settings_schema": self.settings_schema,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> BlockTemplate:
        return cls(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            description=row["description"],
            default_content=_load_map(row["default_content"]),
            settings_schema=_load_map(row["settings_schema"]),
            created_at=parse_timestamp(row["created_at"]),
        )


@dataclass
class PageBlock:
    """A per-page instance of a block template with its own content and position."""

    id: int
    page_id: int
    block_template_id: int
    content: dict[str, Any]
    settings: dict[str, Any]
    sort_order: int
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "page_id": self.page_id,
            "block_template_id": self.block_template_id,
            "content": self.content,
            "settings": self.settings,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> PageBlock:
        return cls(
            id=row["id"],
            page_id=row["page_id"],
            block_template_id=row["block_template_id"],
            content=_load_map(row["content"]),
            settings=_load_map(row["settings"]),
            sort_order=row["sort_order"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


@dataclass
class Asset:
    """Metadata for an uploaded file; the bytes live elsewhere."""

    id: int
    website_id: int
    filename: str
    original_name: str
    mime_type: str
    file_size: int
    url: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "website_id": self.website_id,
            "filename": self.filename,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "file_size": self.file_size,
            "url": self.url,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Asset:
        return cls(
            id=row["id"],
            website_id=row["website_id"],
            filename=row["filename"],
            original_name=row["original_name"],
            mime_type=row["mime_type"],
            file_size=row["file_size"],
            url=row["url"],
            created_at=parse_timestamp(row["created_at"]),
        )


@dataclass
class WebsiteExport:
    """Denormalized, read-only snapshot of one website's content graph."""

    website: Website
    pages: list[Page] = field(default_factory=list)
    blocks: list[PageBlock] = field(default_factory=list)
    assets: list[Asset] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "website": self.website.to_dict(),
            "pages": [page.to_dict() for page in self.pages],
            "blocks": [block.to_dict() for block in self.blocks],
            "assets": [asset.to_dict() for asset in self.assets],
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
