"""Tests for assets_db.py - uploaded file metadata."""

from __future__ import annotations

import pytest

from sitebuilder import assets_db, websites_db
from sitebuilder.db import Database
from sitebuilder.errors import NotFoundError, ValidationError
from sitebuilder.models import Asset, Website


def _asset(db: Database, website_id: int, name: str = "logo.png", size: int = 2048) -> Asset:
    return assets_db.create_asset(
        db,
        website_id=website_id,
        filename=f"1700000000-{name}",
        original_name=name,
        mime_type="image/png",
        file_size=size,
        url=f"/uploads/1700000000-{name}",
    )


def test_create_asset(db: Database, website: Website) -> None:
    """All metadata fields are stored as given."""
    asset = _asset(db, website.id)

    assert asset.website_id == website.id
    assert asset.filename == "1700000000-logo.png"
    assert asset.original_name == "logo.png"
    assert asset.mime_type == "image/png"
    assert asset.file_size == 2048
    assert asset.url == "/uploads/1700000000-logo.png"


def test_create_asset_zero_size(db: Database, website: Website) -> None:
    """Empty files are allowed."""
    asset = _asset(db, website.id, size=0)

    assert asset.file_size == 0


def test_create_asset_negative_size(db: Database, website: Website) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _asset(db, website.id, size=-1)

    assert exc_info.value.field == "file_size"
    assert assets_db.list_assets(db, website.id) == []


def test_create_asset_missing_website(db: Database) -> None:
    with pytest.raises(NotFoundError, match="Website with id 5 does not exist"):
        _asset(db, 5)


def test_list_assets_per_website_in_creation_order(db: Database, website: Website) -> None:
    """Each website sees only its own assets, oldest first."""
    other = websites_db.create_website(db, name="Other")
    first = _asset(db, website.id, "a.png")
    _asset(db, other.id, "b.png")
    third = _asset(db, website.id, "c.png")

    assert [a.id for a in assets_db.list_assets(db, website.id)] == [first.id, third.id]
    assert len(assets_db.list_assets(db, other.id)) == 1


def test_delete_asset(db: Database, website: Website) -> None:
    asset = _asset(db, website.id)

    assert assets_db.delete_asset(db, asset.id) is True
    assert assets_db.list_assets(db, website.id) == []


def test_delete_missing_asset(db: Database) -> None:
    """Deleting an unknown asset reports False."""
    assert assets_db.delete_asset(db, 777) is False
