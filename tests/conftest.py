from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sitebuilder import templates_db
from sitebuilder.db import Database
from sitebuilder.models import BlockTemplate, Page, Website


@pytest.fixture
def db(tmp_path: Path) -> Iterator[Database]:
    """A migrated database in a temp file, closed after the test."""
    database = Database(db_path=tmp_path / "sitebuilder-test.db")
    database.migrate()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def website(db: Database) -> Website:
    """Create a test website."""
    from sitebuilder import websites_db

    return websites_db.create_website(db, name="Test Site", domain="test.example")


@pytest.fixture
def page(db: Database, website: Website) -> Page:
    """Create a test page in the test website."""
    from sitebuilder import pages_db

    return pages_db.create_page(db, website_id=website.id, title="Home", slug="home")


@pytest.fixture
def template(db: Database) -> BlockTemplate:
    """Seed the default templates and return the first one."""
    return templates_db.seed_block_templates(db)[0]
