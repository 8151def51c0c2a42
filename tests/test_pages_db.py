"""Tests for pages_db.py - page CRUD, sort order and the homepage flag."""

from __future__ import annotations

import pytest

from sitebuilder import blocks_db, pages_db, websites_db
from sitebuilder.db import Database
from sitebuilder.errors import NotFoundError, StorageError, ValidationError
from sitebuilder.models import BlockTemplate, Page, Website


def _homepages(db: Database, website_id: int) -> list[int]:
    return [p.id for p in pages_db.list_pages(db, website_id) if p.is_homepage]


class TestCreatePage:
    def test_create_page(self, db: Database, website: Website) -> None:
        """create_page stores all fields with unpublished defaults."""
        page = pages_db.create_page(
            db,
            website_id=website.id,
            title="About",
            slug="about",
            meta_description="About us",
            seo_title="About | Test",
            seo_keywords="about,team",
        )

        assert page.website_id == website.id
        assert page.title == "About"
        assert page.slug == "about"
        assert page.meta_description == "About us"
        assert page.seo_title == "About | Test"
        assert page.seo_keywords == "about,team"
        assert page.is_homepage is False
        assert page.is_published is False
        assert page.sort_order == 0

    def test_sort_order_follows_creation(self, db: Database, website: Website) -> None:
        """Pages are numbered 0, 1, 2 in creation order."""
        pages = [
            pages_db.create_page(db, website_id=website.id, title=f"P{i}", slug=f"p{i}")
            for i in range(3)
        ]

        assert [p.sort_order for p in pages] == [0, 1, 2]

    def test_sort_order_is_per_website(self, db: Database, website: Website) -> None:
        """Each website counts its own pages."""
        other = websites_db.create_website(db, name="Other")
        pages_db.create_page(db, website_id=website.id, title="A", slug="a")
        pages_db.create_page(db, website_id=website.id, title="B", slug="b")

        page = pages_db.create_page(db, website_id=other.id, title="C", slug="c")

        assert page.sort_order == 0

    def test_sort_order_counts_after_delete(self, db: Database, website: Website) -> None:
        """After a delete the next page takes the page count, which can repeat a value."""
        first = pages_db.create_page(db, website_id=website.id, title="A", slug="a")
        pages_db.create_page(db, website_id=website.id, title="B", slug="b")
        pages_db.delete_page(db, first.id)

        page = pages_db.create_page(db, website_id=website.id, title="C", slug="c")

        assert page.sort_order == 1

    def test_missing_website(self, db: Database) -> None:
        """A page needs an existing website."""
        with pytest.raises(NotFoundError, match="Website with id 77 does not exist"):
            pages_db.create_page(db, website_id=77, title="X", slug="x")

    @pytest.mark.parametrize("field", ["title", "slug"])
    def test_empty_required_field(self, db: Database, website: Website, field: str) -> None:
        """title and slug must be non-empty."""
        kwargs = {"title": "T", "slug": "s", field: ""}
        with pytest.raises(ValidationError):
            pages_db.create_page(db, website_id=website.id, **kwargs)

        assert pages_db.list_pages(db, website.id) == []

    def test_long_and_whitespace_strings(self, db: Database, website: Website) -> None:
        """Non-empty titles and slugs are accepted at any length."""
        page = pages_db.create_page(
            db, website_id=website.id, title="t" * 300, slug=" ", seo_title="s" * 300
        )

        assert page.title == "t" * 300
        assert page.slug == " "
        assert pages_db.update_page(db, page.id, slug="u" * 300).slug == "u" * 300

    def test_duplicate_slug_is_allowed(self, db: Database, website: Website) -> None:
        """Slug uniqueness is not enforced by the store."""
        pages_db.create_page(db, website_id=website.id, title="A", slug="same")
        pages_db.create_page(db, website_id=website.id, title="B", slug="same")

        assert len(pages_db.list_pages(db, website.id)) == 2


class TestHomepage:
    def test_new_homepage_replaces_old(self, db: Database, website: Website) -> None:
        """Creating a homepage demotes the previous one."""
        old = pages_db.create_page(db, website_id=website.id, title="Old", slug="old", is_homepage=True)
        new = pages_db.create_page(db, website_id=website.id, title="New", slug="new", is_homepage=True)

        assert pages_db.get_page(db, old.id).is_homepage is False
        assert new.is_homepage is True
        assert _homepages(db, website.id) == [new.id]

    def test_homepage_is_per_website(self, db: Database, website: Website) -> None:
        """Another website's homepage is not touched."""
        other = websites_db.create_website(db, name="Other")
        theirs = pages_db.create_page(db, website_id=other.id, title="H", slug="h", is_homepage=True)

        pages_db.create_page(db, website_id=website.id, title="H", slug="h", is_homepage=True)

        assert pages_db.get_page(db, theirs.id).is_homepage is True

    def test_non_homepage_keeps_existing_homepage(self, db: Database, website: Website) -> None:
        """A regular page does not clear the flag."""
        home = pages_db.create_page(db, website_id=website.id, title="H", slug="h", is_homepage=True)
        pages_db.create_page(db, website_id=website.id, title="X", slug="x")

        assert _homepages(db, website.id) == [home.id]

    def test_update_to_homepage_demotes_others(self, db: Database, website: Website) -> None:
        """Promoting a page through update keeps a single homepage."""
        home = pages_db.create_page(db, website_id=website.id, title="H", slug="h", is_homepage=True)
        other = pages_db.create_page(db, website_id=website.id, title="X", slug="x")

        updated = pages_db.update_page(db, other.id, is_homepage=True)

        assert updated.is_homepage is True
        assert pages_db.get_page(db, home.id).is_homepage is False
        assert _homepages(db, website.id) == [other.id]

    def test_update_homepage_to_itself(self, db: Database, website: Website) -> None:
        """Re-promoting the current homepage keeps it the homepage."""
        home = pages_db.create_page(db, website_id=website.id, title="H", slug="h", is_homepage=True)

        updated = pages_db.update_page(db, home.id, is_homepage=True)

        assert updated.is_homepage is True
        assert _homepages(db, website.id) == [home.id]


class TestGetAndListPages:
    def test_get_missing_page_returns_none(self, db: Database) -> None:
        """A missing id is not an error."""
        assert pages_db.get_page(db, 31337) is None

    def test_list_pages_in_insertion_order(self, db: Database, website: Website) -> None:
        """list_pages ignores sort_order and returns creation order."""
        first = pages_db.create_page(db, website_id=website.id, title="A", slug="a")
        second = pages_db.create_page(db, website_id=website.id, title="B", slug="b")
        pages_db.update_page(db, first.id, sort_order=10)

        assert [p.id for p in pages_db.list_pages(db, website.id)] == [first.id, second.id]


class TestUpdatePage:
    def test_partial_update(self, db: Database, page: Page) -> None:
        """Only supplied fields change and updated_at moves forward."""
        updated = pages_db.update_page(db, page.id, title="Welcome", is_published=True)

        assert updated.title == "Welcome"
        assert updated.is_published is True
        assert updated.slug == page.slug
        assert updated.sort_order == page.sort_order
        assert updated.updated_at > page.updated_at

    def test_clear_seo_fields(self, db: Database, website: Website) -> None:
        """Nullable SEO fields can be set back to None."""
        page = pages_db.create_page(
            db, website_id=website.id, title="T", slug="t", seo_title="SEO"
        )

        updated = pages_db.update_page(db, page.id, seo_title=None)

        assert updated.seo_title is None

    def test_update_missing_page(self, db: Database) -> None:
        """Updating an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            pages_db.update_page(db, 999, title="x")


class TestDeletePage:
    def test_delete_page_removes_blocks(
        self,
        db: Database,
        page: Page,
        template: BlockTemplate,
    ) -> None:
        """Deleting a page with 3 blocks leaves no blocks behind."""
        for _ in range(3):
            blocks_db.create_page_block(db, page_id=page.id, block_template_id=template.id)

        assert pages_db.delete_page(db, page.id) is True

        assert pages_db.get_page(db, page.id) is None
        assert blocks_db.list_page_blocks(db, page.id) == []

    def test_delete_missing_page(self, db: Database) -> None:
        """Deleting an unknown page reports False."""
        assert pages_db.delete_page(db, 4242) is False

    def test_delete_failure_keeps_blocks(
        self,
        db: Database,
        page: Page,
        template: BlockTemplate,
    ) -> None:
        """Blocks deleted before a failing page delete are restored."""
        block = blocks_db.create_page_block(db, page_id=page.id, block_template_id=template.id)
        with db.transaction() as conn:
            conn.execute(
                """
                CREATE TRIGGER block_page_delete BEFORE DELETE ON pages
                BEGIN SELECT RAISE(ABORT, 'page delete blocked'); END
                """
            )

        with pytest.raises(StorageError):
            pages_db.delete_page(db, page.id)

        assert pages_db.get_page(db, page.id) == page
        assert blocks_db.list_page_blocks(db, page.id) == [block]
