"""Application tests for keyset pagination over the repository-backed store."""

import math
from datetime import UTC, datetime, timedelta

import pytest

from atelier.catalogue.browsing.cursor import StaleCursorError
from atelier.catalogue.browsing.filters import CatalogFilters
from atelier.catalogue.browsing.listing import list_catalog_page
from atelier.settings import PAGE_SIZE

BASE = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture()
def published_catalog(make_catalog_item):
    """27 published paintings, one a day, plus a draft."""
    items = [make_catalog_item(title=f"Painting {n:02d}", published_at=BASE + timedelta(days=n)) for n in range(27)]
    make_catalog_item(title="Unfinished", published_at=None)
    return items


def _walk(filters):
    pages, cursor = [], None
    while True:
        page = list_catalog_page(filters, cursor)
        pages.append(page)
        if page.exhausted:
            return pages
        cursor = page.next_cursor


class TestPageOrdering:
    def test_first_page_is_newest_first(self, published_catalog):
        page = list_catalog_page(CatalogFilters())
        titles = [item.title_for("en") for item in page.items]
        assert titles[0] == "Painting 26"
        assert titles == sorted(titles, reverse=True)
        assert len(page.items) == PAGE_SIZE

    def test_ties_on_dates_break_by_id(self, make_catalog_item):
        same_day = BASE + timedelta(days=3)
        items = [make_catalog_item(title=f"Twin {n}", published_at=same_day, created_at=same_day) for n in range(3)]
        page = list_catalog_page(CatalogFilters())
        assert [str(item.id) for item in page.items] == sorted((str(item.id) for item in items), reverse=True)


class TestPageWalk:
    def test_pages_are_disjoint_and_complete(self, published_catalog):
        pages = _walk(CatalogFilters())
        seen = [str(item.id) for page in pages for item in page.items]
        assert len(seen) == len(set(seen)) == 27
        assert len(pages) == math.ceil(27 / PAGE_SIZE)

    def test_last_page_has_no_cursor(self, published_catalog):
        pages = _walk(CatalogFilters())
        assert pages[-1].next_cursor is None
        assert len(pages[-1].items) == 27 - 2 * PAGE_SIZE

    def test_exact_multiple_of_page_size_needs_no_empty_page(self, make_catalog_item):
        for n in range(PAGE_SIZE):
            make_catalog_item(title=f"Print {n}", published_at=BASE + timedelta(days=n))
        page = list_catalog_page(CatalogFilters())
        assert len(page.items) == PAGE_SIZE
        assert page.exhausted

    def test_publishing_during_walk_does_not_repeat_items(self, published_catalog, make_catalog_item):
        first = list_catalog_page(CatalogFilters())
        make_catalog_item(title="Fresh", published_at=BASE + timedelta(days=100))
        second = list_catalog_page(CatalogFilters(), first.next_cursor)
        assert not {str(i.id) for i in first.items} & {str(i.id) for i in second.items}


class TestPublishedGate:
    def test_drafts_never_listed(self, published_catalog):
        titles = {item.title_for("en") for page in _walk(CatalogFilters()) for item in page.items}
        assert "Unfinished" not in titles

    def test_drafts_listed_when_gate_lifted(self, published_catalog):
        pages = _walk(CatalogFilters(published_only=False))
        assert sum(len(page.items) for page in pages) == 28


class TestFiltersAndSearch:
    def test_category_filter(self, make_catalog_item):
        make_catalog_item(title="Bowl", category="ceramic")
        make_catalog_item(title="Portrait", category="painting")
        page = list_catalog_page(CatalogFilters(category="ceramic"))
        assert [item.title_for("en") for item in page.items] == ["Bowl"]

    def test_status_filter(self, make_catalog_item):
        make_catalog_item(title="Commission", status="made_to_order")
        make_catalog_item(title="Original")
        page = list_catalog_page(CatalogFilters(status="made_to_order"))
        assert [item.title_for("en") for item in page.items] == ["Commission"]

    def test_search_matches_tags(self, make_catalog_item):
        make_catalog_item(title="Harbour", tags=["seascape"])
        make_catalog_item(title="Portrait")
        page = list_catalog_page(CatalogFilters(search_term="seas"))
        assert [item.title_for("en") for item in page.items] == ["Harbour"]

    def test_zero_matches_is_an_empty_exhausted_page(self, published_catalog):
        page = list_catalog_page(CatalogFilters(search_term="sculpture of nothing"))
        assert page.items == []
        assert page.exhausted


class TestStaleCursors:
    def test_cursor_from_other_filters_rejected(self, published_catalog):
        cursor = list_catalog_page(CatalogFilters()).next_cursor
        with pytest.raises(StaleCursorError):
            list_catalog_page(CatalogFilters(category="painting"), cursor)
