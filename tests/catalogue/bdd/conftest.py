"""Shared BDD fixtures and step definitions for catalog browsing."""

from datetime import UTC, datetime, timedelta

import pytest
from pytest_bdd import given, parsers, then

from atelier.catalogue.browsing.listing import set_store
from atelier.catalogue.browsing.store import RepositoryCatalogStore

BASE = datetime(2024, 1, 1, tzinfo=UTC)


class CountingStore(RepositoryCatalogStore):
    def __init__(self):
        self.calls = 0

    def query_page(self, query, cursor, page_size):
        self.calls += 1
        return super().query_page(query, cursor, page_size)


@pytest.fixture()
def store():
    store = CountingStore()
    set_store(store)
    return store


@pytest.fixture()
def browsing():
    """What the shopper saw: items shown and pages loaded."""
    return {"items": [], "pages": 0}


@given(parsers.cfparse("{count:d} published paintings"))
def _(make_catalog_item, count):
    for n in range(count):
        make_catalog_item(title=f"Painting {n:02d}", published_at=BASE + timedelta(days=n))


@given(parsers.cfparse("{count:d} draft paintings"))
def _(make_catalog_item, count):
    for n in range(count):
        make_catalog_item(title=f"Draft {n:02d}", published_at=None)


@given(parsers.cfparse("{count:d} published ceramics"))
def _(make_catalog_item, count):
    for n in range(count):
        make_catalog_item(title=f"Bowl {n:02d}", category="ceramic", published_at=BASE + timedelta(hours=n))


@then(parsers.cfparse("{count:d} distinct artworks were shown"))
def _(browsing, count):
    ids = [str(item.id) for item in browsing["items"]]
    assert len(ids) == len(set(ids)) == count


@then("no artworks are shown")
def _(browsing):
    assert browsing["items"] == []
