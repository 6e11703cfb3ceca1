"""Catalog listing — the produced ``list_catalog_page`` interface and the per-session pager."""

import asyncio

from protean.exceptions import ValidationError

from atelier.catalogue.browsing.filters import CatalogFilters, CatalogQueryBuilder
from atelier.catalogue.browsing.store import CatalogPage, CatalogStore, RepositoryCatalogStore
from atelier.settings import PAGE_SIZE
from atelier.utils.logging import get_logger

logger = get_logger(__name__)

_current_store: CatalogStore | None = None


def get_store() -> CatalogStore:
    """Return the current catalog store. Defaults to the repository-backed store."""
    global _current_store
    if _current_store is None:
        _current_store = RepositoryCatalogStore()
    return _current_store


def set_store(store: CatalogStore) -> None:
    """Override the active catalog store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    global _current_store
    _current_store = None


class CatalogFetchError(Exception):
    """The catalog store failed to produce a page."""


def list_catalog_page(filters: CatalogFilters, cursor: str | None = None, page_size: int = PAGE_SIZE) -> CatalogPage:
    """Fetch one page of the catalog for ``filters``.

    A search term under the minimum length answers an empty, exhausted page
    without querying the store. Invalid filters and foreign cursors raise
    ValidationError; any other store failure surfaces as CatalogFetchError.
    """
    query = CatalogQueryBuilder(filters).build()
    if query is None:
        return CatalogPage(items=[], next_cursor=None)

    try:
        return get_store().query_page(query, cursor, page_size)
    except ValidationError:
        raise
    except Exception as exc:
        logger.error("catalog_fetch_failed", filters=filters.fingerprint(), error=str(exc))
        raise CatalogFetchError(str(exc)) from exc


class CatalogPager:
    """Walks the pages of one filter session.

    Holds the cursor, never hands out an item twice, and coalesces
    overlapping ``next_page()`` calls into a single store request.
    """

    def __init__(self, filters: CatalogFilters, page_size: int = PAGE_SIZE):
        self.filters = filters
        self.page_size = page_size
        self._cursor = None
        self._exhausted = False
        self._seen = set()
        self._inflight = None
        self.pages_fetched = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def fetch_next(self) -> CatalogPage:
        """Fetch the following page synchronously."""
        if self._exhausted:
            return CatalogPage(items=[], next_cursor=None)

        page = list_catalog_page(self.filters, self._cursor, self.page_size)
        self.pages_fetched += 1

        fresh = []
        for item in page.items:
            if str(item.id) in self._seen:
                continue
            self._seen.add(str(item.id))
            fresh.append(item)

        self._cursor = page.next_cursor
        self._exhausted = page.next_cursor is None
        return CatalogPage(items=fresh, next_cursor=page.next_cursor)

    async def next_page(self) -> CatalogPage:
        """Fetch the following page; concurrent callers share one request."""
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._inflight)

    async def _load(self) -> CatalogPage:
        # The store call blocks; run it off the event loop. The copied context carries the domain.
        try:
            return await asyncio.to_thread(self.fetch_next)
        finally:
            self._inflight = None
