"""Catalog store port and its Protean-backed adapter.

The store is the only place that touches persisted catalog rows while
browsing. Everything above it (listing, pager, scroll coordinator) speaks
in ``CatalogQuery`` and opaque cursors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from atelier.catalogue.browsing.cursor import decode_cursor, encode_cursor, sort_key
from atelier.catalogue.browsing.filters import CatalogQuery
from atelier.catalogue.catalog_item import CatalogItem


@dataclass(frozen=True)
class CatalogPage:
    """One page of catalog items. ``next_cursor`` is None once the listing is exhausted."""

    items: list = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def exhausted(self) -> bool:
        return self.next_cursor is None


class CatalogStore(ABC):
    """Abstract catalog store interface."""

    @abstractmethod
    def query_page(self, query: CatalogQuery, cursor: str | None, page_size: int) -> CatalogPage:
        """Return the page following ``cursor`` for ``query``."""
        ...

    @abstractmethod
    def get_by_id(self, item_id: str) -> CatalogItem:
        """Return one item. Raises ObjectNotFoundError when it does not exist."""
        ...


class RepositoryCatalogStore(CatalogStore):
    """Catalog store over the CatalogItem repository.

    Equality predicates go to the database; the published gate, the naive
    search and the keyset continuation run over the scanned rows.
    """

    def query_page(self, query: CatalogQuery, cursor: str | None, page_size: int) -> CatalogPage:
        after = decode_cursor(cursor, query.fingerprint) if cursor else None
        repo = current_domain.repository_for(CatalogItem)

        candidates = []
        for item in repo.scan(**query.criteria):
            if query.published_only and not item.is_published:
                continue
            if query.search_term and not item.matches_search(query.search_term):
                continue
            if after is not None and sort_key(item) >= after:
                continue
            candidates.append(item)

        candidates.sort(key=sort_key, reverse=True)
        # One extra row tells us whether another page exists
        window = candidates[: page_size + 1]
        items = window[:page_size]
        next_cursor = encode_cursor(items[-1], query.fingerprint) if len(window) > page_size else None
        return CatalogPage(items=items, next_cursor=next_cursor)

    def get_by_id(self, item_id: str) -> CatalogItem:
        return current_domain.repository_for(CatalogItem).get(item_id)
