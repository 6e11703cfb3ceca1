"""Catalog filters and the query they compose into."""

import hashlib
import json
from dataclasses import dataclass, field, replace

from protean.exceptions import ValidationError

from atelier.catalogue.catalog_item import Category, ItemStatus
from atelier.settings import MIN_SEARCH_LENGTH


@dataclass(frozen=True)
class CatalogFilters:
    """What a shopper asked to see. Changing any field starts a new filter session."""

    category: str | None = None
    status: str | None = None
    search_term: str | None = None
    published_only: bool = True

    @property
    def normalized_search(self) -> str | None:
        if self.search_term is None:
            return None
        term = self.search_term.strip()
        return term or None

    @property
    def search_too_short(self) -> bool:
        term = self.normalized_search
        return term is not None and len(term) < MIN_SEARCH_LENGTH

    def fingerprint(self) -> str:
        """Stable digest identifying this filter set; cursors are bound to it."""
        payload = json.dumps(
            {
                "category": self.category,
                "status": self.status,
                "search": (self.normalized_search or "").lower() or None,
                "published_only": self.published_only,
            },
            sort_keys=True,
        )
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True)
class CatalogQuery:
    """A single store query: equality predicates, the published gate and a search term."""

    criteria: dict = field(default_factory=dict)
    published_only: bool = True
    search_term: str | None = None
    fingerprint: str = ""


class CatalogQueryBuilder:
    """Fluent builder composing category, status and search predicates with the published gate.

    Each step returns a new builder; builders are safe to share between
    requests.
    """

    def __init__(self, filters: CatalogFilters | None = None):
        self._filters = filters or CatalogFilters()

    @property
    def filters(self) -> CatalogFilters:
        return self._filters

    def in_category(self, category: str | None) -> "CatalogQueryBuilder":
        return CatalogQueryBuilder(replace(self._filters, category=category))

    def with_status(self, status: str | None) -> "CatalogQueryBuilder":
        return CatalogQueryBuilder(replace(self._filters, status=status))

    def matching(self, search_term: str | None) -> "CatalogQueryBuilder":
        return CatalogQueryBuilder(replace(self._filters, search_term=search_term))

    def include_drafts(self) -> "CatalogQueryBuilder":
        return CatalogQueryBuilder(replace(self._filters, published_only=False))

    def build(self) -> CatalogQuery | None:
        """Compose the query, or return None when the search term is too short to issue one."""
        filters = self._filters
        errors = {}
        if filters.category is not None and filters.category not in {c.value for c in Category}:
            errors["category"] = [f"Unknown category: {filters.category}"]
        if filters.status is not None and filters.status not in {s.value for s in ItemStatus}:
            errors["status"] = [f"Unknown status: {filters.status}"]
        if errors:
            raise ValidationError(errors)

        if filters.search_too_short:
            return None

        criteria = {}
        if filters.category is not None:
            criteria["category"] = filters.category
        if filters.status is not None:
            criteria["status"] = filters.status

        return CatalogQuery(
            criteria=criteria,
            published_only=filters.published_only,
            search_term=filters.normalized_search,
            fingerprint=filters.fingerprint(),
        )
