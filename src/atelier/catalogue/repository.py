"""Repository for the CatalogItem aggregate."""

from protean.exceptions import ObjectNotFoundError

from atelier.catalogue.catalog_item import CatalogItem
from atelier.domain import atelier

# Rows fetched per round trip when scanning the catalog
SCAN_BATCH_SIZE = 100


@atelier.repository(part_of=CatalogItem)
class CatalogItemRepository:
    """Adds criteria scans to the standard CRUD operations."""

    def scan(self, **criteria):
        """Yield every item matching the equality ``criteria``, batch by batch.

        Batches are ordered by id so that offsets stay stable between round trips.
        """
        offset = 0
        while True:
            queryset = self._dao.query.order_by("id")
            if criteria:
                queryset = queryset.filter(**criteria)
            items = queryset.offset(offset).limit(SCAN_BATCH_SIZE).all().items
            yield from items
            if len(items) < SCAN_BATCH_SIZE:
                return
            offset += SCAN_BATCH_SIZE

    def find_many(self, item_ids):
        """Map item id to CatalogItem, skipping ids that no longer exist."""
        found = {}
        for item_id in item_ids:
            try:
                found[str(item_id)] = self.get(item_id)
            except ObjectNotFoundError:
                continue
        return found
