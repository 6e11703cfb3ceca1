"""Domain events for the CatalogItem aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from atelier.domain import atelier


@atelier.event(part_of="CatalogItem")
class CatalogItemCreated:
    """A new artwork was added to the catalog as a draft."""

    __version__ = 1

    item_id: Identifier(required=True)
    category: String(required=True)
    title: String(required=True)
    price: Integer(required=True)
    currency: String(required=True)
    created_at: DateTime(required=True)


@atelier.event(part_of="CatalogItem")
class CatalogItemPublished:
    """The artwork became visible on public catalog pages."""

    __version__ = 1

    item_id: Identifier(required=True)
    published_at: DateTime(required=True)


@atelier.event(part_of="CatalogItem")
class CatalogItemUnpublished:
    """The artwork was pulled back to draft."""

    __version__ = 1

    item_id: Identifier(required=True)
    unpublished_at: DateTime(required=True)


@atelier.event(part_of="CatalogItem")
class CatalogItemPriceChanged:
    __version__ = 1

    item_id: Identifier(required=True)
    previous_price: Integer(required=True)
    new_price: Integer(required=True)
    compare_at_price: Integer()


@atelier.event(part_of="CatalogItem")
class CatalogItemStockAdjusted:
    __version__ = 1

    item_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    status: String(required=True)
