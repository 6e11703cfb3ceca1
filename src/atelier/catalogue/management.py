"""Catalog item management — commands and handler.

These commands are the narrow seam through which the admin collaborator
edits catalog rows; the storefront core only reads catalog items.
"""

import json

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from atelier.catalogue.catalog_item import CatalogItem
from atelier.domain import atelier


@atelier.command(part_of="CatalogItem")
class CreateCatalogItem:
    category: String(required=True)
    translations: Text(required=True)  # JSON: {language: {title, description, material}}
    price: Integer(required=True, min_value=0)
    currency: String(max_length=3, default="EUR")
    compare_at_price: Integer()
    images: Text()  # JSON: list of {url, thumbnail_url}
    status: String()
    stock: Integer(default=1)
    tags: Text()  # JSON: list of strings
    keywords: Text()  # JSON: list of strings


@atelier.command(part_of="CatalogItem")
class PublishCatalogItem:
    item_id: Identifier(required=True)
    published_at: DateTime()


@atelier.command(part_of="CatalogItem")
class UnpublishCatalogItem:
    item_id: Identifier(required=True)


@atelier.command(part_of="CatalogItem")
class ChangeCatalogItemPrice:
    item_id: Identifier(required=True)
    price: Integer(required=True, min_value=0)
    compare_at_price: Integer()


@atelier.command(part_of="CatalogItem")
class AdjustCatalogItemStock:
    item_id: Identifier(required=True)
    stock: Integer(required=True)


def _json(value, default):
    if value is None:
        return default
    return json.loads(value) if isinstance(value, str) else value


@atelier.command_handler(part_of=CatalogItem)
class ManageCatalogItemHandler:
    @handle(CreateCatalogItem)
    def create_item(self, command):
        item = CatalogItem.create(
            category=command.category,
            translations=_json(command.translations, {}),
            price=command.price,
            currency=command.currency or "EUR",
            compare_at_price=command.compare_at_price,
            images=_json(command.images, []),
            status=command.status or "available",
            stock=command.stock if command.stock is not None else 1,
            tags=_json(command.tags, []),
            keywords=_json(command.keywords, []),
        )
        current_domain.repository_for(CatalogItem).add(item)
        return str(item.id)

    @handle(PublishCatalogItem)
    def publish_item(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.publish(published_at=command.published_at)
        repo.add(item)

    @handle(UnpublishCatalogItem)
    def unpublish_item(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.unpublish()
        repo.add(item)

    @handle(ChangeCatalogItemPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.change_price(amount=command.price, compare_at=command.compare_at_price)
        repo.add(item)

    @handle(AdjustCatalogItemStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.adjust_stock(command.stock)
        repo.add(item)
