"""CatalogItem aggregate root with translation and image entities.

A CatalogItem is one artwork. It is a draft until ``published_at`` is set;
only published items are eligible for public catalog pages. Prices are kept
as integer minor units (cents) so order totals never go through floats.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, List, String, Text, ValueObject

from atelier.catalogue.events import (
    CatalogItemCreated,
    CatalogItemPriceChanged,
    CatalogItemPublished,
    CatalogItemStockAdjusted,
    CatalogItemUnpublished,
)
from atelier.domain import atelier


class Category(Enum):
    PAINTING = "painting"
    DRAWING = "drawing"
    PRINT = "print"
    SCULPTURE = "sculpture"
    CERAMIC = "ceramic"
    TEXTILE = "textile"


class ItemStatus(Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    MADE_TO_ORDER = "made_to_order"


@atelier.value_object(part_of="CatalogItem")
class Price:
    """Selling price in minor units, with an optional struck-through compare-at price."""

    amount: Integer(required=True, min_value=0)
    currency: String(max_length=3, default="EUR")
    compare_at: Integer(min_value=0)

    @invariant.post
    def compare_at_must_exceed_amount(self):
        if self.compare_at is not None and self.compare_at <= self.amount:
            raise ValidationError({"compare_at": ["Compare-at price must be higher than the selling price"]})


@atelier.entity(part_of="CatalogItem")
class ItemTranslation:
    language: String(required=True, max_length=5)
    title: String(required=True, max_length=255)
    description: Text()
    material: String(max_length=255)


@atelier.entity(part_of="CatalogItem")
class ItemImage:
    url: String(required=True, max_length=500)
    thumbnail_url: String(required=True, max_length=500)
    position: Integer(default=0)


@atelier.aggregate
class CatalogItem:
    """An artwork offered by the atelier."""

    category: String(required=True, choices=Category)
    translations: HasMany(ItemTranslation)
    price: ValueObject(Price, required=True)
    images: HasMany(ItemImage)
    status: String(choices=ItemStatus, default=ItemStatus.AVAILABLE.value)
    stock: Integer(default=1, min_value=0)
    tags: List(content_type=String)
    keywords: List(content_type=String)
    published_at: DateTime()
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def must_have_at_least_one_translation(self):
        if not self.translations:
            raise ValidationError({"translations": ["At least one translation is required"]})

    @invariant.post
    def translation_languages_must_be_unique(self):
        languages = [t.language for t in self.translations]
        if len(languages) != len(set(languages)):
            raise ValidationError({"translations": ["Only one translation per language is allowed"]})

    @classmethod
    def create(
        cls,
        category,
        translations,
        price,
        currency="EUR",
        compare_at_price=None,
        images=None,
        status=ItemStatus.AVAILABLE.value,
        stock=1,
        tags=None,
        keywords=None,
    ):
        """Create a draft item.

        Args:
            translations: Dict of language code to a dict with title,
                description and material.
            images: List of dicts with url and thumbnail_url, in display order.
        """
        now = datetime.now(UTC)
        item = cls(
            category=category,
            translations=[ItemTranslation(language=language, **fields) for language, fields in translations.items()],
            price=Price(amount=price, currency=currency, compare_at=compare_at_price),
            images=[
                ItemImage(url=image["url"], thumbnail_url=image["thumbnail_url"], position=position)
                for position, image in enumerate(images or [])
            ],
            status=status,
            stock=stock,
            tags=list(tags or []),
            keywords=list(keywords or []),
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            CatalogItemCreated(
                item_id=str(item.id),
                category=item.category,
                title=item.translations[0].title,
                price=item.price.amount,
                currency=item.price.currency,
                created_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def is_published(self):
        return self.published_at is not None

    def translation_for(self, language, fallback_language="en"):
        """Resolve a translation: requested language, then fallback, then first."""
        by_language = {t.language: t for t in self.translations}
        return by_language.get(language) or by_language.get(fallback_language) or self.translations[0]

    def title_for(self, language, fallback_language="en"):
        return self.translation_for(language, fallback_language).title

    @property
    def primary_image(self):
        if not self.images:
            return None
        return min(self.images, key=lambda image: image.position or 0)

    def matches_search(self, term):
        """Naive case-insensitive match on titles, tags and keywords."""
        needle = term.strip().lower()
        haystack = [t.title for t in self.translations]
        haystack.extend(self.tags or [])
        haystack.extend(self.keywords or [])
        return any(needle in value.lower() for value in haystack)

    def can_fulfil(self, quantity):
        if ItemStatus(self.status) == ItemStatus.SOLD:
            return False
        if ItemStatus(self.status) == ItemStatus.MADE_TO_ORDER:
            return True
        return (self.stock or 0) >= quantity

    # -------------------------------------------------------------------
    # Mutations (admin collaborator)
    # -------------------------------------------------------------------
    def publish(self, published_at=None):
        if self.is_published:
            raise ValidationError({"published_at": ["Item is already published"]})

        self.published_at = published_at or datetime.now(UTC)
        self.updated_at = datetime.now(UTC)
        self.raise_(CatalogItemPublished(item_id=str(self.id), published_at=self.published_at))

    def unpublish(self):
        if not self.is_published:
            raise ValidationError({"published_at": ["Item is not published"]})

        self.published_at = None
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(CatalogItemUnpublished(item_id=str(self.id), unpublished_at=now))

    def change_price(self, amount, compare_at=None):
        previous = self.price.amount
        self.price = Price(amount=amount, currency=self.price.currency, compare_at=compare_at)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CatalogItemPriceChanged(
                item_id=str(self.id),
                previous_price=previous,
                new_price=amount,
                compare_at_price=compare_at,
            )
        )

    def adjust_stock(self, new_stock):
        """Set the stock count. An available piece with no stock left is sold."""
        if new_stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous = self.stock
        self.stock = new_stock
        if new_stock == 0 and ItemStatus(self.status) == ItemStatus.AVAILABLE:
            self.status = ItemStatus.SOLD.value
        elif new_stock > 0 and ItemStatus(self.status) == ItemStatus.SOLD:
            self.status = ItemStatus.AVAILABLE.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CatalogItemStockAdjusted(
                item_id=str(self.id),
                previous_stock=previous,
                new_stock=new_stock,
                status=self.status,
            )
        )
