"""Wishlist aggregate — the artworks a customer saved for later, one per user."""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier

from atelier.domain import atelier
from atelier.ordering.wishlist.events import WishlistItemAdded, WishlistItemRemoved


@atelier.entity(part_of="Wishlist")
class WishlistItem:
    product_id = Identifier(required=True)
    added_at = DateTime()


@atelier.aggregate
class Wishlist:
    owner_id = Identifier(identifier=True, required=True)
    items = HasMany(WishlistItem)
    updated_at = DateTime()

    @classmethod
    def create(cls, owner_id):
        return cls(owner_id=owner_id, updated_at=datetime.now(UTC))

    @property
    def product_ids(self):
        return [str(item.product_id) for item in self.items]

    def has(self, product_id):
        return str(product_id) in self.product_ids

    def add(self, product_id):
        """Save a product. Saving one that is already there changes nothing."""
        if self.has(product_id):
            return False

        now = datetime.now(UTC)
        self.add_items(WishlistItem(product_id=product_id, added_at=now))
        self.updated_at = now
        self.raise_(WishlistItemAdded(owner_id=str(self.owner_id), product_id=str(product_id)))
        return True

    def remove(self, product_id):
        item = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(WishlistItemRemoved(owner_id=str(self.owner_id), product_id=str(product_id)))
        return True

    def toggle(self, product_id):
        """Add the product if absent, remove it if present. Returns whether it is now saved."""
        if self.has(product_id):
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def clear(self):
        for item in list(self.items):
            self.remove(item.product_id)
