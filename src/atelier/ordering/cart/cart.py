"""Shopping Cart aggregate — the lines a shopper intends to buy.

The cart is a plain structure of (product, quantity) lines. A guest's cart is
held by the client and never persisted; a signed-in customer's cart is keyed
by their user id and persisted through the cart commands. Prices are not
stored here: ``subtotal`` is always computed against current catalog prices,
and only the Order freezes them.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from atelier.domain import atelier
from atelier.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    GuestCartMerged,
)


@atelier.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@atelier.aggregate
class ShoppingCart:
    owner_id = Identifier(identifier=True, required=True)  # user id, or guest session id
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id):
        now = datetime.now(UTC)
        return cls(owner_id=owner_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    @property
    def is_empty(self):
        return not self.lines

    @property
    def item_count(self):
        return sum(line.quantity for line in self.lines)

    def subtotal(self, price_of):
        """Sum of quantity x current unit price.

        Args:
            price_of: Mapping (or callable) from product id to its current
                price in minor units.
        """
        lookup = price_of if callable(price_of) else price_of.__getitem__
        return sum(line.quantity * lookup(str(line.product_id)) for line in self.lines)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add(self, product_id, quantity=1):
        """Add a product, or increase its quantity if a line already exists."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_lines(CartLine(product_id=product_id, quantity=quantity, added_at=now))
            new_quantity = quantity
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                owner_id=str(self.owner_id),
                product_id=str(product_id),
                quantity_added=quantity,
                new_quantity=new_quantity,
            )
        )

    def remove(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(owner_id=str(self.owner_id), product_id=str(product_id)))

    def set_quantity(self, product_id, quantity):
        """Set a line's quantity; zero removes the line."""
        if quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})
        if quantity == 0:
            self.remove(product_id)
            return

        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartQuantityUpdated(
                owner_id=str(self.owner_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def clear(self):
        removed = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(CartCleared(owner_id=str(self.owner_id), lines_removed=removed, cleared_at=now))

    def merge_guest_cart(self, guest_lines):
        """Fold a guest session's lines into this cart.

        Args:
            guest_lines: List of dicts with product_id and quantity.
        """
        now = datetime.now(UTC)
        for guest_line in guest_lines:
            existing = self.line_for(guest_line["product_id"])
            if existing:
                existing.quantity += guest_line["quantity"]
            else:
                self.add_lines(
                    CartLine(
                        product_id=guest_line["product_id"],
                        quantity=guest_line["quantity"],
                        added_at=now,
                    )
                )
        self.updated_at = now

        self.raise_(GuestCartMerged(owner_id=str(self.owner_id), lines_merged=len(guest_lines)))
