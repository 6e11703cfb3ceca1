"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from atelier.domain import atelier


@atelier.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity increased."""

    __version__ = 1

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)


@atelier.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    __version__ = 1

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@atelier.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were dropped, either by the shopper or after a successful checkout."""

    __version__ = 1

    owner_id = Identifier(required=True)
    lines_removed = Integer(required=True)
    cleared_at = DateTime(required=True)


@atelier.event(part_of="ShoppingCart")
class GuestCartMerged:
    """A guest session's lines were folded into a signed-in customer's cart."""

    __version__ = 1

    owner_id = Identifier(required=True)
    lines_merged = Integer(required=True)
