"""Domain events for the Wishlist aggregate."""

from protean.fields import Identifier

from atelier.domain import atelier


@atelier.event(part_of="Wishlist")
class WishlistItemAdded:
    __version__ = 1

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.event(part_of="Wishlist")
class WishlistItemRemoved:
    __version__ = 1

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
