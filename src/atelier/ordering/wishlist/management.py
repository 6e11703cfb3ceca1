"""Wishlist management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from atelier.domain import atelier
from atelier.ordering.wishlist.wishlist import Wishlist


@atelier.command(part_of="Wishlist")
class AddToWishlist:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.command(part_of="Wishlist")
class RemoveFromWishlist:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.command(part_of="Wishlist")
class ToggleWishlistItem:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.command(part_of="Wishlist")
class ClearWishlist:
    owner_id = Identifier(required=True)


def load_wishlist(owner_id):
    try:
        return current_domain.repository_for(Wishlist).get(owner_id)
    except ObjectNotFoundError:
        return Wishlist.create(owner_id=owner_id)


@atelier.command_handler(part_of=Wishlist)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        wishlist = load_wishlist(command.owner_id)
        wishlist.add(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        wishlist = load_wishlist(command.owner_id)
        wishlist.remove(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(ToggleWishlistItem)
    def toggle_wishlist_item(self, command):
        wishlist = load_wishlist(command.owner_id)
        saved = wishlist.toggle(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)
        return saved

    @handle(ClearWishlist)
    def clear_wishlist(self, command):
        wishlist = load_wishlist(command.owner_id)
        wishlist.clear()
        current_domain.repository_for(Wishlist).add(wishlist)
