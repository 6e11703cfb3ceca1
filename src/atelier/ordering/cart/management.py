"""Cart management — commands and handler for signed-in customers' carts."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from atelier.domain import atelier
from atelier.ordering.cart.cart import ShoppingCart


@atelier.command(part_of="ShoppingCart")
class AddToCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@atelier.command(part_of="ShoppingCart")
class SetCartQuantity:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@atelier.command(part_of="ShoppingCart")
class RemoveFromCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@atelier.command(part_of="ShoppingCart")
class ClearCart:
    owner_id = Identifier(required=True)


@atelier.command(part_of="ShoppingCart")
class MergeGuestCart:
    """Merge the lines a guest collected into the customer's cart after sign-in."""

    owner_id = Identifier(required=True)
    guest_lines = Text(required=True)  # JSON: list of {product_id, quantity}


def load_cart(owner_id):
    """Return the persisted cart for ``owner_id``, or a fresh unsaved one."""
    try:
        return current_domain.repository_for(ShoppingCart).get(owner_id)
    except ObjectNotFoundError:
        return ShoppingCart.create(owner_id=owner_id)


@atelier.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = load_cart(command.owner_id)
        cart.add(command.product_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        cart = load_cart(command.owner_id)
        cart.set_quantity(command.product_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.owner_id)
        cart.remove(command.product_id)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.owner_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        guest_lines = json.loads(command.guest_lines) if isinstance(command.guest_lines, str) else command.guest_lines
        cart = load_cart(command.owner_id)
        cart.merge_guest_cart(guest_lines)
        current_domain.repository_for(ShoppingCart).add(cart)
