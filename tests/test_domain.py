"""Tests for domain composition: every element module is registered before init."""

from pathlib import Path

import atelier as atelier_package
from atelier.catalogue.catalog_item import CatalogItem
from atelier.catalogue.management import CreateCatalogItem
from atelier.domain import ELEMENT_MODULES, atelier
from atelier.identity.profile.management import RegisterCustomer
from atelier.identity.profile.profile import CustomerProfile
from atelier.ordering.cart.cart import ShoppingCart
from atelier.ordering.cart.management import AddToCart
from atelier.ordering.order.counter import OrderCounter
from atelier.ordering.order.management import RecordPaymentOutcome
from atelier.ordering.order.order import Order
from atelier.ordering.wishlist.management import ToggleWishlistItem
from atelier.ordering.wishlist.wishlist import Wishlist


def _modules_declaring_elements():
    package_root = Path(atelier_package.__file__).parent
    return {
        ".".join(path.relative_to(package_root.parent).with_suffix("").parts)
        for path in package_root.rglob("*.py")
        if "@atelier." in path.read_text()
    }


class TestElementModules:
    def test_every_declaring_module_is_listed(self):
        assert _modules_declaring_elements() <= set(ELEMENT_MODULES)

    def test_listed_modules_exist(self):
        assert set(ELEMENT_MODULES) <= _modules_declaring_elements()


class TestRegistry:
    def test_aggregates(self):
        registered = {record.cls for record in atelier.registry.aggregates.values()}
        assert {CatalogItem, ShoppingCart, Wishlist, Order, OrderCounter, CustomerProfile} <= registered

    def test_commands(self):
        registered = {record.cls for record in atelier.registry.commands.values()}
        assert {CreateCatalogItem, AddToCart, ToggleWishlistItem, RecordPaymentOutcome, RegisterCustomer} <= registered

    def test_every_aggregate_has_a_handler(self):
        handled = {record.cls.meta_.part_of for record in atelier.registry.command_handlers.values()}
        assert {CatalogItem, ShoppingCart, Wishlist, Order, CustomerProfile} <= handled
