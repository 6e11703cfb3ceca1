"""Domain initialization and configuration.

A single domain holds the catalogue, ordering, identity and payments contexts
so that one unit of work can span the order counter, the order and the
customer profile during checkout.

Protean's traversal only discovers element modules one directory below the
domain file. The contexts nest their elements deeper than that, so
``init_domain`` imports them explicitly before initializing.
"""

import importlib

from protean.domain import Domain

from atelier.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
atelier = Domain(name="atelier")

# Modules that declare aggregates, entities, events, commands, handlers or repositories
ELEMENT_MODULES = (
    "atelier.catalogue.catalog_item",
    "atelier.catalogue.events",
    "atelier.catalogue.management",
    "atelier.catalogue.repository",
    "atelier.identity.profile.profile",
    "atelier.identity.profile.events",
    "atelier.identity.profile.management",
    "atelier.ordering.cart.cart",
    "atelier.ordering.cart.events",
    "atelier.ordering.cart.management",
    "atelier.ordering.wishlist.wishlist",
    "atelier.ordering.wishlist.events",
    "atelier.ordering.wishlist.management",
    "atelier.ordering.order.order",
    "atelier.ordering.order.events",
    "atelier.ordering.order.counter",
    "atelier.ordering.order.management",
    "atelier.ordering.order.repository",
)


def register_elements():
    """Import every element module so its decorators register with ``atelier``."""
    for module_name in ELEMENT_MODULES:
        importlib.import_module(module_name)


def init_domain():
    """Register all elements, then initialize the domain. Returns the domain."""
    register_elements()
    atelier.init()
    logger.debug("domain_initialized", elements=len(ELEMENT_MODULES))
    return atelier
