"""Order assembly — turn a cart into an Order snapshot.

Nothing here touches a repository: the caller hands in the issued order
number and the catalog rows the cart refers to, and gets back an unsaved
Order whose lines carry the titles, images and prices current right now.
"""

from dataclasses import dataclass, field
from enum import Enum

from atelier.catalogue.catalog_item import CatalogItem
from atelier.identity.identity import Identity
from atelier.ordering.cart.cart import ShoppingCart
from atelier.ordering.checkout.errors import (
    EmptyCartError,
    IncompleteAddressError,
    ItemUnavailableError,
    UnsupportedPaymentMethodError,
)
from atelier.ordering.order.order import Order

REQUIRED_ADDRESS_FIELDS = ("recipient_name", "line1", "city", "postal_code", "country")
ADDRESS_FIELDS = REQUIRED_ADDRESS_FIELDS + ("line2", "phone")


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    PIX = "pix"
    BANK_TRANSFER = "bank_transfer"

    @property
    def settles_immediately(self):
        # Pix and bank transfers are confirmed later by the customer
        return self is PaymentMethod.CREDIT_CARD

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedPaymentMethodError(value) from None


@dataclass(frozen=True)
class ShippingRateTable:
    """Fixed shipping rates: one flat rate, optionally overridden per country."""

    flat_rate: int = 500
    country_rates: dict[str, int] = field(default_factory=dict)
    label: str = "Standard Shipping"

    def rate_for(self, country):
        return self.country_rates.get((country or "").upper(), self.flat_rate)


def normalize_address(address, kind):
    """Return the address as a clean dict, or raise IncompleteAddressError."""
    address = dict(address or {})
    cleaned = {}
    for name in ADDRESS_FIELDS:
        value = address.get(name)
        if isinstance(value, str):
            value = value.strip() or None
        cleaned[name] = value

    missing = [name for name in REQUIRED_ADDRESS_FIELDS if not cleaned[name]]
    if missing:
        raise IncompleteAddressError(kind, missing)

    cleaned["country"] = cleaned["country"].upper()
    return cleaned


def check_preconditions(cart: ShoppingCart, shipping, billing=None):
    """Validate what can be validated without reading anything.

    Returns the normalized (shipping, billing) pair. A missing billing
    address means billing to the shipping address.
    """
    if cart is None or cart.is_empty:
        raise EmptyCartError()

    shipping_address = normalize_address(shipping, "shipping")
    billing_address = normalize_address(billing, "billing") if billing else dict(shipping_address)
    return shipping_address, billing_address


def snapshot_line(line, item: CatalogItem | None, language, fallback_language):
    product_id = str(line.product_id)
    if item is None:
        raise ItemUnavailableError(product_id, "not found")
    if not item.is_published:
        raise ItemUnavailableError(product_id, "not published")
    if not item.can_fulfil(line.quantity):
        raise ItemUnavailableError(product_id, "sold out or not enough stock")

    image = item.primary_image
    return {
        "product_id": product_id,
        "quantity": line.quantity,
        "title": item.title_for(language, fallback_language),
        "image_url": image.url if image else None,
        "unit_price": item.price.amount,
    }


def assemble_order(
    sequence_number: int,
    identity: Identity,
    cart: ShoppingCart,
    catalog: dict[str, CatalogItem],
    shipping,
    billing,
    payment_method,
    shipping_rates: ShippingRateTable,
    language: str = "en",
    fallback_language: str = "en",
    currency: str = "EUR",
) -> Order:
    """Build the Order for ``cart``. Tax and discount are always zero."""
    shipping_address, billing_address = check_preconditions(cart, shipping, billing)
    method = PaymentMethod.parse(payment_method)

    lines = [
        snapshot_line(line, catalog.get(str(line.product_id)), language, fallback_language)
        for line in cart.lines
    ]

    return Order.place(
        sequence_number=sequence_number,
        customer_id=identity.user_id,
        customer_name=identity.display_name,
        customer_email=identity.email,
        lines=lines,
        shipping_address=shipping_address,
        billing_address=billing_address,
        payment_method=method.value,
        shipping_cost=shipping_rates.rate_for(shipping_address["country"]),
        shipping_method=shipping_rates.label,
        currency=currency,
        language=language,
    )
