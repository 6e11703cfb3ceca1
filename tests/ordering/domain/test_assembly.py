"""Tests for turning a cart into an Order snapshot, without touching storage."""

import pytest

from atelier.catalogue.catalog_item import CatalogItem
from atelier.identity.identity import Identity
from atelier.ordering.cart.cart import ShoppingCart
from atelier.ordering.checkout.assembly import (
    PaymentMethod,
    ShippingRateTable,
    assemble_order,
    check_preconditions,
    normalize_address,
)
from atelier.ordering.checkout.errors import (
    EmptyCartError,
    IncompleteAddressError,
    ItemUnavailableError,
    UnsupportedPaymentMethodError,
)

IDENTITY = Identity(user_id="cust-001", display_name="Ana Souza", email="ana@example.com")

ADDRESS = {
    "recipient_name": "Ana Souza",
    "line1": "Rua das Flores 12",
    "city": "Lisboa",
    "postal_code": "1100-001",
    "country": "pt",
}


def _item(price=41100, stock=1, status="available", published=True):
    item = CatalogItem.create(
        category="painting",
        translations={
            "en": {"title": "Harbour at Dusk"},
            "pt": {"title": "Porto ao Entardecer"},
        },
        price=price,
        images=[{"url": "https://cdn.example.com/h.jpg", "thumbnail_url": "https://cdn.example.com/h_t.jpg"}],
        status=status,
        stock=stock,
    )
    if published:
        item.publish()
    return item


def _cart_with(*items, quantity=1):
    cart = ShoppingCart.create(owner_id="cust-001")
    for item in items:
        cart.add(str(item.id), quantity)
    return cart


def _assemble(cart, catalog, **overrides):
    kwargs = {
        "sequence_number": 1006,
        "identity": IDENTITY,
        "cart": cart,
        "catalog": catalog,
        "shipping": ADDRESS,
        "billing": None,
        "payment_method": "credit_card",
        "shipping_rates": ShippingRateTable(flat_rate=500),
    }
    kwargs.update(overrides)
    return assemble_order(**kwargs)


class TestAssembleOrder:
    def test_two_line_cart_with_flat_shipping(self):
        etching = _item(price=4500)
        painting = _item(price=18000, stock=2)
        cart = ShoppingCart.create(owner_id="cust-001")
        cart.add(str(etching.id), 1)
        cart.add(str(painting.id), 2)

        order = _assemble(cart, {str(etching.id): etching, str(painting.id): painting})

        assert order.order_number == "#1006"
        assert order.pricing.subtotal == 40500
        assert order.pricing.shipping == 500
        assert order.pricing.total == 41000
        assert order.payment_status == "pending"
        assert order.status == "pending"
        assert order.shipping_method == "Standard Shipping"

    def test_lines_snapshot_title_image_and_price(self):
        item = _item(price=41100)
        order = _assemble(_cart_with(item), {str(item.id): item}, language="pt")

        line = order.lines[0]
        assert line.title == "Porto ao Entardecer"
        assert line.image_url == "https://cdn.example.com/h.jpg"
        assert line.unit_price == 41100
        assert order.language == "pt"

    def test_unknown_language_falls_back(self):
        item = _item()
        order = _assemble(_cart_with(item), {str(item.id): item}, language="de")
        assert order.lines[0].title == "Harbour at Dusk"

    def test_customer_details_come_from_identity(self):
        item = _item()
        order = _assemble(_cart_with(item), {str(item.id): item})
        assert order.customer_id == "cust-001"
        assert order.customer_name == "Ana Souza"
        assert order.customer_email == "ana@example.com"

    def test_billing_defaults_to_shipping(self):
        item = _item()
        order = _assemble(_cart_with(item), {str(item.id): item})
        assert order.billing_address.city == "Lisboa"
        assert order.billing_address.country == "PT"

    def test_country_rate_overrides_flat_rate(self):
        item = _item()
        rates = ShippingRateTable(flat_rate=500, country_rates={"PT": 300})
        order = _assemble(_cart_with(item), {str(item.id): item}, shipping_rates=rates)
        assert order.pricing.shipping == 300
        assert order.pricing.total == 41400

    def test_missing_item_is_unavailable(self):
        item = _item()
        with pytest.raises(ItemUnavailableError) as exc:
            _assemble(_cart_with(item), {})
        assert exc.value.reason == "not found"
        assert exc.value.product_id == str(item.id)

    def test_unpublished_item_is_unavailable(self):
        item = _item(published=False)
        with pytest.raises(ItemUnavailableError) as exc:
            _assemble(_cart_with(item), {str(item.id): item})
        assert exc.value.reason == "not published"

    def test_sold_item_is_unavailable(self):
        item = _item(status="sold", stock=0)
        with pytest.raises(ItemUnavailableError):
            _assemble(_cart_with(item), {str(item.id): item})

    def test_quantity_beyond_stock_is_unavailable(self):
        item = _item(stock=1)
        with pytest.raises(ItemUnavailableError):
            _assemble(_cart_with(item, quantity=2), {str(item.id): item})

    def test_made_to_order_ignores_stock(self):
        item = _item(status="made_to_order", stock=0)
        order = _assemble(_cart_with(item, quantity=3), {str(item.id): item})
        assert order.item_count == 3


class TestPreconditions:
    def test_empty_cart(self):
        with pytest.raises(EmptyCartError):
            check_preconditions(ShoppingCart.create(owner_id="cust-001"), ADDRESS)

    def test_missing_cart(self):
        with pytest.raises(EmptyCartError):
            check_preconditions(None, ADDRESS)

    def test_incomplete_shipping_address(self):
        cart = _cart_with(_item())
        with pytest.raises(IncompleteAddressError) as exc:
            check_preconditions(cart, {**ADDRESS, "postal_code": "  ", "city": None})
        assert exc.value.kind == "shipping"
        assert exc.value.missing == ["city", "postal_code"]
        assert "shipping_address" in exc.value.messages

    def test_incomplete_billing_address(self):
        cart = _cart_with(_item())
        with pytest.raises(IncompleteAddressError) as exc:
            check_preconditions(cart, ADDRESS, {"recipient_name": "Ana"})
        assert exc.value.kind == "billing"

    def test_normalize_strips_and_uppercases(self):
        cleaned = normalize_address({**ADDRESS, "line1": "  Rua das Flores 12 ", "line2": ""}, "shipping")
        assert cleaned["line1"] == "Rua das Flores 12"
        assert cleaned["line2"] is None
        assert cleaned["country"] == "PT"


class TestPaymentMethod:
    def test_only_card_settles_immediately(self):
        assert PaymentMethod.CREDIT_CARD.settles_immediately
        assert not PaymentMethod.PIX.settles_immediately
        assert not PaymentMethod.BANK_TRANSFER.settles_immediately

    def test_unsupported_method(self):
        with pytest.raises(UnsupportedPaymentMethodError) as exc:
            PaymentMethod.parse("cheque")
        assert "payment_method" in exc.value.messages
