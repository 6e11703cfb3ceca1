"""Shared fixtures for the Ordering tests."""

import pytest
from protean import current_domain

from atelier.identity.identity import Identity
from atelier.ordering.cart.management import AddToCart, load_cart
from atelier.ordering.checkout.checkout import CheckoutService
from atelier.payments.gateway.fake_adapter import FakePaymentSimulator


@pytest.fixture()
def identity():
    return Identity(user_id="cust-001", display_name="Ana Souza", email="ana@example.com")


@pytest.fixture()
def simulator():
    return FakePaymentSimulator()


@pytest.fixture()
def checkout_service(simulator):
    return CheckoutService(simulator=simulator)


@pytest.fixture()
def fill_cart():
    """Persist cart lines for a customer and return the stored cart."""

    def _fill(owner_id, *items, quantity=1):
        for item in items:
            current_domain.process(
                AddToCart(owner_id=owner_id, product_id=str(item.id), quantity=quantity),
                asynchronous=False,
            )
        return load_cart(owner_id)

    return _fill
