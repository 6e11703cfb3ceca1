"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from atelier.ordering.order.counter import ORDER_COUNTER_KEY, OrderCounter


@pytest.fixture()
def context():
    """Scenario state: artworks by title, the order under test and the last rejection."""
    return {"artworks": {}, "order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("the order counter last issued {value:d}"))
def _(value):
    current_domain.repository_for(OrderCounter).add(OrderCounter(counter_key=ORDER_COUNTER_KEY, last_issued=value))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the payment status is "{status}"'))
def _(checkout_service, context, status):
    assert checkout_service.get_order(context["order_id"]).payment_status == status


@then(parsers.cfparse('the order status is "{status}"'))
def _(checkout_service, context, status):
    assert checkout_service.get_order(context["order_id"]).status == status


@then("the change is rejected")
def _(context):
    assert isinstance(context["error"], ValidationError)
