"""BDD tests for the order payment and fulfilment lifecycle."""

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from atelier.ordering.order.management import (
    CancelOrder,
    RecordPaymentOutcome,
    RecordShipment,
    RefundOrder,
    UpdateFulfillmentStatus,
)

scenarios("features/order_lifecycle.feature")


def _process(command):
    current_domain.process(command, asynchronous=False)


def attempt(context, action):
    """Run a step the domain may refuse, remembering the refusal."""
    try:
        action()
    except ValidationError as exc:
        context["error"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a placed order paid by "{method}"'))
def _(checkout_service, identity, fill_cart, make_catalog_item, shipping_address, context, method):
    cart = fill_cart(identity.user_id, make_catalog_item(price=41100))
    context["order_id"] = checkout_service.checkout(identity, cart, shipping_address, payment_method=method).order_id


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer completes the payment")
def _(checkout_service, identity, context):
    checkout_service.complete_payment(context["order_id"], identity.user_id)


@when("the customer tries to complete the payment")
def _(checkout_service, identity, context):
    attempt(context, lambda: checkout_service.complete_payment(context["order_id"], identity.user_id))


@when(parsers.cfparse('the payment is recorded as {outcome}'))
def _(context, outcome):
    attempt(context, lambda: _process(RecordPaymentOutcome(order_id=context["order_id"], outcome=outcome)))


@when(parsers.cfparse('the atelier moves the order to "{status}"'))
def _(context, status):
    _process(UpdateFulfillmentStatus(order_id=context["order_id"], status=status))


@when(parsers.cfparse('the atelier ships the order with "{carrier}" tracking "{tracking_code}"'))
def _(context, carrier, tracking_code):
    _process(RecordShipment(order_id=context["order_id"], carrier=carrier, tracking_code=tracking_code))


@when("the atelier tries to refund the order")
def _(context):
    attempt(context, lambda: _process(RefundOrder(order_id=context["order_id"])))


@when("the atelier cancels the order")
def _(context):
    _process(CancelOrder(order_id=context["order_id"], reason="Customer request"))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the status history reads "{statuses}"'))
def _(checkout_service, context, statuses):
    order = checkout_service.get_order(context["order_id"])
    history = sorted(order.status_history, key=lambda entry: entry.sequence)
    assert ", ".join(entry.status for entry in history) == statuses
