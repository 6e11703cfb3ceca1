"""BDD tests for checkout."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from atelier.catalogue.management import ChangeCatalogItemPrice, UnpublishCatalogItem
from atelier.identity.profile.profile import CustomerProfile
from atelier.ordering.cart.management import load_cart
from atelier.ordering.checkout.errors import ItemUnavailableError
from atelier.ordering.order.counter import ORDER_COUNTER_KEY, OrderCounter

scenarios("features/checkout.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a published artwork "{title}" priced {price:d} with {stock:d} in stock'))
def _(make_catalog_item, context, title, price, stock):
    context["artworks"][title] = make_catalog_item(title=title, price=price, stock=stock)


@given(parsers.cfparse('the customer has {quantity:d} of "{title}" in the cart'))
def _(fill_cart, identity, context, quantity, title):
    fill_cart(identity.user_id, context["artworks"][title], quantity=quantity)


@given("the payment simulator is offline")
def _(simulator):
    simulator.configure(error=RuntimeError("simulator offline"))


@given(parsers.cfparse('"{title}" is withdrawn from the catalog'))
def _(context, title):
    item_id = str(context["artworks"][title].id)
    current_domain.process(UnpublishCatalogItem(item_id=item_id), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer checks out paying by "{method}"'))
def _(checkout_service, identity, shipping_address, context, method):
    result = checkout_service.checkout(identity, load_cart(identity.user_id), shipping_address, payment_method=method)
    context["order_id"] = result.order_id


@when(parsers.cfparse('the customer tries to check out paying by "{method}"'))
def _(checkout_service, identity, shipping_address, context, method):
    try:
        checkout_service.checkout(identity, load_cart(identity.user_id), shipping_address, payment_method=method)
    except ItemUnavailableError as exc:
        context["error"] = exc


@when("the card payment is settled")
def _(checkout_service, context):
    checkout_service.settle_payment(context["order_id"])


@when(parsers.cfparse('"{title}" is repriced to {price:d}'))
def _(context, title, price):
    item_id = str(context["artworks"][title].id)
    current_domain.process(ChangeCatalogItemPrice(item_id=item_id, price=price), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order number is "{number}"'))
def _(checkout_service, context, number):
    assert checkout_service.get_order(context["order_id"]).order_number == number


@then(parsers.cfparse("the order subtotal is {amount:d}"))
def _(checkout_service, context, amount):
    assert checkout_service.get_order(context["order_id"]).pricing.subtotal == amount


@then(parsers.cfparse("the order total is {amount:d}"))
def _(checkout_service, context, amount):
    assert checkout_service.get_order(context["order_id"]).pricing.total == amount


@then(parsers.cfparse("the customer has {count:d} order totalling {amount:d}"))
def _(identity, count, amount):
    profile = current_domain.repository_for(CustomerProfile).get(identity.user_id)
    assert profile.total_orders == count
    assert profile.total_spent == amount


@then(parsers.cfparse("the order counter last issued {value:d}"))
def _(value):
    assert current_domain.repository_for(OrderCounter).get(ORDER_COUNTER_KEY).last_issued == value


@then("the checkout is rejected because an item is unavailable")
def _(context):
    assert isinstance(context["error"], ItemUnavailableError)


@then(parsers.cfparse('the order line for "{title}" is priced {price:d}'))
def _(checkout_service, context, title, price):
    product_id = str(context["artworks"][title].id)
    order = checkout_service.get_order(context["order_id"])
    line = next(line for line in order.lines if str(line.product_id) == product_id)
    assert line.unit_price == price
