"""Domain events for the Order aggregate.

Each payment or fulfilment transition raises exactly one of these, alongside
the matching entry appended to the order's status history.
"""

from protean.fields import DateTime, Identifier, Integer, String

from atelier.domain import atelier


@atelier.event(part_of="Order")
class OrderPlaced:
    """A customer completed checkout and the order snapshot was written."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    line_count = Integer(required=True)
    total = Integer(required=True)
    currency = String(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@atelier.event(part_of="Order")
class PaymentSucceeded:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    payment_reference = String()
    amount = Integer(required=True)


@atelier.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    payment_reference = String()
    reason = String()


@atelier.event(part_of="Order")
class PaymentRefunded:
    """An administrator refunded a paid order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    amount = Integer(required=True)
    reason = String()


@atelier.event(part_of="Order")
class OrderStatusChanged:
    """The fulfilment status moved forward (confirmed, processing, delivered)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@atelier.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    carrier = String(required=True)
    tracking_code = String(required=True)
    shipped_at = DateTime(required=True)


@atelier.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
