"""Domain events for the CustomerProfile aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from atelier.domain import atelier


@atelier.event(part_of="CustomerProfile")
class CustomerRegistered:
    __version__ = 1

    user_id: Identifier(required=True)
    display_name: String()
    email: String()
    registered_at: DateTime(required=True)


@atelier.event(part_of="CustomerProfile")
class CustomerDetailsUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    display_name: String()
    email: String()


@atelier.event(part_of="CustomerProfile")
class OrderCountedOnProfile:
    """A placed order was added to the customer's running stats."""

    __version__ = 1

    user_id: Identifier(required=True)
    order_total: Integer(required=True)
    total_orders: Integer(required=True)
    total_spent: Integer(required=True)
